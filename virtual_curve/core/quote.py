"""
Read-only quoting facade.

Quotes may be requested speculatively and concurrently, so they work on a
snapshot: the volatility tracker is refreshed as a new value and the caller's
pool is never touched. The committed path is `virtual_curve.core.swap.swap_exact_in`.
"""

from __future__ import annotations

import logging

from ..state.config import PoolConfig
from ..state.pools import VirtualPool
from .dynamic_fee import refresh_volatility_tracker
from .fee_mode import TradeDirection, get_fee_mode
from .swap import SwapResult, check_swap_preconditions, compute_swap, current_point_for


logger = logging.getLogger(__name__)


def quote_exact_in(
    pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    current_timestamp: int,
    current_slot: int,
    amount_in: int,
    has_referral: bool,
) -> SwapResult:
    """
    Quote an exact-input swap.

    `amount_in` must already exclude any token transfer fee; computing that
    is the caller's job.

    Raises:
        CurveCompletedError: If the pool reached its migration threshold
        ZeroAmountError: If amount_in is zero
        InvalidInputError: On an unrecognised activation type or collect fee mode
        MathOverflowError, TypeCastFailedError, NotEnoughLiquidityError: From the swap engine
    """
    check_swap_preconditions(pool, config, amount_in)

    tracker = refresh_volatility_tracker(
        pool.volatility_tracker, config.pool_fees.dynamic_fee, pool.sqrt_price, current_timestamp
    )

    current_point = current_point_for(config, current_timestamp, current_slot)
    direction = TradeDirection.from_swap_base_for_quote(swap_base_for_quote)
    fee_mode = get_fee_mode(config.collect_fee_mode, direction, has_referral)

    result = compute_swap(
        pool,
        config,
        amount_in,
        fee_mode,
        direction,
        current_point,
        pool.activation_point,
        tracker,
    )
    logger.debug(
        "quote %s amount_in=%d out=%d fee=%d next_sqrt_price=%d",
        direction.value,
        amount_in,
        result.output_amount,
        result.total_fee,
        result.next_sqrt_price,
    )
    return result


def fee_mint_for(
    config: PoolConfig,
    pool: VirtualPool,
    swap_base_for_quote: bool,
    has_referral: bool,
) -> str:
    """Mint the fee for this trade will be charged in."""
    direction = TradeDirection.from_swap_base_for_quote(swap_base_for_quote)
    fee_mode = get_fee_mode(config.collect_fee_mode, direction, has_referral)
    return pool.base_mint if fee_mode.fees_on_base_token else config.quote_mint
