"""
Exact-input swap engine for single-range virtual pools.

Algorithm:
- fee numerator = base schedule at `current_point` + variable fee, clamped to MAX_FEE_NUMERATOR
- fee on input:  fee = calculate_fee(amount_in); price the net input
- fee on output: price the gross input; fee = calculate_fee(gross_out); pay gross_out - fee
- split the fee protocol-first (referral carved from the protocol share)

Base-to-quote moves the price down toward `sqrt_min_price`; quote-to-base
moves it up toward `sqrt_max_price`. Liquidity never changes inside the range.

`compute_swap` is pure. `swap_exact_in` is the mutating path: it returns the
result together with a replacement pool value for the host to persist.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Tuple

from ..errors import CurveCompletedError, NotEnoughLiquidityError, ZeroAmountError
from ..kernels.python.safe_math import Rounding, require_uint, safe_add, safe_sub
from ..state.config import PoolConfig
from ..state.pools import ActivationType, VirtualPool
from ..state.volatility import VolatilityTracker
from .curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_next_sqrt_price_from_input,
)
from .dynamic_fee import get_total_fee_numerator, refresh_volatility_tracker, update_volatility_accumulator
from .fee_mode import FeeMode, TradeDirection, get_fee_mode
from .fees import FEE_DENOMINATOR, calculate_fee, split_fee


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapAmount:
    output_amount: int
    next_sqrt_price: int


@dataclass(frozen=True)
class SwapResult:
    actual_input_amount: int
    output_amount: int
    total_fee: int
    protocol_fee: int
    referral_fee: int
    trading_fee: int
    next_sqrt_price: int
    next_liquidity: int

    def __post_init__(self) -> None:
        for name in (
            "actual_input_amount",
            "output_amount",
            "total_fee",
            "protocol_fee",
            "referral_fee",
            "trading_fee",
        ):
            require_uint(name, getattr(self, name), 64)
        require_uint("next_sqrt_price", self.next_sqrt_price, 128)
        require_uint("next_liquidity", self.next_liquidity, 128)
        if self.protocol_fee + self.referral_fee + self.trading_fee != self.total_fee:
            raise AssertionError("swap result fee split does not conserve total_fee")


def get_swap_amount(pool: VirtualPool, config: PoolConfig, amount_in: int, direction: TradeDirection) -> SwapAmount:
    """Output amount and next price for `amount_in` (already net of any input fee)."""
    if direction is TradeDirection.BASE_TO_QUOTE:
        next_sqrt_price = get_next_sqrt_price_from_input(pool.sqrt_price, pool.liquidity, amount_in, True)
        if next_sqrt_price < config.sqrt_min_price:
            raise NotEnoughLiquidityError(
                f"next sqrt price {next_sqrt_price} below sqrt_min_price {config.sqrt_min_price}"
            )
        output_amount = get_delta_amount_quote_unsigned(
            next_sqrt_price, pool.sqrt_price, pool.liquidity, Rounding.DOWN
        )
    elif direction is TradeDirection.QUOTE_TO_BASE:
        next_sqrt_price = get_next_sqrt_price_from_input(pool.sqrt_price, pool.liquidity, amount_in, False)
        if next_sqrt_price > config.sqrt_max_price:
            raise NotEnoughLiquidityError(
                f"next sqrt price {next_sqrt_price} above sqrt_max_price {config.sqrt_max_price}"
            )
        output_amount = get_delta_amount_base_unsigned(
            pool.sqrt_price, next_sqrt_price, pool.liquidity, Rounding.DOWN
        )
    else:
        raise TypeError(f"direction must be a TradeDirection, got {direction!r}")
    return SwapAmount(output_amount=output_amount, next_sqrt_price=next_sqrt_price)


def compute_swap(
    pool: VirtualPool,
    config: PoolConfig,
    amount_in: int,
    fee_mode: FeeMode,
    direction: TradeDirection,
    current_point: int,
    activation_point: int,
    volatility_tracker: VolatilityTracker,
) -> SwapResult:
    """
    Price an exact-input swap against `pool` without touching it.

    Raises:
        MathOverflowError: On any checked-arithmetic failure
        TypeCastFailedError: If an intermediate does not fit its result width
        InvalidInputError: On an unrecognised fee scheduler mode
        NotEnoughLiquidityError: If the price would leave the curve range
    """
    require_uint("amount_in", amount_in, 64)
    pool_fees = config.pool_fees
    fee_numerator = get_total_fee_numerator(pool_fees, current_point, activation_point, volatility_tracker)

    if fee_mode.fees_on_input:
        total_fee = calculate_fee(amount_in, fee_numerator, FEE_DENOMINATOR)
        actual_input_amount = safe_sub(amount_in, total_fee, bits=64)
        swap_amount = get_swap_amount(pool, config, actual_input_amount, direction)
        output_amount = swap_amount.output_amount
    else:
        actual_input_amount = amount_in
        swap_amount = get_swap_amount(pool, config, actual_input_amount, direction)
        total_fee = calculate_fee(swap_amount.output_amount, fee_numerator, FEE_DENOMINATOR)
        output_amount = safe_sub(swap_amount.output_amount, total_fee, bits=64)

    split = split_fee(
        total_fee,
        protocol_fee_percent=pool_fees.protocol_fee_percent,
        referral_fee_percent=pool_fees.referral_fee_percent,
        has_referral=fee_mode.has_referral,
    )

    return SwapResult(
        actual_input_amount=actual_input_amount,
        output_amount=output_amount,
        total_fee=split.total_fee,
        protocol_fee=split.protocol_fee,
        referral_fee=split.referral_fee,
        trading_fee=split.trading_fee,
        next_sqrt_price=swap_amount.next_sqrt_price,
        next_liquidity=pool.liquidity,
    )


def check_swap_preconditions(pool: VirtualPool, config: PoolConfig, amount_in: int) -> None:
    """Reject a graduated curve or an empty input before any math runs."""
    if pool.is_curve_complete(config.migration_quote_threshold):
        raise CurveCompletedError("virtual pool is completed")
    if amount_in == 0:
        raise ZeroAmountError("amount is zero")


def current_point_for(config: PoolConfig, current_timestamp: int, current_slot: int) -> int:
    activation_type = ActivationType.parse(config.activation_type)
    if activation_type is ActivationType.SLOT:
        return current_slot
    if activation_type is ActivationType.TIMESTAMP:
        return current_timestamp
    raise AssertionError(f"unhandled activation type: {activation_type}")


def apply_swap_result(
    pool: VirtualPool,
    config: PoolConfig,
    result: SwapResult,
    fee_mode: FeeMode,
    direction: TradeDirection,
    current_timestamp: int,
) -> VirtualPool:
    """
    Post-swap pool value.

    The input reserve grows by the net input. The output reserve shrinks by
    the gross output (the fee stays behind when charged on output). Protocol
    and trading fees accrue per asset; the referral fee leaves the pool.
    """
    retained_fee = 0 if fee_mode.fees_on_input else result.total_fee
    gross_output = safe_add(result.output_amount, retained_fee, bits=64)

    base_reserve = pool.base_reserve
    quote_reserve = pool.quote_reserve
    if direction is TradeDirection.BASE_TO_QUOTE:
        base_reserve = safe_add(base_reserve, result.actual_input_amount, bits=64)
        quote_reserve = safe_sub(quote_reserve, gross_output, bits=64)
    else:
        quote_reserve = safe_add(quote_reserve, result.actual_input_amount, bits=64)
        base_reserve = safe_sub(base_reserve, gross_output, bits=64)

    if fee_mode.fees_on_base_token:
        fee_fields = {
            "protocol_base_fee": safe_add(pool.protocol_base_fee, result.protocol_fee, bits=64),
            "trading_base_fee": safe_add(pool.trading_base_fee, result.trading_fee, bits=64),
        }
    else:
        fee_fields = {
            "protocol_quote_fee": safe_add(pool.protocol_quote_fee, result.protocol_fee, bits=64),
            "trading_quote_fee": safe_add(pool.trading_quote_fee, result.trading_fee, bits=64),
        }

    tracker = pool.volatility_tracker
    dynamic_fee = config.pool_fees.dynamic_fee
    if dynamic_fee is not None:
        tracker = update_volatility_accumulator(tracker, dynamic_fee, result.next_sqrt_price)
        tracker = replace(tracker, last_update_timestamp=current_timestamp)

    return replace(
        pool,
        sqrt_price=result.next_sqrt_price,
        liquidity=result.next_liquidity,
        base_reserve=base_reserve,
        quote_reserve=quote_reserve,
        volatility_tracker=tracker,
        **fee_fields,
    )


def swap_exact_in(
    pool: VirtualPool,
    config: PoolConfig,
    swap_base_for_quote: bool,
    current_timestamp: int,
    current_slot: int,
    amount_in: int,
    has_referral: bool,
) -> Tuple[SwapResult, VirtualPool]:
    """Execute an exact-input swap and return (result, new pool value)."""
    check_swap_preconditions(pool, config, amount_in)

    tracker = refresh_volatility_tracker(
        pool.volatility_tracker, config.pool_fees.dynamic_fee, pool.sqrt_price, current_timestamp
    )
    pool = replace(pool, volatility_tracker=tracker)

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
    new_pool = apply_swap_result(pool, config, result, fee_mode, direction, current_timestamp)
    logger.debug(
        "swap %s amount_in=%d out=%d fee=%d sqrt_price %d -> %d",
        direction.value,
        amount_in,
        result.output_amount,
        result.total_fee,
        pool.sqrt_price,
        new_pool.sqrt_price,
    )
    return result, new_pool
