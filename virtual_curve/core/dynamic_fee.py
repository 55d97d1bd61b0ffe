"""
Volatility-driven variable fee.

Price movement is measured in bins of `bin_step` basis points between the
tracker's reference price and the current price. On each swap attempt the
tracker is reconciled against the time since its last committed update:

    elapsed <  filter_period                  reference kept (high-frequency trading)
    filter_period <= elapsed < decay_period   reference = accumulator * reduction_factor / 10_000
    elapsed >= decay_period                   reference = 0

and the accumulator becomes reference + movement * 10_000, clamped to
`max_volatility_accumulator`. The variable fee is quadratic in the accumulator.

A disabled dynamic fee is `None` and contributes exactly zero.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

from ..errors import InvalidInputError
from ..kernels.python.fee_math import BASIS_POINT_MAX, ONE_Q64, SCALE_OFFSET
from ..kernels.python.safe_math import (
    U24_MAX,
    Rounding,
    div_ceil,
    require_uint,
    safe_add,
    safe_div,
    safe_mul,
    safe_shl_div_cast,
    safe_sub,
)
from ..state.config import BaseFeeConfig, DynamicFeeConfig, PoolFeesConfig
from ..state.volatility import VolatilityTracker
from .fee_scheduler import get_current_base_fee_numerator
from .fees import MAX_FEE_NUMERATOR, VARIABLE_FEE_SCALE


# Only 1 bps bins are supported.
BIN_STEP_BPS_DEFAULT = 1
BIN_STEP_BPS_U128_DEFAULT = (BIN_STEP_BPS_DEFAULT << SCALE_OFFSET) // BASIS_POINT_MAX


def validate_dynamic_fee_config(config: DynamicFeeConfig) -> None:
    if config.bin_step != BIN_STEP_BPS_DEFAULT:
        raise InvalidInputError(f"bin_step must be {BIN_STEP_BPS_DEFAULT}: {config.bin_step}")
    if config.bin_step_u128 != BIN_STEP_BPS_U128_DEFAULT:
        raise InvalidInputError(f"bin_step_u128 must be {BIN_STEP_BPS_U128_DEFAULT}: {config.bin_step_u128}")
    if config.filter_period >= config.decay_period:
        raise InvalidInputError(
            f"filter_period must be below decay_period: {config.filter_period} >= {config.decay_period}"
        )
    if config.reduction_factor > BASIS_POINT_MAX:
        raise InvalidInputError(f"reduction_factor must be <= {BASIS_POINT_MAX}: {config.reduction_factor}")
    if config.variable_fee_control > U24_MAX:
        raise InvalidInputError(f"variable_fee_control must be <= {U24_MAX}")
    if config.max_volatility_accumulator > U24_MAX:
        raise InvalidInputError(f"max_volatility_accumulator must be <= {U24_MAX}")


def get_delta_bin_id(bin_step_u128: int, sqrt_price_a: int, sqrt_price_b: int) -> int:
    """Number of bins between two sqrt prices, doubled (sqrt -> price)."""
    upper, lower = (sqrt_price_a, sqrt_price_b) if sqrt_price_a > sqrt_price_b else (sqrt_price_b, sqrt_price_a)
    price_ratio = safe_shl_div_cast(upper, lower, SCALE_OFFSET, Rounding.DOWN)
    delta_bin_id = safe_div(safe_sub(price_ratio, ONE_Q64), bin_step_u128)
    return safe_mul(delta_bin_id, 2)


def update_references(
    tracker: VolatilityTracker,
    config: DynamicFeeConfig,
    sqrt_price: int,
    current_timestamp: int,
) -> VolatilityTracker:
    """Decay the volatility reference for the time since the last committed update."""
    require_uint("current_timestamp", current_timestamp, 64)
    elapsed = safe_sub(current_timestamp, tracker.last_update_timestamp, bits=64)
    if elapsed < config.filter_period:
        return tracker

    if elapsed < config.decay_period:
        volatility_reference = safe_mul(tracker.volatility_accumulator, config.reduction_factor) // BASIS_POINT_MAX
    else:
        volatility_reference = 0
    return replace(tracker, sqrt_price_reference=sqrt_price, volatility_reference=volatility_reference)


def update_volatility_accumulator(
    tracker: VolatilityTracker,
    config: DynamicFeeConfig,
    sqrt_price: int,
) -> VolatilityTracker:
    """Recompute the accumulator from movement since the reference price.

    A tracker with no reference price yet is anchored at `sqrt_price`, so it
    records no movement.
    """
    if tracker.sqrt_price_reference == 0:
        tracker = replace(tracker, sqrt_price_reference=sqrt_price)
    delta_bins = get_delta_bin_id(config.bin_step_u128, sqrt_price, tracker.sqrt_price_reference)
    accumulator = safe_add(tracker.volatility_reference, safe_mul(delta_bins, BASIS_POINT_MAX))
    accumulator = min(accumulator, config.max_volatility_accumulator)
    return replace(tracker, volatility_accumulator=accumulator)


def refresh_volatility_tracker(
    tracker: VolatilityTracker,
    config: Optional[DynamicFeeConfig],
    sqrt_price: int,
    current_timestamp: int,
) -> VolatilityTracker:
    """Once-per-swap reconciliation: decay references, then re-accumulate at `sqrt_price`."""
    if config is None:
        return tracker
    tracker = update_references(tracker, config, sqrt_price, current_timestamp)
    return update_volatility_accumulator(tracker, config, sqrt_price)


def get_variable_fee(config: Optional[DynamicFeeConfig], volatility_accumulator: int) -> int:
    """`ceil((accumulator * bin_step) ** 2 * variable_fee_control / 1e11)`, 0 when disabled."""
    if config is None:
        return 0
    vfa_bin = safe_mul(volatility_accumulator, config.bin_step)
    square_vfa_bin = safe_mul(vfa_bin, vfa_bin)
    v_fee = safe_mul(square_vfa_bin, config.variable_fee_control)
    return div_ceil(v_fee, VARIABLE_FEE_SCALE)


def get_total_fee_numerator(
    pool_fees: PoolFeesConfig,
    current_point: int,
    activation_point: int,
    tracker: VolatilityTracker,
) -> int:
    """Base + variable fee numerator, clamped to MAX_FEE_NUMERATOR."""
    base_fee: BaseFeeConfig = pool_fees.base_fee
    base_numerator = get_current_base_fee_numerator(base_fee, current_point, activation_point)
    variable_numerator = get_variable_fee(pool_fees.dynamic_fee, tracker.volatility_accumulator)
    total = safe_add(base_numerator, variable_numerator)
    return min(total, MAX_FEE_NUMERATOR)
