"""
Base fee schedule.

The base fee starts at `cliff_fee_numerator` at activation and steps down once
per `period_frequency` (slots or seconds, per the pool's activation type) for
at most `number_of_period` periods:

- LINEAR:       cliff - p * reduction_factor
- EXPONENTIAL:  cliff * (1 - reduction_factor / 10_000) ** p

Trades before the activation point pay the floor (p = number_of_period).
"""

from __future__ import annotations

from enum import Enum, unique

from ..errors import InvalidFeeSchedulerModeError
from ..kernels.python.fee_math import get_fee_in_period
from ..kernels.python.safe_math import require_uint, safe_div, safe_mul, safe_sub
from ..state.config import BaseFeeConfig


@unique
class FeeSchedulerMode(Enum):
    LINEAR = 0
    EXPONENTIAL = 1

    @classmethod
    def parse(cls, value: int) -> "FeeSchedulerMode":
        try:
            return cls(value)
        except ValueError:
            raise InvalidFeeSchedulerModeError(f"invalid fee scheduler mode: {value!r}") from None


def get_base_fee_numerator_by_period(config: BaseFeeConfig, period: int) -> int:
    period = min(period, config.number_of_period)
    mode = FeeSchedulerMode.parse(config.fee_scheduler_mode)
    if mode is FeeSchedulerMode.LINEAR:
        reduction = safe_mul(config.reduction_factor, period, bits=64)
        return safe_sub(config.cliff_fee_numerator, reduction, bits=64)
    if mode is FeeSchedulerMode.EXPONENTIAL:
        return get_fee_in_period(config.cliff_fee_numerator, config.reduction_factor, period)
    raise AssertionError(f"unhandled fee scheduler mode: {mode}")


def get_max_base_fee_numerator(config: BaseFeeConfig) -> int:
    return config.cliff_fee_numerator


def get_min_base_fee_numerator(config: BaseFeeConfig) -> int:
    return get_base_fee_numerator_by_period(config, config.number_of_period)


def elapsed_periods(config: BaseFeeConfig, current_point: int, activation_point: int) -> int:
    """Periods since activation, capped at `number_of_period` (floor before activation)."""
    require_uint("current_point", current_point, 64)
    require_uint("activation_point", activation_point, 64)
    if current_point < activation_point:
        return config.number_of_period
    elapsed = safe_sub(current_point, activation_point, bits=64)
    period = safe_div(elapsed, config.period_frequency, bits=64)
    return min(period, config.number_of_period)


def get_current_base_fee_numerator(config: BaseFeeConfig, current_point: int, activation_point: int) -> int:
    """Base fee numerator in effect at `current_point`."""
    if config.period_frequency == 0:
        return config.cliff_fee_numerator
    period = elapsed_periods(config, current_point, activation_point)
    return get_base_fee_numerator_by_period(config, period)
