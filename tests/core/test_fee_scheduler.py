from __future__ import annotations

import pytest

from virtual_curve.core.fee_scheduler import (
    FeeSchedulerMode,
    elapsed_periods,
    get_base_fee_numerator_by_period,
    get_current_base_fee_numerator,
    get_max_base_fee_numerator,
    get_min_base_fee_numerator,
)
from virtual_curve.errors import InvalidFeeSchedulerModeError
from virtual_curve.state.config import BaseFeeConfig


LINEAR = BaseFeeConfig(
    cliff_fee_numerator=50_000_000,
    number_of_period=10,
    period_frequency=60,
    reduction_factor=4_500_000,
    fee_scheduler_mode=FeeSchedulerMode.LINEAR.value,
)

EXPONENTIAL = BaseFeeConfig(
    cliff_fee_numerator=100_000_000,
    number_of_period=2,
    period_frequency=10,
    reduction_factor=5000,
    fee_scheduler_mode=FeeSchedulerMode.EXPONENTIAL.value,
)


class TestLinearSchedule:
    def test_cliff_at_activation(self) -> None:
        assert get_current_base_fee_numerator(LINEAR, 100, 100) == 50_000_000
        assert get_current_base_fee_numerator(LINEAR, 159, 100) == 50_000_000

    def test_steps_down_each_period(self) -> None:
        assert get_current_base_fee_numerator(LINEAR, 160, 100) == 45_500_000
        assert get_current_base_fee_numerator(LINEAR, 220, 100) == 41_000_000

    def test_floor_after_last_period(self) -> None:
        assert get_current_base_fee_numerator(LINEAR, 100 + 60 * 10, 100) == 5_000_000
        assert get_current_base_fee_numerator(LINEAR, 10**9, 100) == 5_000_000

    def test_before_activation_pays_floor(self) -> None:
        assert elapsed_periods(LINEAR, 99, 100) == 10
        assert get_current_base_fee_numerator(LINEAR, 99, 100) == 5_000_000

    def test_min_and_max(self) -> None:
        assert get_max_base_fee_numerator(LINEAR) == 50_000_000
        assert get_min_base_fee_numerator(LINEAR) == 5_000_000


class TestExponentialSchedule:
    def test_halves_per_period(self) -> None:
        assert get_current_base_fee_numerator(EXPONENTIAL, 0, 0) == 100_000_000
        assert get_current_base_fee_numerator(EXPONENTIAL, 10, 0) == 50_000_000
        assert get_current_base_fee_numerator(EXPONENTIAL, 25, 0) == 25_000_000
        assert get_current_base_fee_numerator(EXPONENTIAL, 1_000, 0) == 25_000_000

    def test_min(self) -> None:
        assert get_min_base_fee_numerator(EXPONENTIAL) == 25_000_000


def test_zero_frequency_is_flat_cliff() -> None:
    flat = BaseFeeConfig(cliff_fee_numerator=7_000_000, number_of_period=5, reduction_factor=1_000_000)
    assert get_current_base_fee_numerator(flat, 0, 1_000) == 7_000_000
    assert get_current_base_fee_numerator(flat, 10**6, 0) == 7_000_000


def test_period_clamped_to_number_of_period() -> None:
    assert get_base_fee_numerator_by_period(LINEAR, 500) == 5_000_000


def test_unknown_mode_rejected() -> None:
    bogus = BaseFeeConfig(cliff_fee_numerator=1_000_000, fee_scheduler_mode=7)
    with pytest.raises(InvalidFeeSchedulerModeError):
        get_base_fee_numerator_by_period(bogus, 0)
    with pytest.raises(InvalidFeeSchedulerModeError):
        FeeSchedulerMode.parse(2)
