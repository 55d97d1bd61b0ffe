from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from virtual_curve.errors import MathOverflowError
from virtual_curve.kernels.python.fee_math import MAX_EXPONENTIAL, ONE_Q64, get_fee_in_period, pow_q64


def test_pow_zero_exponent_is_one() -> None:
    assert pow_q64(ONE_Q64 // 3, 0) == ONE_Q64
    assert pow_q64(5 * ONE_Q64, 0) == ONE_Q64


def test_pow_of_half() -> None:
    half = ONE_Q64 // 2
    assert pow_q64(half, 1) == half
    assert pow_q64(half, 2) == ONE_Q64 // 4
    assert pow_q64(half, 3) == ONE_Q64 // 8


def test_pow_negative_exponent_inverts() -> None:
    # U128_MAX // 2**63
    assert pow_q64(ONE_Q64 // 2, -1) == (1 << 65) - 1


def test_pow_rejects_huge_exponent() -> None:
    with pytest.raises(MathOverflowError):
        pow_q64(ONE_Q64 // 2, MAX_EXPONENTIAL)


def test_pow_underflow_to_zero_raises() -> None:
    with pytest.raises(MathOverflowError):
        pow_q64(1, 2)


class TestFeeInPeriod:
    def test_period_zero_is_cliff(self) -> None:
        assert get_fee_in_period(123_456_789, 2500, 0) == 123_456_789

    def test_halving_schedule(self) -> None:
        # reduction_factor 5000 bps halves the fee every period
        assert get_fee_in_period(1_000_000_000, 5000, 1) == 500_000_000
        assert get_fee_in_period(1_000_000_000, 5000, 2) == 250_000_000
        assert get_fee_in_period(1_000_000_000, 5000, 3) == 125_000_000

    @given(
        cliff=st.integers(min_value=100_000, max_value=500_000_000),
        reduction=st.integers(min_value=1, max_value=9_999),
        period=st.integers(min_value=0, max_value=200),
    )
    def test_non_increasing_in_period(self, cliff: int, reduction: int, period: int) -> None:
        try:
            later = get_fee_in_period(cliff, reduction, period + 1)
        except MathOverflowError:
            return
        assert later <= get_fee_in_period(cliff, reduction, period) <= cliff
