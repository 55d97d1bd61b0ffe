"""
Fee kernels (deterministic, integer-only).

Fee rates are numerators over FEE_DENOMINATOR (1e9). A collected fee is split
protocol-first; the referral share is carved out of the protocol share, and
truncation dust always stays with the trading fee so value is never stranded.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import InvalidFeeError, MathOverflowError
from ..kernels.python.safe_math import cast, require_uint, safe_div, safe_mul, safe_sub


FEE_DENOMINATOR = 1_000_000_000
MAX_BASIS_POINT = 10_000

# 1 bps .. 50%
MIN_FEE_NUMERATOR = 100_000
MAX_FEE_NUMERATOR = 500_000_000

PROTOCOL_FEE_PERCENT = 20
HOST_FEE_PERCENT = 20

# Scale of (volatility_accumulator * bin_step)^2 * variable_fee_control down to FEE_DENOMINATOR.
VARIABLE_FEE_SCALE = 100_000_000_000


@dataclass(frozen=True)
class FeeSplit:
    total_fee: int
    protocol_fee: int
    referral_fee: int
    trading_fee: int

    def __post_init__(self) -> None:
        for name, v in (
            ("total_fee", self.total_fee),
            ("protocol_fee", self.protocol_fee),
            ("referral_fee", self.referral_fee),
            ("trading_fee", self.trading_fee),
        ):
            if not isinstance(v, int) or isinstance(v, bool):
                raise TypeError(f"{name} must be an int")
            if v < 0:
                raise ValueError(f"{name} must be non-negative: {v}")
        if self.protocol_fee + self.referral_fee + self.trading_fee != self.total_fee:
            raise AssertionError("fee split does not conserve total_fee")


def calculate_fee(token_amount: int, fee_numerator: int, fee_denominator: int) -> int:
    """
    `floor(token_amount * fee_numerator / fee_denominator)` with a minimum of one unit.

    Returns 0 only when the numerator or the amount is zero.
    """
    require_uint("token_amount", token_amount, 128)
    require_uint("fee_numerator", fee_numerator, 128)
    require_uint("fee_denominator", fee_denominator, 128)
    if fee_numerator == 0 or token_amount == 0:
        return 0
    if fee_denominator == 0:
        raise MathOverflowError("fee_denominator must be positive")
    fee = safe_div(safe_mul(token_amount, fee_numerator), fee_denominator)
    if fee == 0:
        return 1
    return fee


def split_fee(
    total_fee: int,
    *,
    protocol_fee_percent: int,
    referral_fee_percent: int,
    has_referral: bool,
) -> FeeSplit:
    """Split `total_fee` into protocol, referral and trading shares."""
    require_uint("total_fee", total_fee, 64)
    for name, pct in (
        ("protocol_fee_percent", protocol_fee_percent),
        ("referral_fee_percent", referral_fee_percent),
    ):
        require_uint(name, pct, 8)
        if pct > 100:
            raise ValueError(f"{name} must be in [0, 100]: {pct}")

    protocol_share = safe_mul(total_fee, protocol_fee_percent) // 100
    trading_fee = safe_sub(total_fee, protocol_share)
    referral_fee = safe_mul(protocol_share, referral_fee_percent) // 100 if has_referral else 0
    protocol_fee = safe_sub(protocol_share, referral_fee)

    return FeeSplit(
        total_fee=total_fee,
        protocol_fee=protocol_fee,
        referral_fee=referral_fee,
        trading_fee=trading_fee,
    )


def validate_fee_fraction(numerator: int, denominator: int) -> None:
    if denominator == 0 or numerator >= denominator:
        raise InvalidFeeError(f"invalid fee fraction {numerator}/{denominator}")


def to_bps(numerator: int, denominator: int) -> int:
    """Fee fraction in basis points (floor)."""
    bps = safe_div(safe_mul(numerator, MAX_BASIS_POINT), denominator)
    return cast(bps, 64)
