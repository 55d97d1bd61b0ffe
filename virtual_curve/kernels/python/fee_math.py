"""
Q64.64 fixed-point power and exponential fee decay.

`pow_q64` is binary exponentiation over Q64.64 values with the base kept
below ONE (a base >= ONE is inverted first, then the result is inverted back),
so every intermediate product fits u128.
"""

from __future__ import annotations

from ...errors import MathOverflowError
from .safe_math import U128_MAX, cast, require_uint, safe_div, safe_mul, safe_shl, safe_sub


SCALE_OFFSET = 64
ONE_Q64 = 1 << SCALE_OFFSET
BASIS_POINT_MAX = 10_000
MAX_EXPONENTIAL = 0x80000


def pow_q64(base: int, exp: int) -> int:
    """
    Raise a Q64.64 `base` to an integer power.

    Raises MathOverflowError when |exp| >= MAX_EXPONENTIAL or the result
    underflows to zero.
    """
    require_uint("base", base, 128)
    if not isinstance(exp, int) or isinstance(exp, bool):
        raise TypeError("exp must be an int")

    invert = exp < 0
    if exp == 0:
        return ONE_Q64
    exp = abs(exp)
    if exp >= MAX_EXPONENTIAL:
        raise MathOverflowError(f"exponent too large: {exp}")

    squared_base = base
    result = ONE_Q64
    if squared_base >= result:
        squared_base = safe_div(U128_MAX, squared_base)
        invert = not invert

    bit = 1
    while bit <= exp:
        if exp & bit:
            result = safe_mul(result, squared_base) >> SCALE_OFFSET
        squared_base = safe_mul(squared_base, squared_base) >> SCALE_OFFSET
        bit <<= 1

    if result == 0:
        raise MathOverflowError("pow_q64 underflowed to zero")
    if invert:
        result = safe_div(U128_MAX, result)
    return result


def get_fee_in_period(cliff_fee_numerator: int, reduction_factor: int, passed_period: int) -> int:
    """
    `cliff_fee_numerator * (1 - reduction_factor / 10_000) ** passed_period`, floored.

    `reduction_factor` is in basis points; values above 10_000 underflow.
    """
    require_uint("cliff_fee_numerator", cliff_fee_numerator, 64)
    require_uint("reduction_factor", reduction_factor, 64)
    require_uint("passed_period", passed_period, 16)

    bps = safe_div(safe_shl(reduction_factor, SCALE_OFFSET), BASIS_POINT_MAX)
    base = safe_sub(ONE_Q64, bps)
    result = pow_q64(base, passed_period)
    fee = safe_mul(result, cliff_fee_numerator) >> SCALE_OFFSET
    return cast(fee, 64)
