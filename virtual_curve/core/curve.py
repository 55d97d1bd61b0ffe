"""
Fixed-point price algebra for a single-range liquidity curve.

Prices are square roots of (quote per base) in Q64.64; liquidity is Q64.64 as
well, so for real values `s = S / 2**64` and `l = L / 2**64`:

    base  = l * (1/s_lower - 1/s_upper)  ->  L * (S_upper - S_lower) / (S_upper * S_lower)
    quote = l * (s_upper - s_lower)      ->  L * (S_upper - S_lower) / 2**128

Rounding is consensus-critical:
- amounts the pool must hold (initial funding) round UP,
- amounts paid out to a trader round DOWN,
- the next price after an exact input is rounded so the trader is never
  over-credited (UP on the base path, DOWN on the quote path).
"""

from __future__ import annotations

from typing import Tuple

from ..errors import MathOverflowError
from ..kernels.python.safe_math import (
    U64_MAX,
    Rounding,
    cast,
    div_ceil,
    mul_div_u256,
    require_uint,
    safe_add,
    safe_div,
    safe_mul,
    safe_shl,
    safe_shr,
    safe_sub,
)


RESOLUTION = 64

MIN_SQRT_PRICE = 4_295_048_016
MAX_SQRT_PRICE = 79_226_673_521_066_979_257_578_248_091


def get_initialize_amounts(
    sqrt_min_price: int,
    sqrt_max_price: int,
    sqrt_price: int,
    liquidity: int,
) -> Tuple[int, int]:
    """Base and quote amounts required to back the curve at `sqrt_price` (both rounded up)."""
    amount_base = get_delta_amount_base_unsigned(sqrt_price, sqrt_max_price, liquidity, Rounding.UP)
    amount_quote = get_delta_amount_quote_unsigned(sqrt_min_price, sqrt_price, liquidity, Rounding.UP)
    return amount_base, amount_quote


def get_initial_liquidity_from_delta_base(base_amount: int, sqrt_max_price: int, sqrt_price: int) -> int:
    """
    Liquidity backed by `base_amount` over [sqrt_price, sqrt_max_price].

        L = base * S * S_max / (S_max - S)      (floor, U512 intermediates)
    """
    require_uint("base_amount", base_amount, 64)
    price_delta = safe_sub(sqrt_max_price, sqrt_price)
    prod = safe_mul(safe_mul(base_amount, sqrt_price, bits=512), sqrt_max_price, bits=512)
    liquidity = safe_div(prod, price_delta, bits=512)
    return cast(liquidity, 128)


def get_initial_liquidity_from_delta_quote(quote_amount: int, sqrt_min_price: int, sqrt_price: int) -> int:
    """
    Liquidity backed by `quote_amount` over [sqrt_min_price, sqrt_price].

        L = (quote << 128) / (S - S_min)        (floor, U256 intermediates)
    """
    require_uint("quote_amount", quote_amount, 64)
    price_delta = safe_sub(sqrt_price, sqrt_min_price)
    shifted = safe_shl(quote_amount, 2 * RESOLUTION, bits=256)
    liquidity = safe_div(shifted, price_delta, bits=256)
    return cast(liquidity, 128)


def _ordered_range(lower_sqrt_price: int, upper_sqrt_price: int) -> int:
    require_uint("lower_sqrt_price", lower_sqrt_price, 128)
    require_uint("upper_sqrt_price", upper_sqrt_price, 128)
    if upper_sqrt_price < lower_sqrt_price:
        raise MathOverflowError("upper_sqrt_price below lower_sqrt_price")
    return upper_sqrt_price - lower_sqrt_price


def get_delta_amount_base_unsigned(
    lower_sqrt_price: int,
    upper_sqrt_price: int,
    liquidity: int,
    rounding: Rounding,
) -> int:
    """Base amount between two prices, as u64."""
    result = get_delta_amount_base_unsigned_256(lower_sqrt_price, upper_sqrt_price, liquidity, rounding)
    if result > U64_MAX:
        raise MathOverflowError("delta base exceeds u64")
    return result


def get_delta_amount_base_unsigned_256(
    lower_sqrt_price: int,
    upper_sqrt_price: int,
    liquidity: int,
    rounding: Rounding,
) -> int:
    """`L * (upper - lower) / (upper * lower)` without narrowing below U256."""
    require_uint("liquidity", liquidity, 128)
    delta = _ordered_range(lower_sqrt_price, upper_sqrt_price)
    denominator = safe_mul(lower_sqrt_price, upper_sqrt_price, bits=256)
    if denominator == 0:
        raise MathOverflowError("zero sqrt price in delta base")
    return mul_div_u256(liquidity, delta, denominator, rounding)


def get_delta_amount_quote_unsigned(
    lower_sqrt_price: int,
    upper_sqrt_price: int,
    liquidity: int,
    rounding: Rounding,
) -> int:
    """Quote amount between two prices, as u64."""
    result = get_delta_amount_quote_unsigned_256(lower_sqrt_price, upper_sqrt_price, liquidity, rounding)
    if result > U64_MAX:
        raise MathOverflowError("delta quote exceeds u64")
    return result


def get_delta_amount_quote_unsigned_256(
    lower_sqrt_price: int,
    upper_sqrt_price: int,
    liquidity: int,
    rounding: Rounding,
) -> int:
    """`L * (upper - lower) / 2**128` without narrowing below U256."""
    require_uint("liquidity", liquidity, 128)
    delta = _ordered_range(lower_sqrt_price, upper_sqrt_price)
    prod = safe_mul(liquidity, delta, bits=256)

    if rounding is Rounding.UP:
        denominator = safe_shl(1, 2 * RESOLUTION, bits=256)
        return div_ceil(prod, denominator, bits=256)
    if rounding is Rounding.DOWN:
        return safe_shr(prod, 2 * RESOLUTION, bits=256)
    raise TypeError(f"rounding must be a Rounding, got {rounding!r}")


def get_next_sqrt_price_from_input(
    sqrt_price: int,
    liquidity: int,
    amount_in: int,
    base_for_quote: bool,
) -> int:
    """
    Next sqrt price after `amount_in` enters the pool.

    Raises MathOverflowError if the price or liquidity is zero. A zero input
    leaves the price unchanged.
    """
    require_uint("sqrt_price", sqrt_price, 128)
    require_uint("liquidity", liquidity, 128)
    require_uint("amount_in", amount_in, 64)
    if sqrt_price == 0:
        raise MathOverflowError("sqrt_price must be positive")
    if liquidity == 0:
        raise MathOverflowError("liquidity must be positive")
    if amount_in == 0:
        return sqrt_price

    if base_for_quote:
        return get_next_sqrt_price_from_amount_base_rounding_up(sqrt_price, liquidity, amount_in)
    return get_next_sqrt_price_from_amount_quote_rounding_down(sqrt_price, liquidity, amount_in)


def get_next_sqrt_price_from_amount_base_rounding_up(sqrt_price: int, liquidity: int, amount: int) -> int:
    """
    `S' = S * L / (L + dx * S)`, rounded up.

    From x = L / S held constant in x * S: (x + dx) * S' = x * S. Rounding up
    keeps S' at or above the exact value, so the price never falls further
    than the input pays for.
    """
    require_uint("amount", amount, 64)
    if amount == 0:
        return sqrt_price
    product = safe_mul(amount, sqrt_price, bits=256)
    denominator = safe_add(liquidity, product, bits=256)
    result = mul_div_u256(liquidity, sqrt_price, denominator, Rounding.UP)
    return cast(result, 128)


def get_next_sqrt_price_from_amount_quote_rounding_down(sqrt_price: int, liquidity: int, amount: int) -> int:
    """`S' = S + (dy << 128) / L`, rounded down."""
    require_uint("amount", amount, 64)
    quotient = safe_div(safe_shl(amount, 2 * RESOLUTION, bits=256), liquidity, bits=256)
    result = safe_add(sqrt_price, quotient, bits=256)
    return cast(result, 128)
