"""
Checked fixed-width unsigned arithmetic (integer-only).

Python ints never overflow, so the widths the curve math depends on (u64
amounts, u128 prices and liquidity, U256/U512 intermediates) are enforced
explicitly here. Every primitive checks its result against the declared width
and raises instead of wrapping:

- out-of-width operands, overflow, underflow, division by zero,
  oversized shifts                                     -> MathOverflowError
- narrowing a wide intermediate into a smaller width   -> TypeCastFailedError

`require_uint` is the record-field check and reports TypeCastFailedError.
"""

from __future__ import annotations

from enum import Enum, unique

from ...errors import MathOverflowError, TypeCastFailedError


U8_MAX = (1 << 8) - 1
U16_MAX = (1 << 16) - 1
U24_MAX = (1 << 24) - 1
U32_MAX = (1 << 32) - 1
U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1
U256_MAX = (1 << 256) - 1
U512_MAX = (1 << 512) - 1


@unique
class Rounding(Enum):
    UP = "up"
    DOWN = "down"


def _max_for(bits: int) -> int:
    if not isinstance(bits, int) or isinstance(bits, bool) or bits <= 0:
        raise TypeError("bits must be a positive int")
    return (1 << bits) - 1


def require_uint(name: str, value: int, bits: int) -> int:
    """Check that `value` is a plain int in [0, 2**bits)."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > _max_for(bits):
        raise TypeCastFailedError(f"{name} does not fit u{bits}: {value}")
    return value


def _operand(name: str, value: int, bits: int) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > _max_for(bits):
        raise MathOverflowError(f"{name} out of range for u{bits}: {value}")
    return value


def _check(value: int, bits: int, op: str) -> int:
    if value < 0 or value > _max_for(bits):
        raise MathOverflowError(f"{op} overflows u{bits}")
    return value


def safe_add(a: int, b: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    _operand("b", b, bits)
    return _check(a + b, bits, "add")


def safe_sub(a: int, b: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    _operand("b", b, bits)
    return _check(a - b, bits, "sub")


def safe_mul(a: int, b: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    _operand("b", b, bits)
    return _check(a * b, bits, "mul")


def safe_div(a: int, b: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    _operand("b", b, bits)
    if b == 0:
        raise MathOverflowError("division by zero")
    return a // b


def div_ceil(a: int, b: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    _operand("b", b, bits)
    if b == 0:
        raise MathOverflowError("division by zero")
    return -(-a // b)


def safe_shl(a: int, offset: int, *, bits: int = 128) -> int:
    """Left shift that fails if the shift amount or any shifted-out bit exceeds the width."""
    _operand("a", a, bits)
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise TypeError("offset must be a non-negative int")
    if offset >= bits:
        raise MathOverflowError(f"shl by {offset} on u{bits}")
    return _check(a << offset, bits, "shl")


def safe_shr(a: int, offset: int, *, bits: int = 128) -> int:
    _operand("a", a, bits)
    if not isinstance(offset, int) or isinstance(offset, bool) or offset < 0:
        raise TypeError("offset must be a non-negative int")
    if offset >= bits:
        raise MathOverflowError(f"shr by {offset} on u{bits}")
    return a >> offset


def cast(value: int, bits: int) -> int:
    """Narrow `value` to u`bits`, raising TypeCastFailedError if it does not fit."""
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError("value must be an int")
    if value < 0 or value > _max_for(bits):
        raise TypeCastFailedError(f"value does not fit u{bits}: {value}")
    return value


def _div_rounding(prod: int, denominator: int, rounding: Rounding, *, bits: int) -> int:
    if rounding is Rounding.UP:
        return div_ceil(prod, denominator, bits=bits)
    if rounding is Rounding.DOWN:
        return safe_div(prod, denominator, bits=bits)
    raise TypeError(f"rounding must be a Rounding, got {rounding!r}")


# ---------------------------------------------------------------------------
# u128 x u128 helpers (U256 intermediates)
# ---------------------------------------------------------------------------

def mul_div(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """`x * y / denominator` for u128 operands, narrowed back to u128."""
    _operand("x", x, 128)
    _operand("y", y, 128)
    _operand("denominator", denominator, 128)
    if denominator == 0:
        raise MathOverflowError("mul_div by zero")
    prod = safe_mul(x, y, bits=256)
    return cast(_div_rounding(prod, denominator, rounding, bits=256), 128)


def mul_shr(x: int, y: int, offset: int) -> int:
    """`(x * y) >> offset` for u128 operands, narrowed back to u128."""
    _operand("x", x, 128)
    _operand("y", y, 128)
    prod = safe_mul(x, y, bits=256)
    return cast(safe_shr(prod, offset, bits=256), 128)


def shl_div(x: int, y: int, offset: int, rounding: Rounding) -> int:
    """`(x << offset) / y` for u128 operands, narrowed back to u128."""
    _operand("x", x, 128)
    _operand("y", y, 128)
    if y == 0:
        raise MathOverflowError("shl_div by zero")
    prod = safe_shl(x, offset, bits=256)
    return cast(_div_rounding(prod, y, rounding, bits=256), 128)


# ---------------------------------------------------------------------------
# U256 x U256 helper (U512 intermediates)
# ---------------------------------------------------------------------------

def mul_div_u256(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """`x * y / denominator` for U256 operands, narrowed back to U256."""
    _operand("x", x, 256)
    _operand("y", y, 256)
    _operand("denominator", denominator, 256)
    if denominator == 0:
        raise MathOverflowError("mul_div_u256 by zero")
    prod = safe_mul(x, y, bits=512)
    return cast(_div_rounding(prod, denominator, rounding, bits=512), 256)


# ---------------------------------------------------------------------------
# Cast-and-check wrappers
# ---------------------------------------------------------------------------

def safe_mul_div_cast_u64(x: int, y: int, denominator: int, rounding: Rounding, *, bits: int = 64) -> int:
    """u64 operands, u128 product, result narrowed to u`bits`."""
    _operand("x", x, 64)
    _operand("y", y, 64)
    _operand("denominator", denominator, 64)
    prod = safe_mul(x, y, bits=128)
    return cast(_div_rounding(prod, denominator, rounding, bits=128), bits)


def safe_mul_div_cast_u128(x: int, y: int, denominator: int) -> int:
    """Floor of `x * y / denominator` for u128 operands through U256."""
    _operand("x", x, 128)
    _operand("y", y, 128)
    _operand("denominator", denominator, 128)
    prod = safe_mul(x, y, bits=256)
    return cast(safe_div(prod, denominator, bits=256), 128)


def safe_mul_shr_cast(x: int, y: int, offset: int, *, bits: int = 64) -> int:
    return cast(mul_shr(x, y, offset), bits)


def safe_shl_div_cast(x: int, y: int, offset: int, rounding: Rounding, *, bits: int = 128) -> int:
    return cast(shl_div(x, y, offset, rounding), bits)
