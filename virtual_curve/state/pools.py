"""
Virtual pool state.

A pool is a single-range curve: one liquidity value valid for the whole
[sqrt_min_price, sqrt_max_price] span. The ledger owns the record; the engine
reads it for quotes and returns a replacement value from the swap path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique

from ..errors import InvalidActivationTypeError
from ..kernels.python.safe_math import require_uint
from .volatility import VolatilityTracker


@unique
class ActivationType(Enum):
    """Unit of `activation_point` and of the fee schedule clock."""

    SLOT = 0
    TIMESTAMP = 1

    @classmethod
    def parse(cls, value: int) -> "ActivationType":
        try:
            return cls(value)
        except ValueError:
            raise InvalidActivationTypeError(f"invalid activation type: {value!r}") from None


@dataclass(frozen=True)
class VirtualPool:
    base_mint: str
    sqrt_price: int
    liquidity: int
    base_reserve: int = 0
    quote_reserve: int = 0
    activation_point: int = 0
    volatility_tracker: VolatilityTracker = field(default_factory=VolatilityTracker)

    # Fees accrued to the pool, by asset.
    protocol_base_fee: int = 0
    protocol_quote_fee: int = 0
    trading_base_fee: int = 0
    trading_quote_fee: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.base_mint, str) or not self.base_mint:
            raise TypeError("base_mint must be a non-empty string")
        require_uint("sqrt_price", self.sqrt_price, 128)
        require_uint("liquidity", self.liquidity, 128)
        for name in (
            "base_reserve",
            "quote_reserve",
            "activation_point",
            "protocol_base_fee",
            "protocol_quote_fee",
            "trading_base_fee",
            "trading_quote_fee",
        ):
            require_uint(name, getattr(self, name), 64)
        if not isinstance(self.volatility_tracker, VolatilityTracker):
            raise TypeError("volatility_tracker must be a VolatilityTracker")

    def is_curve_complete(self, migration_quote_threshold: int) -> bool:
        return self.quote_reserve >= migration_quote_threshold
