"""Volatility tracker state for the dynamic fee.

Immutable per-pool value threaded explicitly through every swap or quote:
- `sqrt_price_reference`: price the next movement is measured from,
- `volatility_accumulator`: movement (in bin-step units x 10_000) driving the variable fee,
- `volatility_reference`: decayed carry-over of the previous accumulator,
- `last_update_timestamp`: when the tracker was last stamped by a committed swap.

Updates live in `virtual_curve.core.dynamic_fee` and return new values via
`dataclasses.replace`; nothing mutates a tracker in place.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..kernels.python.safe_math import require_uint


@dataclass(frozen=True)
class VolatilityTracker:
    last_update_timestamp: int = 0
    sqrt_price_reference: int = 0
    volatility_accumulator: int = 0
    volatility_reference: int = 0

    def __post_init__(self) -> None:
        require_uint("last_update_timestamp", self.last_update_timestamp, 64)
        require_uint("sqrt_price_reference", self.sqrt_price_reference, 128)
        require_uint("volatility_accumulator", self.volatility_accumulator, 128)
        require_uint("volatility_reference", self.volatility_reference, 128)


def initial_tracker(sqrt_price: int, *, timestamp: int = 0) -> VolatilityTracker:
    """Zero-accumulator tracker anchored at the pool's starting price."""
    return VolatilityTracker(last_update_timestamp=timestamp, sqrt_price_reference=sqrt_price)
