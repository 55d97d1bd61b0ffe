"""
Curve initialisation: liquidity sizing and the starting pool value.
"""

from typing import Optional

from ..errors import InvalidInputError
from ..state.config import PoolConfig
from ..state.pools import VirtualPool
from ..state.volatility import initial_tracker
from .curve import (
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_initialize_amounts,
)


def liquidity_from_base_supply(config: PoolConfig, base_amount: int) -> int:
    """Liquidity that `base_amount` backs when the curve starts at `sqrt_min_price`."""
    return get_initial_liquidity_from_delta_base(base_amount, config.sqrt_max_price, config.sqrt_min_price)


def liquidity_from_quote_amount(config: PoolConfig, quote_amount: int, sqrt_price: int) -> int:
    """Liquidity that `quote_amount` backs over [sqrt_min_price, sqrt_price]."""
    return get_initial_liquidity_from_delta_quote(quote_amount, config.sqrt_min_price, sqrt_price)


def create_virtual_pool(
    config: PoolConfig,
    base_mint: str,
    liquidity: int,
    *,
    sqrt_price: Optional[int] = None,
    activation_point: int = 0,
    current_timestamp: int = 0,
) -> VirtualPool:
    """
    Build a fresh pool on `config`'s curve.

    The pool starts at `sqrt_min_price` unless `sqrt_price` is given. Reserves
    are the amounts required to back the curve at that price (rounded up),
    and the volatility tracker starts at zero anchored on the starting price.

    Raises:
        InvalidInputError: If liquidity is zero or the price is outside the range
    """
    start = config.sqrt_min_price if sqrt_price is None else sqrt_price
    if liquidity <= 0:
        raise InvalidInputError(f"liquidity must be positive: {liquidity}")
    if not (config.sqrt_min_price <= start <= config.sqrt_max_price):
        raise InvalidInputError(
            f"sqrt_price {start} outside [{config.sqrt_min_price}, {config.sqrt_max_price}]"
        )

    base_amount, quote_amount = get_initialize_amounts(
        config.sqrt_min_price, config.sqrt_max_price, start, liquidity
    )

    return VirtualPool(
        base_mint=base_mint,
        sqrt_price=start,
        liquidity=liquidity,
        base_reserve=base_amount,
        quote_reserve=quote_amount,
        activation_point=activation_point,
        volatility_tracker=initial_tracker(start, timestamp=current_timestamp),
    )
