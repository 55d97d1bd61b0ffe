"""
State values for virtual curve pools
"""

from .config import BaseFeeConfig, DynamicFeeConfig, PoolConfig, PoolFeesConfig
from .pools import ActivationType, VirtualPool
from .volatility import VolatilityTracker, initial_tracker

__all__ = [
    "BaseFeeConfig",
    "DynamicFeeConfig",
    "PoolConfig",
    "PoolFeesConfig",
    "ActivationType",
    "VirtualPool",
    "VolatilityTracker",
    "initial_tracker",
]
