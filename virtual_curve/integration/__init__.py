"""
Imperative shell: configuration files and environment.
"""

from .config_loader import load_pool_config, pool_config_from_mapping

__all__ = [
    "load_pool_config",
    "pool_config_from_mapping",
]
