"""
virtual_curve: exact-input pricing for single-range bonding curve pools.

The functional core lives in `virtual_curve.core` (curve math, fees, swap
engine, quoting facade) and `virtual_curve.state` (immutable pool and config
values). `virtual_curve.integration` holds the YAML/env configuration shell.
"""

__version__ = "0.1.0"
