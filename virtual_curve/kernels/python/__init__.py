"""
Python kernels.

These modules are designed to be:
- deterministic (integer-only, explicit rounding),
- width-checked (u64/u128/U256/U512 bounds enforced on every result),
- small surface-area (pure functions over plain ints).
"""
