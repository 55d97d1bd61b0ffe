"""
Kernel layer.

Integer-only arithmetic shared by the curve and fee modules. Nothing here knows
about pools or configs; it only enforces widths and rounding.
"""
