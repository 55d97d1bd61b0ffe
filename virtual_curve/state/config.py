"""
Immutable pool configuration records.

Enumerated fields (`collect_fee_mode`, `activation_type`,
`fee_scheduler_mode`) are stored as their raw u8 values, the way the ledger
stores them; each consumer parses them into its closed enum and rejects
unknown values there. Width checks happen here, range and policy checks in
`virtual_curve.core.params`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..kernels.python.safe_math import require_uint


@dataclass(frozen=True)
class BaseFeeConfig:
    cliff_fee_numerator: int
    number_of_period: int = 0
    period_frequency: int = 0
    reduction_factor: int = 0
    fee_scheduler_mode: int = 0

    def __post_init__(self) -> None:
        require_uint("cliff_fee_numerator", self.cliff_fee_numerator, 64)
        require_uint("number_of_period", self.number_of_period, 16)
        require_uint("period_frequency", self.period_frequency, 64)
        require_uint("reduction_factor", self.reduction_factor, 64)
        require_uint("fee_scheduler_mode", self.fee_scheduler_mode, 8)


@dataclass(frozen=True)
class DynamicFeeConfig:
    bin_step: int
    bin_step_u128: int
    filter_period: int
    decay_period: int
    reduction_factor: int
    max_volatility_accumulator: int
    variable_fee_control: int

    def __post_init__(self) -> None:
        require_uint("bin_step", self.bin_step, 16)
        require_uint("bin_step_u128", self.bin_step_u128, 128)
        require_uint("filter_period", self.filter_period, 16)
        require_uint("decay_period", self.decay_period, 16)
        require_uint("reduction_factor", self.reduction_factor, 16)
        require_uint("max_volatility_accumulator", self.max_volatility_accumulator, 32)
        require_uint("variable_fee_control", self.variable_fee_control, 32)


@dataclass(frozen=True)
class PoolFeesConfig:
    """Base fee, optional dynamic fee (None = disabled) and split percentages."""

    base_fee: BaseFeeConfig
    dynamic_fee: Optional[DynamicFeeConfig] = None
    protocol_fee_percent: int = 0
    referral_fee_percent: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.base_fee, BaseFeeConfig):
            raise TypeError("base_fee must be a BaseFeeConfig")
        if self.dynamic_fee is not None and not isinstance(self.dynamic_fee, DynamicFeeConfig):
            raise TypeError("dynamic_fee must be a DynamicFeeConfig or None")
        for name, pct in (
            ("protocol_fee_percent", self.protocol_fee_percent),
            ("referral_fee_percent", self.referral_fee_percent),
        ):
            require_uint(name, pct, 8)
            if pct > 100:
                raise ValueError(f"{name} must be in [0, 100]: {pct}")

    @property
    def is_dynamic_fee_enabled(self) -> bool:
        return self.dynamic_fee is not None


@dataclass(frozen=True)
class PoolConfig:
    quote_mint: str
    collect_fee_mode: int
    activation_type: int
    migration_quote_threshold: int
    sqrt_min_price: int
    sqrt_max_price: int
    pool_fees: PoolFeesConfig

    def __post_init__(self) -> None:
        if not isinstance(self.quote_mint, str) or not self.quote_mint:
            raise TypeError("quote_mint must be a non-empty string")
        require_uint("collect_fee_mode", self.collect_fee_mode, 8)
        require_uint("activation_type", self.activation_type, 8)
        require_uint("migration_quote_threshold", self.migration_quote_threshold, 64)
        require_uint("sqrt_min_price", self.sqrt_min_price, 128)
        require_uint("sqrt_max_price", self.sqrt_max_price, 128)
        if not isinstance(self.pool_fees, PoolFeesConfig):
            raise TypeError("pool_fees must be a PoolFeesConfig")
