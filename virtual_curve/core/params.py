"""
Pool creation parameters and their validation.

Parameters are what a partner submits; `to_*_config()` turns validated
parameters into the immutable configuration records in
`virtual_curve.state.config`. Validation fails closed with an
`InvalidInputError` subclass.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..errors import ExceedMaxFeeError, InvalidInputError
from ..state.config import BaseFeeConfig, DynamicFeeConfig, PoolConfig, PoolFeesConfig
from ..state.pools import ActivationType
from .curve import MAX_SQRT_PRICE, MIN_SQRT_PRICE
from .dynamic_fee import validate_dynamic_fee_config
from .fee_mode import CollectFeeMode
from .fee_scheduler import get_max_base_fee_numerator, get_min_base_fee_numerator
from .fees import (
    FEE_DENOMINATOR,
    HOST_FEE_PERCENT,
    MAX_FEE_NUMERATOR,
    MIN_FEE_NUMERATOR,
    PROTOCOL_FEE_PERCENT,
    validate_fee_fraction,
)


@dataclass(frozen=True)
class BaseFeeParameters:
    cliff_fee_numerator: int
    number_of_period: int = 0
    period_frequency: int = 0
    reduction_factor: int = 0
    fee_scheduler_mode: int = 0

    def to_base_fee_config(self) -> BaseFeeConfig:
        return BaseFeeConfig(
            cliff_fee_numerator=self.cliff_fee_numerator,
            number_of_period=self.number_of_period,
            period_frequency=self.period_frequency,
            reduction_factor=self.reduction_factor,
            fee_scheduler_mode=self.fee_scheduler_mode,
        )

    def validate(self) -> None:
        """Both ends of the schedule must be valid fractions within [MIN, MAX] fee."""
        config = self.to_base_fee_config()
        min_fee_numerator = get_min_base_fee_numerator(config)
        max_fee_numerator = get_max_base_fee_numerator(config)
        validate_fee_fraction(min_fee_numerator, FEE_DENOMINATOR)
        validate_fee_fraction(max_fee_numerator, FEE_DENOMINATOR)
        if min_fee_numerator < MIN_FEE_NUMERATOR or max_fee_numerator > MAX_FEE_NUMERATOR:
            raise ExceedMaxFeeError(
                f"base fee schedule [{min_fee_numerator}, {max_fee_numerator}] "
                f"outside [{MIN_FEE_NUMERATOR}, {MAX_FEE_NUMERATOR}]"
            )


@dataclass(frozen=True)
class DynamicFeeParameters:
    bin_step: int
    bin_step_u128: int
    filter_period: int
    decay_period: int
    reduction_factor: int
    max_volatility_accumulator: int
    variable_fee_control: int

    def to_dynamic_fee_config(self) -> DynamicFeeConfig:
        return DynamicFeeConfig(
            bin_step=self.bin_step,
            bin_step_u128=self.bin_step_u128,
            filter_period=self.filter_period,
            decay_period=self.decay_period,
            reduction_factor=self.reduction_factor,
            max_volatility_accumulator=self.max_volatility_accumulator,
            variable_fee_control=self.variable_fee_control,
        )

    def validate(self) -> None:
        validate_dynamic_fee_config(self.to_dynamic_fee_config())


@dataclass(frozen=True)
class PoolFeeParameters:
    base_fee: BaseFeeParameters
    dynamic_fee: Optional[DynamicFeeParameters] = None

    def validate(self) -> None:
        self.base_fee.validate()
        if self.dynamic_fee is not None:
            self.dynamic_fee.validate()

    def to_pool_fees_config(self) -> PoolFeesConfig:
        dynamic_fee = self.dynamic_fee.to_dynamic_fee_config() if self.dynamic_fee is not None else None
        return PoolFeesConfig(
            base_fee=self.base_fee.to_base_fee_config(),
            dynamic_fee=dynamic_fee,
            protocol_fee_percent=PROTOCOL_FEE_PERCENT,
            referral_fee_percent=HOST_FEE_PERCENT,
        )


@dataclass(frozen=True)
class ConfigParameters:
    quote_mint: str
    pool_fees: PoolFeeParameters
    collect_fee_mode: int
    activation_type: int
    migration_quote_threshold: int
    sqrt_min_price: int
    sqrt_max_price: int

    def validate(self) -> None:
        self.pool_fees.validate()
        CollectFeeMode.parse(self.collect_fee_mode)
        ActivationType.parse(self.activation_type)
        if self.migration_quote_threshold <= 0:
            raise InvalidInputError("migration_quote_threshold must be positive")
        if not (MIN_SQRT_PRICE <= self.sqrt_min_price < self.sqrt_max_price <= MAX_SQRT_PRICE):
            raise InvalidInputError(
                f"sqrt price range must satisfy {MIN_SQRT_PRICE} <= min < max <= {MAX_SQRT_PRICE}: "
                f"[{self.sqrt_min_price}, {self.sqrt_max_price}]"
            )

    def to_pool_config(self) -> PoolConfig:
        """Validate, then build the immutable config."""
        self.validate()
        return PoolConfig(
            quote_mint=self.quote_mint,
            collect_fee_mode=self.collect_fee_mode,
            activation_type=self.activation_type,
            migration_quote_threshold=self.migration_quote_threshold,
            sqrt_min_price=self.sqrt_min_price,
            sqrt_max_price=self.sqrt_max_price,
            pool_fees=self.pool_fees.to_pool_fees_config(),
        )
