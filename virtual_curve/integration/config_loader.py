"""
Pool configuration loading (imperative shell).

Reads a YAML pool config, validates it through `ConfigParameters` and returns
the immutable `PoolConfig`. Keep file and environment access here, out of the
functional core.

Document layout:

    schema: virtual-curve/pool-config/v1
    quote_mint: <str>
    collect_fee_mode: 0 | 1
    activation_type: 0 | 1
    migration_quote_threshold: <int>
    sqrt_min_price: <int>
    sqrt_max_price: <int>
    fees:
      base_fee: {cliff_fee_numerator, number_of_period, period_frequency,
                 reduction_factor, fee_scheduler_mode}
      dynamic_fee: null | {bin_step, bin_step_u128, filter_period, decay_period,
                           reduction_factor, max_volatility_accumulator,
                           variable_fee_control}
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..core.params import BaseFeeParameters, ConfigParameters, DynamicFeeParameters, PoolFeeParameters
from ..errors import InvalidInputError
from ..state.config import PoolConfig


logger = logging.getLogger(__name__)

SCHEMA = "virtual-curve/pool-config/v1"
CONFIG_PATH_ENV = "VIRTUAL_CURVE_CONFIG"
LOG_LEVEL_ENV = "VIRTUAL_CURVE_LOG_LEVEL"


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def config_path_from_env(default: Optional[str] = None) -> Optional[Path]:
    raw = _env_str(CONFIG_PATH_ENV, default or "")
    return Path(raw) if raw else None


def log_level_from_env(default: str = "WARNING") -> str:
    return _env_str(LOG_LEVEL_ENV, default).upper()


def _require_mapping(obj: Any, *, name: str) -> Mapping[str, Any]:
    if not isinstance(obj, Mapping):
        raise InvalidInputError(f"{name} must be a mapping")
    return obj


def _require_str(obj: Any, *, name: str) -> str:
    if not isinstance(obj, str) or not obj.strip():
        raise InvalidInputError(f"{name} must be a non-empty string")
    return obj.strip()


def _require_int(obj: Any, *, name: str, default: Optional[int] = None) -> int:
    """Accept ints, or decimal strings for values too wide for some YAML emitters."""
    if obj is None:
        if default is None:
            raise InvalidInputError(f"{name} is required")
        return default
    if isinstance(obj, bool):
        raise InvalidInputError(f"{name} must be an int")
    if isinstance(obj, int):
        value = obj
    elif isinstance(obj, str) and obj.strip().isdigit():
        value = int(obj.strip())
    else:
        raise InvalidInputError(f"{name} must be an int")
    if value < 0:
        raise InvalidInputError(f"{name} must be non-negative: {value}")
    return value


def _base_fee_params(obj: Any) -> BaseFeeParameters:
    m = _require_mapping(obj, name="fees.base_fee")
    return BaseFeeParameters(
        cliff_fee_numerator=_require_int(m.get("cliff_fee_numerator"), name="fees.base_fee.cliff_fee_numerator"),
        number_of_period=_require_int(m.get("number_of_period"), name="fees.base_fee.number_of_period", default=0),
        period_frequency=_require_int(m.get("period_frequency"), name="fees.base_fee.period_frequency", default=0),
        reduction_factor=_require_int(m.get("reduction_factor"), name="fees.base_fee.reduction_factor", default=0),
        fee_scheduler_mode=_require_int(
            m.get("fee_scheduler_mode"), name="fees.base_fee.fee_scheduler_mode", default=0
        ),
    )


def _dynamic_fee_params(obj: Any) -> Optional[DynamicFeeParameters]:
    if obj is None:
        return None
    m = _require_mapping(obj, name="fees.dynamic_fee")
    fields = (
        "bin_step",
        "bin_step_u128",
        "filter_period",
        "decay_period",
        "reduction_factor",
        "max_volatility_accumulator",
        "variable_fee_control",
    )
    values = {f: _require_int(m.get(f), name=f"fees.dynamic_fee.{f}") for f in fields}
    return DynamicFeeParameters(**values)


def config_params_from_mapping(obj: Any) -> ConfigParameters:
    root = _require_mapping(obj, name="config")

    schema = _require_str(root.get("schema", SCHEMA), name="config.schema")
    if schema != SCHEMA:
        raise InvalidInputError(f"unsupported config.schema: {schema}")

    fees = _require_mapping(root.get("fees"), name="config.fees")
    return ConfigParameters(
        quote_mint=_require_str(root.get("quote_mint"), name="config.quote_mint"),
        pool_fees=PoolFeeParameters(
            base_fee=_base_fee_params(fees.get("base_fee")),
            dynamic_fee=_dynamic_fee_params(fees.get("dynamic_fee")),
        ),
        collect_fee_mode=_require_int(root.get("collect_fee_mode"), name="config.collect_fee_mode", default=0),
        activation_type=_require_int(root.get("activation_type"), name="config.activation_type", default=0),
        migration_quote_threshold=_require_int(
            root.get("migration_quote_threshold"), name="config.migration_quote_threshold"
        ),
        sqrt_min_price=_require_int(root.get("sqrt_min_price"), name="config.sqrt_min_price"),
        sqrt_max_price=_require_int(root.get("sqrt_max_price"), name="config.sqrt_max_price"),
    )


def pool_config_from_mapping(obj: Any) -> PoolConfig:
    return config_params_from_mapping(obj).to_pool_config()


def load_pool_config(path: Optional[Path] = None) -> PoolConfig:
    """
    Load and validate a pool config from YAML.

    Falls back to $VIRTUAL_CURVE_CONFIG when `path` is not given.

    Raises:
        FileNotFoundError: If no path is given or set, or the file is missing
        InvalidInputError: If the document is malformed or fails validation
    """
    resolved = path if path is not None else config_path_from_env()
    if resolved is None:
        raise FileNotFoundError(f"no config path given and ${CONFIG_PATH_ENV} is unset")
    try:
        obj = yaml.safe_load(Path(resolved).read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise InvalidInputError(f"invalid YAML in {resolved}: {exc}") from exc
    config = pool_config_from_mapping(obj)
    logger.info(
        "loaded pool config %s (quote_mint=%s, dynamic_fee=%s)",
        resolved,
        config.quote_mint,
        config.pool_fees.is_dynamic_fee_enabled,
    )
    return config
