"""
Core curve and fee algorithms
"""

from .curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_initial_liquidity_from_delta_base,
    get_initial_liquidity_from_delta_quote,
    get_initialize_amounts,
    get_next_sqrt_price_from_input,
)
from .fee_mode import CollectFeeMode, FeeMode, TradeDirection, get_fee_mode
from .fees import FeeSplit, calculate_fee, split_fee
from .liquidity import create_virtual_pool
from .params import BaseFeeParameters, ConfigParameters, DynamicFeeParameters, PoolFeeParameters
from .quote import fee_mint_for, quote_exact_in
from .swap import SwapResult, compute_swap, swap_exact_in

__all__ = [
    "get_delta_amount_base_unsigned",
    "get_delta_amount_quote_unsigned",
    "get_initial_liquidity_from_delta_base",
    "get_initial_liquidity_from_delta_quote",
    "get_initialize_amounts",
    "get_next_sqrt_price_from_input",
    "CollectFeeMode",
    "FeeMode",
    "TradeDirection",
    "get_fee_mode",
    "FeeSplit",
    "calculate_fee",
    "split_fee",
    "create_virtual_pool",
    "BaseFeeParameters",
    "ConfigParameters",
    "DynamicFeeParameters",
    "PoolFeeParameters",
    "fee_mint_for",
    "quote_exact_in",
    "SwapResult",
    "compute_swap",
    "swap_exact_in",
]
