"""
Fee mode resolution: which asset a swap's fee is charged in, and whether it is
taken from the input (before pricing) or from the output (after pricing).

    collect mode   direction        fees_on_input  fees_on_base_token
    QUOTE_TOKEN    BASE_TO_QUOTE    False          False   (quote output)
    QUOTE_TOKEN    QUOTE_TO_BASE    True           False   (quote input)
    OUTPUT_TOKEN   BASE_TO_QUOTE    False          False   (quote output)
    OUTPUT_TOKEN   QUOTE_TO_BASE    False          True    (base output)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from ..errors import InvalidCollectFeeModeError


@unique
class TradeDirection(Enum):
    BASE_TO_QUOTE = "base_to_quote"
    QUOTE_TO_BASE = "quote_to_base"

    @classmethod
    def from_swap_base_for_quote(cls, swap_base_for_quote: bool) -> "TradeDirection":
        return cls.BASE_TO_QUOTE if swap_base_for_quote else cls.QUOTE_TO_BASE


@unique
class CollectFeeMode(Enum):
    QUOTE_TOKEN = 0
    OUTPUT_TOKEN = 1

    @classmethod
    def parse(cls, value: int) -> "CollectFeeMode":
        try:
            return cls(value)
        except ValueError:
            raise InvalidCollectFeeModeError(f"invalid collect fee mode: {value!r}") from None


@dataclass(frozen=True)
class FeeMode:
    fees_on_input: bool
    fees_on_base_token: bool
    has_referral: bool


_FEE_MODE_TABLE = {
    (CollectFeeMode.QUOTE_TOKEN, TradeDirection.BASE_TO_QUOTE): (False, False),
    (CollectFeeMode.QUOTE_TOKEN, TradeDirection.QUOTE_TO_BASE): (True, False),
    (CollectFeeMode.OUTPUT_TOKEN, TradeDirection.BASE_TO_QUOTE): (False, False),
    (CollectFeeMode.OUTPUT_TOKEN, TradeDirection.QUOTE_TO_BASE): (False, True),
}


def get_fee_mode(collect_fee_mode: int, trade_direction: TradeDirection, has_referral: bool) -> FeeMode:
    mode = CollectFeeMode.parse(collect_fee_mode)
    if not isinstance(trade_direction, TradeDirection):
        raise TypeError("trade_direction must be a TradeDirection")
    fees_on_input, fees_on_base_token = _FEE_MODE_TABLE[(mode, trade_direction)]
    return FeeMode(
        fees_on_input=fees_on_input,
        fees_on_base_token=fees_on_base_token,
        has_referral=bool(has_referral),
    )
