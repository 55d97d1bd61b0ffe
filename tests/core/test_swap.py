from __future__ import annotations

from dataclasses import replace

import pytest

from tests.curve_fixtures import LIQUIDITY, ONE_PERCENT, SQRT_START, dynamic_fee_params, make_config, make_pool
from virtual_curve.core.curve import (
    get_delta_amount_base_unsigned,
    get_delta_amount_quote_unsigned,
    get_next_sqrt_price_from_input,
)
from virtual_curve.core.fee_mode import CollectFeeMode
from virtual_curve.core.fees import FEE_DENOMINATOR, MAX_FEE_NUMERATOR, calculate_fee
from virtual_curve.core.swap import current_point_for, swap_exact_in
from virtual_curve.errors import CurveCompletedError, NotEnoughLiquidityError, ZeroAmountError
from virtual_curve.kernels.python.safe_math import Rounding
from virtual_curve.state.pools import VirtualPool


BUY_BASE = False
SELL_BASE = True


class TestQuoteToBase:
    def test_fee_taken_from_quote_input(self) -> None:
        config = make_config()
        pool = make_pool(config)

        result, new_pool = swap_exact_in(pool, config, BUY_BASE, 0, 0, 1_000_000, False)

        next_price = get_next_sqrt_price_from_input(SQRT_START, LIQUIDITY, 990_000, False)
        assert result.total_fee == 10_000
        assert result.actual_input_amount == 990_000
        assert result.next_sqrt_price == next_price
        assert result.output_amount == get_delta_amount_base_unsigned(SQRT_START, next_price, LIQUIDITY, Rounding.DOWN)
        assert 247_000 < result.output_amount < 248_000
        assert (result.protocol_fee, result.referral_fee, result.trading_fee) == (2_000, 0, 8_000)
        assert result.next_liquidity == LIQUIDITY

        assert new_pool.sqrt_price == next_price
        assert new_pool.quote_reserve == pool.quote_reserve + 990_000
        assert new_pool.base_reserve == pool.base_reserve - result.output_amount
        assert new_pool.protocol_quote_fee == 2_000
        assert new_pool.trading_quote_fee == 8_000
        assert new_pool.protocol_base_fee == new_pool.trading_base_fee == 0

    def test_referral_carved_from_protocol_share(self) -> None:
        config = make_config()
        result, new_pool = swap_exact_in(make_pool(config), config, BUY_BASE, 0, 0, 1_000_000, True)
        assert (result.protocol_fee, result.referral_fee, result.trading_fee) == (1_600, 400, 8_000)
        assert new_pool.protocol_quote_fee == 1_600
        assert new_pool.trading_quote_fee == 8_000

    def test_output_token_mode_charges_base_output(self) -> None:
        config = make_config(collect_fee_mode=CollectFeeMode.OUTPUT_TOKEN.value)
        pool = make_pool(config)

        result, new_pool = swap_exact_in(pool, config, BUY_BASE, 0, 0, 1_000_000, False)

        gross = get_delta_amount_base_unsigned(SQRT_START, result.next_sqrt_price, LIQUIDITY, Rounding.DOWN)
        assert result.actual_input_amount == 1_000_000
        assert result.total_fee == calculate_fee(gross, ONE_PERCENT, FEE_DENOMINATOR)
        assert result.output_amount + result.total_fee == gross
        assert new_pool.base_reserve == pool.base_reserve - gross
        assert new_pool.quote_reserve == pool.quote_reserve + 1_000_000
        assert new_pool.protocol_base_fee == result.protocol_fee
        assert new_pool.trading_base_fee == result.trading_fee
        assert new_pool.protocol_quote_fee == 0


class TestBaseToQuote:
    def test_fee_taken_from_quote_output(self) -> None:
        config = make_config()
        pool = make_pool(config)

        result, new_pool = swap_exact_in(pool, config, SELL_BASE, 0, 0, 1_000_000, False)

        next_price = get_next_sqrt_price_from_input(SQRT_START, LIQUIDITY, 1_000_000, True)
        gross = get_delta_amount_quote_unsigned(next_price, SQRT_START, LIQUIDITY, Rounding.DOWN)
        assert result.actual_input_amount == 1_000_000
        assert result.next_sqrt_price == next_price < SQRT_START
        assert result.total_fee == calculate_fee(gross, ONE_PERCENT, FEE_DENOMINATOR)
        assert result.output_amount + result.total_fee == gross
        assert 3_900_000 < result.output_amount < 4_000_000

        assert new_pool.base_reserve == pool.base_reserve + 1_000_000
        assert new_pool.quote_reserve == pool.quote_reserve - gross
        assert new_pool.protocol_quote_fee == result.protocol_fee
        assert new_pool.trading_quote_fee == result.trading_fee

    def test_price_and_amount_formulas_agree(self) -> None:
        config = make_config()
        pool = make_pool(config)
        base_in = 12_345_678

        result, _ = swap_exact_in(pool, config, SELL_BASE, 0, 0, base_in, False)

        # the base that would move the price back never exceeds what was paid in
        assert get_delta_amount_base_unsigned(result.next_sqrt_price, SQRT_START, LIQUIDITY, Rounding.DOWN) <= base_in
        assert get_delta_amount_base_unsigned(result.next_sqrt_price, SQRT_START, LIQUIDITY, Rounding.UP) >= (
            base_in - 1
        )
        gross = get_delta_amount_quote_unsigned(result.next_sqrt_price, SQRT_START, LIQUIDITY, Rounding.DOWN)
        assert result.output_amount + result.total_fee == gross


class TestRejections:
    def test_zero_amount(self) -> None:
        config = make_config()
        with pytest.raises(ZeroAmountError):
            swap_exact_in(make_pool(config), config, BUY_BASE, 0, 0, 0, False)

    def test_completed_curve_checked_first(self) -> None:
        config = make_config()
        done = replace(make_pool(config), quote_reserve=config.migration_quote_threshold)
        with pytest.raises(CurveCompletedError):
            swap_exact_in(done, config, BUY_BASE, 0, 0, 0, False)
        with pytest.raises(CurveCompletedError):
            swap_exact_in(done, config, SELL_BASE, 0, 0, 1_000, False)

    def test_cannot_push_price_above_range(self) -> None:
        config = make_config()
        with pytest.raises(NotEnoughLiquidityError):
            swap_exact_in(make_pool(config), config, BUY_BASE, 0, 0, 5_000_000_000, False)

    def test_cannot_push_price_below_range(self) -> None:
        config = make_config()
        with pytest.raises(NotEnoughLiquidityError):
            swap_exact_in(make_pool(config), config, SELL_BASE, 0, 0, 2_000_000_000, False)


def test_one_unit_at_max_fee_is_all_fee() -> None:
    config = make_config(cliff_fee_numerator=MAX_FEE_NUMERATOR)
    pool = make_pool(config)

    result, new_pool = swap_exact_in(pool, config, BUY_BASE, 0, 0, 1, False)

    assert result.total_fee == 1
    assert result.actual_input_amount == 0
    assert result.output_amount == 0
    assert result.next_sqrt_price == pool.sqrt_price
    assert result.trading_fee == 1
    assert new_pool.quote_reserve == pool.quote_reserve
    assert new_pool.trading_quote_fee == 1


class TestFeeSchedule:
    def _schedule(self, activation_type: int):
        return make_config(
            cliff_fee_numerator=50_000_000,
            number_of_period=10,
            period_frequency=60,
            reduction_factor=4_500_000,
            activation_type=activation_type,
        )

    def test_before_activation_pays_minimum(self) -> None:
        config = self._schedule(activation_type=1)
        pool = make_pool(config, activation_point=1_000)
        result, _ = swap_exact_in(pool, config, BUY_BASE, 10, 0, 1_000_000, False)
        assert result.total_fee == 5_000

    def test_at_activation_pays_cliff(self) -> None:
        config = self._schedule(activation_type=1)
        pool = make_pool(config, activation_point=1_000)
        result, _ = swap_exact_in(pool, config, BUY_BASE, 1_000, 0, 1_000_000, False)
        assert result.total_fee == 50_000

    def test_slot_activation_reads_the_slot(self) -> None:
        config = self._schedule(activation_type=0)
        assert current_point_for(config, 10_000, 1_000) == 1_000
        pool = make_pool(config, activation_point=1_000)
        result, _ = swap_exact_in(pool, config, BUY_BASE, 10_000, 1_000, 1_000_000, False)
        assert result.total_fee == 50_000


class TestDynamicFee:
    def test_swap_stamps_tracker_and_raises_next_fee(self) -> None:
        config = make_config(dynamic_fee=dynamic_fee_params())
        pool = make_pool(config)

        result, moved = swap_exact_in(pool, config, BUY_BASE, 1_000, 0, 100_000_000, False)
        assert result.total_fee == 1_000_000

        tracker = moved.volatility_tracker
        assert tracker.last_update_timestamp == 1_000
        assert tracker.sqrt_price_reference == SQRT_START
        assert 0 < tracker.volatility_accumulator <= config.pool_fees.dynamic_fee.max_volatility_accumulator

        # within the filter period the accumulated volatility still applies
        busy, _ = swap_exact_in(moved, config, BUY_BASE, 1_005, 0, 1_000_000, False)
        assert busy.total_fee > 10_000

        # after the decay period it is gone
        calm, _ = swap_exact_in(moved, config, BUY_BASE, 1_120, 0, 1_000_000, False)
        assert calm.total_fee == 10_000

    def test_default_built_pool_anchors_tracker_on_first_swap(self) -> None:
        config = make_config(dynamic_fee=dynamic_fee_params())
        pool = VirtualPool(base_mint="base", sqrt_price=SQRT_START, liquidity=LIQUIDITY, base_reserve=10**12)

        result, moved = swap_exact_in(pool, config, BUY_BASE, 5, 0, 100_000_000, False)

        assert result.total_fee == 1_000_000
        assert moved.volatility_tracker.sqrt_price_reference == SQRT_START
        assert moved.volatility_tracker.volatility_accumulator > 0
        assert moved.volatility_tracker.last_update_timestamp == 5

    def test_disabled_dynamic_fee_leaves_tracker_untouched(self) -> None:
        config = make_config()
        pool = make_pool(config)
        _, new_pool = swap_exact_in(pool, config, BUY_BASE, 1_000, 0, 100_000_000, False)
        assert new_pool.volatility_tracker == pool.volatility_tracker
