"""Tests for tick and price conversion."""
import pytest

from flarekit.amm.tick_math import (
    MAX_TICK,
    MIN_TICK,
    Q96,
    align_ticks,
    get_sqrt_ratio_at_tick,
    position_amounts,
    price_to_tick,
    range_to_ticks,
    sqrt_price_x96_to_price,
    tick_to_price,
)
from flarekit.chain.errors import ValidationError


class TestSqrtRatio:

    def test_tick_zero_is_q96(self):
        assert get_sqrt_ratio_at_tick(0) == Q96

    def test_bounds_match_on_chain_constants(self):
        assert get_sqrt_ratio_at_tick(MIN_TICK) == 4295128739
        assert get_sqrt_ratio_at_tick(MAX_TICK) == 1461446703485210103287273052203988822378723970342

    def test_out_of_bounds(self):
        with pytest.raises(ValidationError, match="out of bounds"):
            get_sqrt_ratio_at_tick(MAX_TICK + 1)

    def test_monotonic(self):
        ratios = [get_sqrt_ratio_at_tick(t) for t in (-1000, -1, 0, 1, 1000)]
        assert ratios == sorted(ratios)


class TestPriceConversion:

    def test_tick_zero_is_parity(self):
        assert tick_to_price(0) == 1.0

    def test_decimal_adjustment(self):
        # WFLR (18) priced in FXRP (6)
        assert tick_to_price(0, 18, 6) == pytest.approx(1e12)

    def test_price_to_tick_floors(self):
        # ln(2) / ln(1.0001) = 6931.8
        assert price_to_tick(2.0) == 6931

    def test_price_must_be_positive(self):
        with pytest.raises(ValidationError):
            price_to_tick(0)

    def test_sqrt_price_to_price(self, sqrt_price_two):
        assert sqrt_price_x96_to_price(sqrt_price_two) == pytest.approx(4.0)
        assert sqrt_price_x96_to_price(sqrt_price_two, 18, 6) == pytest.approx(4e12)

    @pytest.mark.parametrize("decimals0,decimals1", [(18, 18), (18, 6), (6, 18)])
    def test_price_increases_with_tick(self, decimals0, decimals1):
        prices = [tick_to_price(t, decimals0, decimals1) for t in range(-50_000, 50_001, 2_500)]
        assert all(a < b for a, b in zip(prices, prices[1:]))


class TestRanges:

    def test_align_rounds_outward(self):
        assert align_ticks(-125, 125, 60) == (-180, 180)

    def test_align_keeps_grid_ticks(self):
        assert align_ticks(-120, 120, 60) == (-120, 120)

    def test_align_empty_range(self):
        with pytest.raises(ValidationError, match="tickLower must be < tickUpper"):
            align_ticks(60, 60, 60)

    def test_align_rejects_bad_spacing(self):
        with pytest.raises(ValidationError):
            align_ticks(-60, 60, 0)

    def test_five_percent_range(self):
        # ceil(ln(1.05) / ln(1.0001)) = 488 ticks each side
        assert range_to_ticks(0, 5, 60) == (-540, 540)

    def test_range_is_clamped_to_usable_ticks(self):
        lower, upper = range_to_ticks(MAX_TICK - 100, 50, 60)
        assert upper <= MAX_TICK
        assert upper % 60 == 0
        assert lower < upper

    def test_range_must_be_positive(self):
        with pytest.raises(ValidationError):
            range_to_ticks(0, 0, 60)


RANGES_PCT = [0.5, 1, 5, 10, 50]


class TestRangeGrid:

    @pytest.mark.parametrize("spacing", [1, 10, 60, 200])
    @pytest.mark.parametrize("current", [-5003, 0, 1234])
    @pytest.mark.parametrize("range_pct", RANGES_PCT)
    def test_bounds_on_grid_around_current(self, spacing, current, range_pct):
        lower, upper = range_to_ticks(current, range_pct, spacing)

        assert lower % spacing == 0
        assert upper % spacing == 0
        assert lower < current < upper

    @pytest.mark.parametrize("spacing", [1, 10, 60, 200])
    @pytest.mark.parametrize("current", [-5003, 0, 1234])
    def test_width_grows_with_range(self, spacing, current):
        widths = []
        for range_pct in RANGES_PCT:
            lower, upper = range_to_ticks(current, range_pct, spacing)
            widths.append(upper - lower)
        assert widths == sorted(widths)
        assert widths[0] < widths[-1]


class TestPositionAmounts:

    def test_empty_position(self):
        assert position_amounts(0, Q96, -600, 600) == (0, 0)

    def test_unknown_price(self):
        assert position_amounts(10**18, None, -600, 600) == (0, 0)

    def test_in_range_holds_both(self):
        amount0, amount1 = position_amounts(10**18, Q96, -600, 600)
        assert amount0 > 0
        assert amount1 > 0
        # symmetric range at parity holds roughly equal amounts
        assert amount0 == pytest.approx(amount1, rel=1e-3)

    def test_below_range_is_all_token0(self):
        amount0, amount1 = position_amounts(10**18, get_sqrt_ratio_at_tick(-1200), -600, 600)
        assert amount0 > 0
        assert amount1 == 0

    def test_above_range_is_all_token1(self):
        amount0, amount1 = position_amounts(10**18, get_sqrt_ratio_at_tick(1200), -600, 600)
        assert amount0 == 0
        assert amount1 > 0
