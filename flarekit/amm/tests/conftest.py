"""Test configuration for AMM math."""
import pytest

from flarekit.amm.tick_math import Q96
from flarekit.contracts.types import Position

WFLR = "0x1D80c49BbBCd1C0911346656B529DF9E5c2F783d"
FXRP = "0xAd552A648C74D49E10027AB8a618A3ad4901c5bE"
USDT0 = "0xe7cd86e13AC4309349F30B3435a9d337750fC82D"


@pytest.fixture
def token_addresses():
    """Three real Flare token addresses in route order."""
    return [WFLR, FXRP, USDT0]


@pytest.fixture
def sqrt_price_two():
    """sqrtPriceX96 for a raw price of 4 (sqrt = 2)."""
    return 2 * Q96


@pytest.fixture
def make_position():
    """Factory for positions spanning ticks -600..600."""
    def _make(current_tick=0, liquidity=10**18, tick_lower=-600, tick_upper=600):
        return Position(
            token_id=1,
            token0=WFLR,
            token1=FXRP,
            fee=3000,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            liquidity=liquidity,
            current_tick=current_tick,
        )
    return _make
