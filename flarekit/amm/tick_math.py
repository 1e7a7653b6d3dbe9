"""
Concentrated-liquidity tick and price math.

Key concepts:
- sqrtPriceX96: square root of price in Q96 fixed-point format
- Tick: logarithmic price representation where price = 1.0001^tick
- Tick spacing: positions can only start and end on multiples of it
  - ±50 ticks = 0.5% price movement
  - ±100 ticks = 1% price movement

Prices returned here are human prices of token0 in units of token1,
adjusted for token decimals. They are for display and range planning;
anything that ends up on chain is computed in integers.
"""

import math
from typing import Optional, Tuple

from ..chain.errors import ValidationError

# Q96 constants
Q96 = 2**96
TICK_BASE = 1.0001
MIN_TICK = -887272
MAX_TICK = 887272


def tick_to_price(tick: int, decimals0: int = 18, decimals1: int = 18) -> float:
    """
    Human price of token0 in token1 at a tick.

    Formula: price = 1.0001^tick * 10^(decimals0 - decimals1)
    """
    return TICK_BASE ** tick * 10 ** (decimals0 - decimals1)


def price_to_tick(price: float, decimals0: int = 18, decimals1: int = 18) -> int:
    """Floor tick for a human price. Inverse of tick_to_price."""
    if price <= 0:
        raise ValidationError(f"Price must be positive, got {price}")
    raw = price / 10 ** (decimals0 - decimals1)
    return math.floor(math.log(raw) / math.log(TICK_BASE))


def sqrt_price_x96_to_price(sqrt_price_x96: int, decimals0: int = 18, decimals1: int = 18) -> float:
    """Human price from a pool's sqrtPriceX96: (s / 2^96)^2."""
    ratio = sqrt_price_x96 / Q96
    return ratio * ratio * 10 ** (decimals0 - decimals1)


def align_ticks(tick_lower: int, tick_upper: int, tick_spacing: int) -> Tuple[int, int]:
    """
    Round a tick range outward onto the spacing grid.

    Raises:
        ValidationError: If the aligned range is empty
    """
    if tick_spacing <= 0:
        raise ValidationError(f"Tick spacing must be positive, got {tick_spacing}")

    lower = math.floor(tick_lower / tick_spacing) * tick_spacing
    upper = math.ceil(tick_upper / tick_spacing) * tick_spacing
    if lower >= upper:
        raise ValidationError("tickLower must be < tickUpper")
    return lower, upper


def range_to_ticks(current_tick: int, range_pct: float, tick_spacing: int) -> Tuple[int, int]:
    """
    Tick bounds for a symmetric ±range_pct range around the current tick.

    The half-width is ceil(ln(1 + r/100) / ln(1.0001)) ticks, and both ends
    are rounded outward to the tick spacing.

    Args:
        current_tick: Pool's current tick
        range_pct: Half-width of the range in percent (5 means ±5%)
        tick_spacing: Pool tick spacing

    Returns:
        (tick_lower, tick_upper)

    Raises:
        ValidationError: If range_pct is not positive or the range is empty
    """
    if range_pct <= 0:
        raise ValidationError(f"Range must be positive, got {range_pct}")

    half_width = math.ceil(math.log(1 + range_pct / 100) / math.log(TICK_BASE))
    lower, upper = align_ticks(current_tick - half_width, current_tick + half_width, tick_spacing)
    return max(lower, _min_usable(tick_spacing)), min(upper, _max_usable(tick_spacing))


def _min_usable(tick_spacing: int) -> int:
    return math.ceil(MIN_TICK / tick_spacing) * tick_spacing


def _max_usable(tick_spacing: int) -> int:
    return math.floor(MAX_TICK / tick_spacing) * tick_spacing


def get_amount0_delta(
    *,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
) -> int:
    """
    Calculate token0 amount from sqrt price range and liquidity.

    Formula: amount0 = L * (√Pb - √Pa) / (√Pa * √Pb)
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    numerator = liquidity * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96) * Q96
    denominator = sqrt_ratio_a_x96 * sqrt_ratio_b_x96
    return numerator // denominator


def get_amount1_delta(
    *,
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
) -> int:
    """
    Calculate token1 amount from sqrt price range and liquidity.

    Formula: amount1 = L * (√Pb - √Pa) / Q96
    """
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96

    return (liquidity * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96)) // Q96


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """
    sqrtPriceX96 at a tick, using the on-chain TickMath bit decomposition.

    Raises:
        ValidationError: If the tick is outside [MIN_TICK, MAX_TICK]
    """
    abs_tick = abs(tick)
    if abs_tick > MAX_TICK:
        raise ValidationError(f"Tick {tick} out of bounds")

    # Q128 ratio for 1.0001^(-|tick|/2)
    ratio = 0xFFFCB933BD6FAD37AA2D162D1A594001 if abs_tick & 0x1 else 1 << 128

    for bit, magic in _TICK_MAGIC:
        if abs_tick & bit:
            ratio = (ratio * magic) >> 128

    if tick > 0:
        ratio = ((1 << 256) - 1) // ratio

    # Q128 -> Q96, rounding up
    return (ratio >> 32) + (0 if ratio % (1 << 32) == 0 else 1)


_TICK_MAGIC = (
    (0x2, 0xFFF97272373D413259A46990580E213A),
    (0x4, 0xFFF2E50F5F656932EF12357CF3C7FDCC),
    (0x8, 0xFFE5CACA7E10E4E61C3624EAA0941CD0),
    (0x10, 0xFFCB9843D60F6159C9DB58835C926644),
    (0x20, 0xFF973B41FA98C081472E6896DFB254C0),
    (0x40, 0xFF2EA16466C96A3843EC78B326B52861),
    (0x80, 0xFE5DEE046A99A2A811C461F1969C3053),
    (0x100, 0xFCBE86C7900A88AEDCFFC83B479AA3A4),
    (0x200, 0xF987A7253AC413176F2B074CF7815E54),
    (0x400, 0xF3392B0822B70005940C7A398E4B70F3),
    (0x800, 0xE7159475A2C29B7443B29C7FA6E889D9),
    (0x1000, 0xD097F3BDFD2022B8845AD8F792AA5825),
    (0x2000, 0xA9F746462D870FDF8A65DC1F90E061E5),
    (0x4000, 0x70D869A156D2A1B890BB3DF62BAF32F7),
    (0x8000, 0x31BE135F97D08FD981231505542FCFA6),
    (0x10000, 0x9AA508B5B7A84E1C677DE54F3E99BC9),
    (0x20000, 0x5D6AF8DEDB81196699C329225EE604),
    (0x40000, 0x2216E584F5FA1EA926041BEDFE98),
    (0x80000, 0x48A170391F7DC42444E8FA2),
)


def position_amounts(
    liquidity: int,
    sqrt_price_x96: Optional[int],
    tick_lower: int,
    tick_upper: int,
) -> Tuple[int, int]:
    """
    Underlying (amount0, amount1) held by a position at the current price.

    Below the range everything is token0, above it everything is token1.
    With no known price both amounts are reported as zero.
    """
    if liquidity == 0 or not sqrt_price_x96:
        return 0, 0

    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)

    if sqrt_price_x96 <= sqrt_lower:
        amount0 = get_amount0_delta(
            sqrt_ratio_a_x96=sqrt_lower, sqrt_ratio_b_x96=sqrt_upper, liquidity=liquidity
        )
        return amount0, 0
    if sqrt_price_x96 >= sqrt_upper:
        amount1 = get_amount1_delta(
            sqrt_ratio_a_x96=sqrt_lower, sqrt_ratio_b_x96=sqrt_upper, liquidity=liquidity
        )
        return 0, amount1

    amount0 = get_amount0_delta(
        sqrt_ratio_a_x96=sqrt_price_x96, sqrt_ratio_b_x96=sqrt_upper, liquidity=liquidity
    )
    amount1 = get_amount1_delta(
        sqrt_ratio_a_x96=sqrt_lower, sqrt_ratio_b_x96=sqrt_price_x96, liquidity=liquidity
    )
    return amount0, amount1
