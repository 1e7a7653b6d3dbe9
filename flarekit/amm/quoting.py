"""
Quote records, fee formatting, slippage and unit conversion.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, localcontext
from typing import Optional

from ..chain.errors import ValidationError

FEE_DENOMINATOR = 1_000_000
BIPS_DENOMINATOR = 10_000
HIGH_IMPACT_TICKS = 10

NAIVE_QUOTE_WARNING = (
    "Quoter unavailable; estimate derived from the pool's spot price. "
    "It ignores tick crossings and depth, so the real output may be lower."
)


@dataclass
class Quote:
    """
    Result of quoting an exact-input swap.

    Attributes:
        amount_in: Raw input amount
        amount_out: Raw expected output amount
        fee: Pool fee in hundredths of a bip (None for multi-hop)
        gas_estimate: Quoter gas estimate, 0 when unknown
        ticks_crossed: Initialized ticks crossed, summed over hops
        sqrt_price_after: Pool sqrtPriceX96 after the swap (single hop only)
        pool_address: Pool quoted against, when known
        is_naive_fallback: True when derived from spot price instead of the quoter
        warning: Human-readable warning to show next to the quote
    """

    amount_in: int
    amount_out: int
    fee: Optional[int] = None
    gas_estimate: int = 0
    ticks_crossed: int = 0
    sqrt_price_after: Optional[int] = None
    pool_address: Optional[str] = None
    is_naive_fallback: bool = False
    warning: Optional[str] = None


def fee_to_percent(fee: int, places: int = 2) -> str:
    """Format a fee in hundredths of a bip: 3000 -> "0.30%"."""
    return f"{fee / 10_000:.{places}f}%"


def slippage_to_bips(pct: float) -> int:
    """
    Convert a slippage percentage to basis points.

    Raises:
        ValidationError: If pct is outside 0..100
    """
    if pct < 0 or pct > 100:
        raise ValidationError(f"Slippage must be between 0 and 100%, got {pct}")
    return int(round(pct * 100))


def min_amount_out(expected: int, slippage_bips: int) -> int:
    """
    Minimum acceptable output for a given slippage tolerance.

    Integer arithmetic: expected * (10000 - bips) // 10000.

    Raises:
        ValidationError: If slippage_bips is outside 0..10000 or expected is negative
    """
    if not 0 <= slippage_bips <= BIPS_DENOMINATOR:
        raise ValidationError(f"Slippage must be 0..10000 bips, got {slippage_bips}")
    if expected < 0:
        raise ValidationError(f"Expected output cannot be negative, got {expected}")
    return expected * (BIPS_DENOMINATOR - slippage_bips) // BIPS_DENOMINATOR


def naive_quote(
    amount_in: int,
    sqrt_price_x96: int,
    fee: int,
    token_in_is_token0: bool,
    liquidity: int,
    pool_address: Optional[str] = None,
) -> Quote:
    """
    Spot-price estimate used only when the on-chain quoter fails.

    Deducts the fee proportionally and converts at the current price
    without walking ticks, so it overstates output for any trade large
    enough to move the price. A pool with zero liquidity quotes zero.
    """
    amount_after_fee = amount_in * (FEE_DENOMINATOR - fee) // FEE_DENOMINATOR

    if liquidity == 0 or sqrt_price_x96 == 0:
        amount_out = 0
    elif token_in_is_token0:
        # price = sqrtP^2 / 2^192, token1 per token0
        amount_out = amount_after_fee * sqrt_price_x96 * sqrt_price_x96 >> 192
    else:
        amount_out = (amount_after_fee << 192) // (sqrt_price_x96 * sqrt_price_x96)

    return Quote(
        amount_in=amount_in,
        amount_out=amount_out,
        fee=fee,
        sqrt_price_after=sqrt_price_x96,
        pool_address=pool_address,
        is_naive_fallback=True,
        warning=NAIVE_QUOTE_WARNING,
    )


def high_impact_warning(quote: Quote, threshold: int = HIGH_IMPACT_TICKS) -> Optional[str]:
    """Warning text for quotes that cross many ticks or return nothing."""
    if quote.amount_out == 0:
        return "Quote returned zero output; the pool may have no liquidity in range."
    if quote.ticks_crossed > threshold:
        return f"High price impact: crosses {quote.ticks_crossed} initialized ticks."
    return None


def parse_units(text: str, decimals: int) -> int:
    """
    Parse a human amount into raw integer units.

    Raises:
        ValidationError: If the text is not a non-negative number or has
            more fractional digits than the token supports
    """
    try:
        value = Decimal(str(text).strip())
    except InvalidOperation:
        raise ValidationError(f"Invalid amount: {text}")

    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {text}")
    if value < 0:
        raise ValidationError(f"Amount cannot be negative: {text}")

    with localcontext() as ctx:
        ctx.prec = 100
        raw = value.scaleb(decimals)
    if raw != raw.to_integral_value():
        raise ValidationError(f"Amount {text} has more than {decimals} decimal places")
    return int(raw)


def format_units(value: int, decimals: int, places: Optional[int] = None) -> str:
    """Format raw integer units as a human amount, trimming trailing zeros."""
    with localcontext() as ctx:
        ctx.prec = 100
        amount = Decimal(value).scaleb(-decimals)
    if places is not None:
        return f"{amount:.{places}f}"
    text = f"{amount:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
