"""Pure AMM helpers: tick math, quoting, path encoding and position health."""

from .health import PositionHealth, position_health
from .path import decode_algebra_path, decode_v3_path, encode_algebra_path, encode_v3_path
from .quoting import (
    Quote,
    fee_to_percent,
    format_units,
    high_impact_warning,
    min_amount_out,
    naive_quote,
    parse_units,
    slippage_to_bips,
)
from .tick_math import (
    align_ticks,
    get_sqrt_ratio_at_tick,
    position_amounts,
    price_to_tick,
    range_to_ticks,
    sqrt_price_x96_to_price,
    tick_to_price,
)

__all__ = [
    "PositionHealth",
    "position_health",
    "decode_algebra_path",
    "decode_v3_path",
    "encode_algebra_path",
    "encode_v3_path",
    "Quote",
    "fee_to_percent",
    "format_units",
    "high_impact_warning",
    "min_amount_out",
    "naive_quote",
    "parse_units",
    "slippage_to_bips",
    "align_ticks",
    "get_sqrt_ratio_at_tick",
    "position_amounts",
    "price_to_tick",
    "range_to_ticks",
    "sqrt_price_x96_to_price",
    "tick_to_price",
]
