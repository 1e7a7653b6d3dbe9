"""
Range health classification for liquidity positions.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..contracts.types import Position

# Fraction of the range width from an edge that counts as "near"
NEAR_EDGE_FRACTION = 0.10


class PositionHealth(Enum):
    EMPTY = "⚫ EMPTY"
    UNKNOWN = "❓ UNKNOWN"
    OUT_OF_RANGE = "🔴 OUT OF RANGE"
    NEAR_EDGE = "🟡 NEAR EDGE"
    IN_RANGE = "🟢 IN RANGE"

    @property
    def label(self) -> str:
        return self.value

    @property
    def needs_attention(self) -> bool:
        return self in (PositionHealth.OUT_OF_RANGE, PositionHealth.NEAR_EDGE)


def position_health(position: "Position") -> PositionHealth:
    """
    Classify where the pool price sits relative to a position's range.

    The range is half-open: a current tick equal to tick_upper is out of range.
    """
    if position.liquidity == 0:
        return PositionHealth.EMPTY
    if position.current_tick is None:
        return PositionHealth.UNKNOWN

    tick = position.current_tick
    if tick < position.tick_lower or tick >= position.tick_upper:
        return PositionHealth.OUT_OF_RANGE

    width = position.tick_upper - position.tick_lower
    distance = min(tick - position.tick_lower, position.tick_upper - tick)
    if distance / width < NEAR_EDGE_FRACTION:
        return PositionHealth.NEAR_EDGE
    return PositionHealth.IN_RANGE
