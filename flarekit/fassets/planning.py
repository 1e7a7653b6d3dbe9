"""
Lot arithmetic and agent selection for FAssets minting.
"""

from decimal import Decimal
from typing import Optional, Sequence

from ..chain.client import ZERO_ADDRESS
from ..chain.errors import UsageError, ValidationError
from ..contracts.types import AgentInfo, CollateralReservation
from ..ledger.xrpl import drops_to_xrp_decimal

# Agents reporting more free lots than this are effectively unbounded
UNBOUNDED_LOTS = 1_000_000


def lots_from_args(lots: Optional[int], amount: Optional[int], lot_size: int) -> int:
    """
    Turn explicit --lots or --amount into a lot count.

    Args:
        lots: Lot count, if given
        amount: Amount in base units, if given; must be a whole number of lots
        lot_size: Lot size in base units

    Raises:
        UsageError: If neither or both are given
        ValidationError: If the count is below 1 or amount isn't a multiple of lot_size
    """
    if lots is None and amount is None:
        raise UsageError("Specify --lots N or --amount X")
    if lots is not None and amount is not None:
        raise UsageError("Use either --lots or --amount, not both")

    if amount is not None:
        if lot_size <= 0:
            raise ValidationError(f"Invalid lot size: {lot_size}")
        if amount <= 0 or amount % lot_size:
            raise ValidationError(
                f"Amount must be a positive multiple of the lot size ({lot_size} base units)"
            )
        lots = amount // lot_size

    if lots < 1:
        raise ValidationError("--lots must be >= 1")
    return lots


def required_payment_drops(reservation: CollateralReservation) -> int:
    """XRP the minter must pay the agent: reserved value plus the agent's fee."""
    return reservation.value_uba + reservation.fee_uba


def required_payment_xrp(reservation: CollateralReservation) -> Decimal:
    return drops_to_xrp_decimal(required_payment_drops(reservation))


def has_capacity(agent: AgentInfo, lots: int = 1) -> bool:
    return agent.agent_vault != ZERO_ADDRESS and agent.free_collateral_lots >= lots


def select_agent(agents: Sequence[AgentInfo], lots: int,
                 max_fee_bips: Optional[int] = None) -> AgentInfo:
    """
    First listed agent that can take `lots`.

    Raises:
        ValidationError: If no agent has enough free lots within the fee cap
    """
    for agent in agents:
        if not has_capacity(agent, lots):
            continue
        if max_fee_bips is not None and agent.fee_bips > max_fee_bips:
            continue
        return agent
    raise ValidationError(f"No agent with {lots} free lot(s) found")


def format_free_lots(lots: int) -> str:
    return "∞" if lots > UNBOUNDED_LOTS else str(lots)
