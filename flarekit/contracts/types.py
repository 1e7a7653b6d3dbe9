"""
Core types for contract responses.

Typed records for the tuples returned by the DEX and FAssets contracts,
so callers never index into raw call results.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Slot0:
    """Uniswap V3 pool state."""

    sqrt_price_x96: int
    tick: int
    observation_index: int = 0
    observation_cardinality: int = 0
    observation_cardinality_next: int = 0
    fee_protocol: int = 0
    unlocked: bool = True


@dataclass
class GlobalState:
    """Algebra Integral pool state. `price` is a sqrtPriceX96 value."""

    price: int
    tick: int
    last_fee: int
    plugin_config: int = 0
    community_fee: int = 0
    unlocked: bool = True


@dataclass
class PositionData:
    """Raw NonfungiblePositionManager.positions() tuple."""

    nonce: int
    operator: str
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    liquidity: int
    fee_growth_inside0_last_x128: int
    fee_growth_inside1_last_x128: int
    tokens_owed0: int
    tokens_owed1: int


@dataclass
class MintParams:
    """Arguments for NonfungiblePositionManager.mint()."""

    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    amount0_desired: int
    amount1_desired: int
    amount0_min: int
    amount1_min: int
    recipient: str
    deadline: int

    def as_tuple(self) -> tuple:
        return (
            self.token0,
            self.token1,
            self.fee,
            self.tick_lower,
            self.tick_upper,
            self.amount0_desired,
            self.amount1_desired,
            self.amount0_min,
            self.amount1_min,
            self.recipient,
            self.deadline,
        )


@dataclass
class Position:
    """
    A liquidity position joined with the state of its pool.

    Attributes:
        token_id: Position NFT id
        token0: First token address in the pair
        token1: Second token address in the pair
        fee: Fee tier in hundredths of a bip
        tick_lower: Lower tick bound
        tick_upper: Upper tick bound
        liquidity: Position liquidity L
        tokens_owed0: Uncollected token0 (fees plus withdrawn liquidity)
        tokens_owed1: Uncollected token1
        pool_address: Pool address, None when the factory has no pool
        current_tick: Pool's current tick, None when unknown
        tick_spacing: Pool tick spacing (fallback value when unknown)
        sqrt_price_x96: Pool sqrtPriceX96, None when unknown
    """

    token_id: int
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    liquidity: int
    tokens_owed0: int = 0
    tokens_owed1: int = 0
    pool_address: Optional[str] = None
    current_tick: Optional[int] = None
    tick_spacing: int = 60
    sqrt_price_x96: Optional[int] = None


@dataclass
class AgentInfo:
    """FAssets agent vault as listed by the asset manager."""

    agent_vault: str
    owner_management_address: str
    fee_bips: int
    minting_vault_collateral_ratio_bips: int
    minting_pool_collateral_ratio_bips: int
    free_collateral_lots: int
    status: int


@dataclass
class CollateralReservation:
    """
    Decoded CollateralReserved event.

    Attributes:
        agent_vault: Agent that reserved collateral
        minter: EVM account that will receive the minted FAssets
        reservation_id: Collateral reservation id
        value_uba: Underlying amount to pay for the minted lots
        fee_uba: Agent minting fee, paid on top of the value
        first_underlying_block: First XRPL ledger the payment may land in
        last_underlying_block: Last XRPL ledger the payment may land in
        last_underlying_timestamp: Payment deadline on the underlying chain
        payment_address: Agent's XRPL address
        payment_reference: 32-byte reference the payment memo must carry
        executor: Executor address (zero when none)
        executor_fee_nat_wei: Executor fee in native wei
    """

    agent_vault: str
    minter: str
    reservation_id: int
    value_uba: int
    fee_uba: int
    first_underlying_block: int
    last_underlying_block: int
    last_underlying_timestamp: int
    payment_address: str
    payment_reference: bytes
    executor: str
    executor_fee_nat_wei: int
