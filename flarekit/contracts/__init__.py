"""
Typed bindings for the contracts flarekit talks to.

Each binding wraps one deployed contract and returns typed records from
contracts.types instead of raw tuples.
"""

from .asset_manager import AssetManager
from .base import ContractBinding
from .erc20 import Erc20Token, WrappedNative
from .pools import AlgebraFactory, AlgebraPool, V3Factory, V3Pool
from .position_manager import PositionManager
from .quoters import AlgebraQuoter, V3Quoter
from .routers import AlgebraRouter, V3Router
from .types import (
    AgentInfo,
    CollateralReservation,
    GlobalState,
    MintParams,
    Position,
    PositionData,
    Slot0,
)

__all__ = [
    "AssetManager",
    "ContractBinding",
    "Erc20Token",
    "WrappedNative",
    "AlgebraFactory",
    "AlgebraPool",
    "V3Factory",
    "V3Pool",
    "PositionManager",
    "AlgebraQuoter",
    "V3Quoter",
    "AlgebraRouter",
    "V3Router",
    "AgentInfo",
    "CollateralReservation",
    "GlobalState",
    "MintParams",
    "Position",
    "PositionData",
    "Slot0",
]
