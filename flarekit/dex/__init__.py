"""DEX services for Enosys V3 (Uniswap V3) and SparkDex V4 (Algebra Integral)."""

from .base import DexService, PoolInfo, SwapResult
from .enosys import EnosysV3Service, MintResult, RemoveResult
from .sparkdex import SparkDexV4Service

__all__ = [
    "DexService",
    "PoolInfo",
    "SwapResult",
    "EnosysV3Service",
    "MintResult",
    "RemoveResult",
    "SparkDexV4Service",
]
