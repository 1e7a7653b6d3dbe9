"""
Factory and pool bindings for Uniswap V3 and Algebra Integral.
"""

from typing import Optional

from web3 import Web3

from .base import ContractBinding
from .types import GlobalState, Slot0


def _pool_or_none(address: str) -> Optional[str]:
    if not address or int(address, 16) == 0:
        return None
    return Web3.to_checksum_address(address)


class V3Factory(ContractBinding):
    ABI_NAMES = ("v3_factory",)

    def get_pool(self, token_a: str, token_b: str, fee: int) -> Optional[str]:
        """Pool address for a pair and fee tier, None if it doesn't exist."""
        address = self._call(
            "getPool",
            Web3.to_checksum_address(token_a),
            Web3.to_checksum_address(token_b),
            fee,
        )
        return _pool_or_none(address)


class V3Pool(ContractBinding):
    ABI_NAMES = ("v3_pool",)

    def slot0(self) -> Slot0:
        return Slot0(*self._call("slot0"))

    def liquidity(self) -> int:
        return self._call("liquidity")

    def tick_spacing(self) -> int:
        return self._call("tickSpacing")

    def fee(self) -> int:
        return self._call("fee")

    def token0(self) -> str:
        return self._call("token0")

    def token1(self) -> str:
        return self._call("token1")


class AlgebraFactory(ContractBinding):
    ABI_NAMES = ("algebra_factory",)

    def pool_by_pair(self, token_a: str, token_b: str) -> Optional[str]:
        address = self._call(
            "poolByPair", Web3.to_checksum_address(token_a), Web3.to_checksum_address(token_b)
        )
        return _pool_or_none(address)


class AlgebraPool(ContractBinding):
    ABI_NAMES = ("algebra_pool",)

    def global_state(self) -> GlobalState:
        return GlobalState(*self._call("globalState"))

    def liquidity(self) -> int:
        return self._call("liquidity")

    def tick_spacing(self) -> int:
        return self._call("tickSpacing")

    def token0(self) -> str:
        return self._call("token0")

    def token1(self) -> str:
        return self._call("token1")
