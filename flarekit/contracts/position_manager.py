"""
NonfungiblePositionManager binding (Uniswap V3 periphery).
"""

from typing import Optional

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..chain.client import MAX_UINT128, TxResult
from ..chain.events import find_event, get_event_abi
from .base import ContractBinding
from .types import MintParams, PositionData


class PositionManager(ContractBinding):
    ABI_NAMES = ("position_manager",)

    def balance_of(self, owner: str) -> int:
        return self._call("balanceOf", Web3.to_checksum_address(owner))

    def token_of_owner_by_index(self, owner: str, index: int) -> int:
        return self._call("tokenOfOwnerByIndex", Web3.to_checksum_address(owner), index)

    def positions(self, token_id: int) -> PositionData:
        raw = self._call("positions", token_id, label=f"positions({token_id})")
        return PositionData(*raw)

    def mint(self, signer: LocalAccount, params: MintParams) -> TxResult:
        return self._transact(signer, "mint", params.as_tuple(), label="Mint position")

    def increase_liquidity(
        self,
        signer: LocalAccount,
        token_id: int,
        amount0_desired: int,
        amount1_desired: int,
        deadline: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
    ) -> TxResult:
        params = (token_id, amount0_desired, amount1_desired, amount0_min, amount1_min, deadline)
        return self._transact(signer, "increaseLiquidity", params, label="Increase liquidity")

    def decrease_liquidity(
        self,
        signer: LocalAccount,
        token_id: int,
        liquidity: int,
        deadline: int,
        amount0_min: int = 0,
        amount1_min: int = 0,
    ) -> TxResult:
        params = (token_id, liquidity, amount0_min, amount1_min, deadline)
        return self._transact(signer, "decreaseLiquidity", params, label="Decrease liquidity")

    def collect(self, signer: LocalAccount, token_id: int, recipient: str) -> TxResult:
        """Collect everything owed to the position."""
        params = (token_id, Web3.to_checksum_address(recipient), MAX_UINT128, MAX_UINT128)
        return self._transact(signer, "collect", params, label="Collect")

    def burn(self, signer: LocalAccount, token_id: int) -> TxResult:
        return self._transact(signer, "burn", token_id, label="Burn position")

    def minted_token_id(self, tx_result: TxResult) -> Optional[int]:
        """Token id from the NFT Transfer event this contract emitted in a mint."""
        transfer = get_event_abi(self.contract.abi, "Transfer")
        event = find_event(tx_result.logs, transfer, address=self.address)
        return event["tokenId"] if event else None
