"""
Swap router bindings for Uniswap V3 SwapRouter and the Algebra Integral router.
"""

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..chain.client import ZERO_ADDRESS, TxResult
from .base import ContractBinding


class V3Router(ContractBinding):
    ABI_NAMES = ("v3_router",)

    def exact_input_single(
        self,
        signer: LocalAccount,
        token_in: str,
        token_out: str,
        fee: int,
        amount_in: int,
        amount_out_minimum: int,
        deadline: int,
        recipient: str = None,
    ) -> TxResult:
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            fee,
            Web3.to_checksum_address(recipient or signer.address),
            deadline,
            amount_in,
            amount_out_minimum,
            0,
        )
        return self._transact(signer, "exactInputSingle", params, label="Swap")

    def exact_input(
        self,
        signer: LocalAccount,
        path: bytes,
        amount_in: int,
        amount_out_minimum: int,
        deadline: int,
        recipient: str = None,
    ) -> TxResult:
        params = (
            path,
            Web3.to_checksum_address(recipient or signer.address),
            deadline,
            amount_in,
            amount_out_minimum,
        )
        return self._transact(signer, "exactInput", params, label="Multi-hop swap")


class AlgebraRouter(ContractBinding):
    ABI_NAMES = ("algebra_router",)

    def exact_input_single(
        self,
        signer: LocalAccount,
        token_in: str,
        token_out: str,
        amount_in: int,
        amount_out_minimum: int,
        deadline: int,
        deployer: str = ZERO_ADDRESS,
        recipient: str = None,
    ) -> TxResult:
        params = (
            Web3.to_checksum_address(token_in),
            Web3.to_checksum_address(token_out),
            Web3.to_checksum_address(deployer),
            Web3.to_checksum_address(recipient or signer.address),
            deadline,
            amount_in,
            amount_out_minimum,
            0,
        )
        return self._transact(signer, "exactInputSingle", params, label="Swap")

    def exact_input(
        self,
        signer: LocalAccount,
        path: bytes,
        amount_in: int,
        amount_out_minimum: int,
        deadline: int,
        recipient: str = None,
    ) -> TxResult:
        params = (
            path,
            Web3.to_checksum_address(recipient or signer.address),
            deadline,
            amount_in,
            amount_out_minimum,
        )
        return self._transact(signer, "exactInput", params, label="Multi-hop swap")
