"""
ERC-20 and wrapped native token bindings.
"""

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..chain.client import MAX_UINT256, TxResult
from .base import ContractBinding


class Erc20Token(ContractBinding):
    ABI_NAMES = ("erc20",)

    def balance_of(self, owner: str) -> int:
        return self._call("balanceOf", Web3.to_checksum_address(owner))

    def allowance(self, owner: str, spender: str) -> int:
        return self._call(
            "allowance", Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)
        )

    def decimals(self) -> int:
        return self._call("decimals")

    def symbol(self) -> str:
        return self._call("symbol")

    def name(self) -> str:
        return self._call("name")

    def total_supply(self) -> int:
        return self._call("totalSupply")

    def approve(self, signer: LocalAccount, spender: str, amount: int) -> TxResult:
        return self._transact(
            signer, "approve", Web3.to_checksum_address(spender), amount, label="Approve"
        )

    def transfer(self, signer: LocalAccount, to: str, amount: int) -> TxResult:
        return self._transact(
            signer, "transfer", Web3.to_checksum_address(to), amount, label="Transfer"
        )

    def ensure_allowance(self, signer: LocalAccount, spender: str, amount: int) -> bool:
        """
        Approve `spender` for the maximum amount if the current allowance is short.

        Returns:
            True if an approval transaction was sent
        """
        current = self.allowance(signer.address, spender)
        if current >= amount:
            return False

        self.logger.info(f"🔓 Approving {spender} to spend token {self.address}")
        self.approve(signer, spender, MAX_UINT256)
        return True


class WrappedNative(Erc20Token):
    """WFLR: deposit native FLR for WFLR and withdraw it back."""

    ABI_NAMES = ("erc20", "wrapped_native")

    def deposit(self, signer: LocalAccount, amount: int) -> TxResult:
        return self._transact(signer, "deposit", value=amount, label="Wrap")

    def withdraw(self, signer: LocalAccount, amount: int) -> TxResult:
        return self._transact(signer, "withdraw", amount, label="Unwrap")
