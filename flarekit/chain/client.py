"""
Thin web3 client shared by every contract binding.

This module wraps a single Web3 HTTP connection with the handful of
operations the bindings need: contract construction from bundled ABIs,
read calls with consistent error wrapping, small concurrent fan-outs of
independent reads, and the build/sign/send/wait transaction cycle.
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from eth_account.signers.local import LocalAccount
from web3 import Web3
from web3.contract.contract import ContractFunction

from .errors import ContractError, ErrorHandler

logger = logging.getLogger(__name__)

ABI_DIR = Path(__file__).resolve().parent.parent / "contracts" / "abi"

MAX_UINT256 = 2**256 - 1
MAX_UINT128 = 2**128 - 1
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def load_abi(*names: str) -> List[Dict[str, Any]]:
    """
    Load and concatenate bundled ABI definitions.

    Args:
        names: ABI file stems under contracts/abi (e.g. "erc20")

    Returns:
        Combined ABI list

    Raises:
        ContractError: If a file is missing or is not a JSON list
    """
    abi: List[Dict[str, Any]] = []
    for name in names:
        path = ABI_DIR / f"{name}.json"
        try:
            with open(path) as f:
                entries = json.load(f)
        except FileNotFoundError:
            raise ContractError(f"ABI not found: {name}")
        except json.JSONDecodeError as e:
            raise ContractError(f"Invalid ABI {name}: {e}")

        if not isinstance(entries, list):
            raise ContractError(f"Invalid ABI {name}: expected a list")
        abi.extend(entries)
    return abi


@dataclass
class TxResult:
    """Outcome of a mined transaction."""

    tx_hash: str
    block_number: int
    gas_used: int
    status: int
    logs: List[Any] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status == 1


class ChainClient:
    """
    One connection to an EVM JSON-RPC endpoint.

    Created fresh for each command invocation; holds no state beyond the
    Web3 instance.
    """

    def __init__(
        self,
        rpc_url: str,
        chain_id: int,
        timeout: int = 30,
        receipt_timeout: int = 180,
        web3: Optional[Web3] = None,
    ):
        self.rpc_url = rpc_url
        self.chain_id = chain_id
        self.receipt_timeout = receipt_timeout
        self.web3 = web3 or Web3(
            Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout})
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.error_handler = ErrorHandler(self.logger)

    @classmethod
    def from_profile(cls, profile) -> "ChainClient":
        return cls(profile.rpc_url, profile.chain_id, timeout=profile.rpc_timeout)

    def contract(self, address: str, *abi_names: str):
        """Build a contract object for a checksummed address."""
        return self.web3.eth.contract(
            address=Web3.to_checksum_address(address), abi=load_abi(*abi_names)
        )

    def call(self, fn: ContractFunction, label: Optional[str] = None,
             block_identifier: Union[int, str] = "latest") -> Any:
        """
        Execute a read-only contract call.

        Args:
            fn: Bound contract function
            label: Operation name used in error messages
            block_identifier: Block to call at

        Raises:
            NetworkError: If the RPC endpoint cannot be reached
            ContractError: If the call reverts or returns garbage
        """
        label = label or getattr(fn, "fn_name", "call")
        try:
            return fn.call(block_identifier=block_identifier)
        except Exception as e:
            self.error_handler.log_error(e, {"operation": label})
            raise self.error_handler.wrap(e, label) from e

    async def gather(self, *calls: Union[ContractFunction, Callable[[], Any]]) -> List[Any]:
        """
        Run a fixed set of independent reads concurrently.

        Each entry is either a bound contract function or a zero-argument
        callable. Results come back in argument order; the first failure
        propagates.
        """
        tasks = []
        for c in calls:
            if isinstance(c, ContractFunction):
                tasks.append(asyncio.to_thread(self.call, c))
            else:
                tasks.append(asyncio.to_thread(c))
        return list(await asyncio.gather(*tasks))

    async def run(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """Run one blocking binding call in a worker thread."""
        return await asyncio.to_thread(fn, *args, **kwargs)

    def native_balance(self, address: str) -> int:
        try:
            return self.web3.eth.get_balance(Web3.to_checksum_address(address))
        except Exception as e:
            raise self.error_handler.wrap(e, "Balance query") from e

    def gas_price(self) -> int:
        try:
            return self.web3.eth.gas_price
        except Exception as e:
            raise self.error_handler.wrap(e, "Gas price query") from e

    def block_number(self) -> int:
        try:
            return self.web3.eth.block_number
        except Exception as e:
            raise self.error_handler.wrap(e, "Block number query") from e

    def transact(
        self,
        signer: LocalAccount,
        fn: ContractFunction,
        value: int = 0,
        label: Optional[str] = None,
    ) -> TxResult:
        """
        Build, sign and send a contract transaction, then wait for the receipt.

        Args:
            signer: Local account that signs the transaction
            fn: Bound contract function with its arguments
            value: Native value to attach, in wei
            label: Operation name used in logs and error messages

        Returns:
            TxResult for the mined transaction

        Raises:
            ContractError: If gas estimation fails or the transaction reverts
            NetworkError: If the RPC endpoint cannot be reached
        """
        label = label or getattr(fn, "fn_name", "transaction")
        try:
            tx = fn.build_transaction(
                {
                    "from": signer.address,
                    "nonce": self.web3.eth.get_transaction_count(signer.address, "pending"),
                    "chainId": self.chain_id,
                    "value": value,
                }
            )
        except Exception as e:
            self.error_handler.log_error(e, {"operation": label})
            raise self.error_handler.wrap(e, label) from e

        return self._send(signer, tx, label)

    def send_native(self, signer: LocalAccount, to: str, value: int) -> TxResult:
        """Plain value transfer of the native token."""
        try:
            tx = {
                "from": signer.address,
                "to": Web3.to_checksum_address(to),
                "value": value,
                "gas": 21000,
                "gasPrice": self.web3.eth.gas_price,
                "nonce": self.web3.eth.get_transaction_count(signer.address, "pending"),
                "chainId": self.chain_id,
            }
        except Exception as e:
            raise self.error_handler.wrap(e, "Native transfer") from e
        return self._send(signer, tx, "Native transfer")

    def _send(self, signer: LocalAccount, tx: Dict[str, Any], label: str) -> TxResult:
        try:
            signed = signer.sign_transaction(tx)
            tx_hash = self.web3.eth.send_raw_transaction(signed.raw_transaction)
            self.logger.info(f"📤 {label} sent: {Web3.to_hex(tx_hash)}")
            receipt = self.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self.receipt_timeout
            )
        except Exception as e:
            self.error_handler.log_error(e, {"operation": label})
            raise self.error_handler.wrap(e, label) from e

        result = TxResult(
            tx_hash=Web3.to_hex(receipt["transactionHash"]),
            block_number=receipt["blockNumber"],
            gas_used=receipt["gasUsed"],
            status=receipt["status"],
            logs=list(receipt["logs"]),
        )
        if not result.success:
            raise ContractError(f"{label} reverted in tx {result.tx_hash}")

        self.logger.info(f"✅ {label} confirmed in block {result.block_number}")
        return result

    @staticmethod
    def deadline(seconds: int = 300) -> int:
        """Unix timestamp `seconds` from now, for router and manager deadlines."""
        return int(time.time()) + seconds
