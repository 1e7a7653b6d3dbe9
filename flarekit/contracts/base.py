"""
Base class for typed contract bindings.
"""

import logging
from typing import Any, Optional, Tuple

from eth_account.signers.local import LocalAccount
from web3 import Web3

from ..chain.client import ChainClient, TxResult


class ContractBinding:
    """
    A deployed contract bound to one ChainClient.

    Subclasses name the bundled ABI files they need and expose typed
    methods; reads go through ChainClient.call and writes through
    ChainClient.transact so every failure is wrapped the same way.
    """

    ABI_NAMES: Tuple[str, ...] = ()

    def __init__(self, client: ChainClient, address: str):
        self.client = client
        self.address = Web3.to_checksum_address(address)
        self.contract = client.contract(self.address, *self.ABI_NAMES)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _call(self, fn_name: str, *args, label: Optional[str] = None) -> Any:
        fn = getattr(self.contract.functions, fn_name)(*args)
        return self.client.call(fn, label or f"{self.__class__.__name__}.{fn_name}")

    def _transact(
        self,
        signer: LocalAccount,
        fn_name: str,
        *args,
        value: int = 0,
        label: Optional[str] = None,
    ) -> TxResult:
        fn = getattr(self.contract.functions, fn_name)(*args)
        return self.client.transact(signer, fn, value=value, label=label or fn_name)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.address})"
