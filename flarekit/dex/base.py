"""
Shared pieces for the DEX services.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from eth_account.signers.local import LocalAccount

from ..amm.quoting import Quote, format_units
from ..chain.client import ChainClient, TxResult
from ..chain.errors import InsufficientFundsError
from ..config.tokens import TokenInfo
from ..contracts.erc20 import Erc20Token


@dataclass
class PoolInfo:
    """Snapshot of one pool's state."""

    address: str
    fee: int
    tick: int
    sqrt_price_x96: int
    liquidity: int
    tick_spacing: int


@dataclass
class SwapResult:
    """A confirmed swap with the quote it was priced from."""

    tx: TxResult
    quote: Quote
    min_amount_out: int
    approved: bool = False


class DexService:
    """
    Base class for DEX services.

    Holds the chain client and network profile and provides token helpers
    shared by the Uniswap V3 and Algebra services.
    """

    def __init__(self, client: ChainClient, profile):
        self.client = client
        self.profile = profile
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def token(self, address: str) -> Erc20Token:
        return Erc20Token(self.client, address)

    def token_decimals(self, token: TokenInfo) -> int:
        """Decimals from the token table, or from the contract for raw addresses."""
        if token.decimals is not None:
            return token.decimals
        return self.token(token.address).decimals()

    def require_balance(self, signer: LocalAccount, token: TokenInfo, amount: int) -> None:
        """
        Fail before sending anything if the signer can't cover `amount`.

        Raises:
            InsufficientFundsError: If the token balance is below amount
        """
        balance = self.token(token.address).balance_of(signer.address)
        if balance < amount:
            decimals = self.token_decimals(token)
            raise InsufficientFundsError(
                f"Insufficient {token.symbol}. Need {format_units(amount, decimals)}, "
                f"have {format_units(balance, decimals)}"
            )

    def ensure_allowance(self, signer: LocalAccount, token: TokenInfo, spender: str,
                         amount: int) -> bool:
        return self.token(token.address).ensure_allowance(signer, spender, amount)

    @staticmethod
    def deadline(seconds: Optional[int] = None) -> int:
        return ChainClient.deadline(seconds or 300)
