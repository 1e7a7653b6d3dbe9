"""
XRP Ledger client wrapper.

A thin layer over xrpl-py's async websocket client that returns typed records
and maps ledger failures onto the flarekit error hierarchy. Amounts cross
this boundary as integer drops; XRP values are Decimals for display.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from xrpl.asyncio.clients import AsyncWebsocketClient
from xrpl.asyncio.transaction import submit_and_wait
from xrpl.constants import XRPLException
from xrpl.models.requests import AccountInfo, AccountTx
from xrpl.models.response import Response
from xrpl.models.transactions import Memo, Payment
from xrpl.utils import drops_to_xrp
from xrpl.wallet import Wallet

from ..chain.errors import LedgerError, NetworkError, ValidationError

logger = logging.getLogger(__name__)

XRPL_ADDRESS_RE = re.compile(r"^r[1-9A-HJ-NP-Za-km-z]{24,34}$")

DROPS_PER_XRP = 1_000_000
# Base account reserve
MIN_RESERVE_XRP = 1
MIN_RESERVE_DROPS = MIN_RESERVE_XRP * DROPS_PER_XRP

TEXT_PLAIN_HEX = "text/plain".encode().hex().upper()


def validate_xrpl_address(address: str) -> str:
    """
    Check an XRPL classic address against the base58 address pattern.

    Raises:
        ValidationError: If the address is malformed
    """
    if not address or not XRPL_ADDRESS_RE.match(address):
        raise ValidationError(f"Invalid XRPL address format: {address}")
    return address


def xrp_to_drops_int(xrp: Decimal) -> int:
    """Whole drops for an XRP amount; rejects sub-drop precision."""
    drops = Decimal(xrp) * DROPS_PER_XRP
    if drops != drops.to_integral_value():
        raise ValidationError(f"XRP amount {xrp} has more than 6 decimal places")
    return int(drops)


def drops_to_xrp_decimal(drops: int) -> Decimal:
    return drops_to_xrp(str(drops))


@dataclass
class LedgerTx:
    """One entry of an account's transaction history."""

    tx_hash: str
    tx_type: str
    direction: str
    counterparty: Optional[str]
    amount_xrp: Optional[Decimal]
    result: str
    validated: bool
    close_time: Optional[str] = None

    @property
    def is_outgoing(self) -> bool:
        return self.direction == "out"


@dataclass
class PaymentResult:
    """A validated XRPL payment."""

    tx_hash: str
    result_code: str
    destination: str
    amount_drops: int
    ledger_index: Optional[int] = None

    @property
    def amount_xrp(self) -> Decimal:
        return drops_to_xrp_decimal(self.amount_drops)


class XrplLedger:
    """
    Websocket connection to an XRPL node.

    Use as an async context manager; the connection is opened on entry
    and closed on exit. Every request runs on the caller's event loop.
    """

    def __init__(self, url: str, client: Optional[AsyncWebsocketClient] = None):
        self.url = url
        self._client = client
        self._owns_client = client is None
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def __aenter__(self) -> "XrplLedger":
        if self._client is None:
            client = AsyncWebsocketClient(self.url)
            try:
                await client.open()
            except Exception as e:
                raise NetworkError(f"Cannot connect to XRPL at {self.url}: {e}") from e
            self._client = client
        return self

    async def __aexit__(self, exc_type, exc, tb):
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    @property
    def client(self) -> AsyncWebsocketClient:
        if self._client is None:
            raise NetworkError("XRPL client is not connected; use XrplLedger as an async context manager")
        return self._client

    async def _request(self, request) -> Response:
        method = request.method.value
        try:
            response = await self.client.request(request)
        except XRPLException as e:
            raise LedgerError(f"XRPL {method} failed: {e}") from e
        except Exception as e:
            raise NetworkError(f"XRPL {method} failed: {e}") from e
        return response

    async def account_info(self, address: str) -> Optional[Dict[str, Any]]:
        """
        account_data for an address from the validated ledger.

        Returns:
            The account_data dict, or None if the account is not activated

        Raises:
            LedgerError: On any other ledger error
        """
        response = await self._request(AccountInfo(account=address, ledger_index="validated"))
        if response.is_successful():
            return response.result["account_data"]

        error = response.result.get("error")
        if error == "actNotFound":
            return None
        raise LedgerError(
            f"account_info failed for {address}: {response.result.get('error_message', error)}",
            result_code=error,
        )

    async def balance_drops(self, address: str) -> int:
        """Balance in drops; zero for an unactivated account."""
        info = await self.account_info(address)
        return int(info["Balance"]) if info else 0

    async def balance_xrp(self, address: str) -> Decimal:
        return drops_to_xrp_decimal(await self.balance_drops(address))

    async def is_activated(self, address: str) -> bool:
        return await self.account_info(address) is not None

    async def recent_transactions(self, address: str, limit: int = 10) -> List[LedgerTx]:
        """Most recent transactions touching an account, newest first."""
        response = await self._request(AccountTx(account=address, limit=limit))
        if not response.is_successful():
            error = response.result.get("error")
            if error == "actNotFound":
                return []
            raise LedgerError(f"account_tx failed for {address}: {error}", result_code=error)

        history = []
        for entry in response.result.get("transactions", []):
            tx = entry.get("tx_json") or entry.get("tx") or {}
            meta = entry.get("meta") or {}
            outgoing = tx.get("Account") == address

            delivered = meta.get("delivered_amount", tx.get("DeliverMax", tx.get("Amount")))
            amount = drops_to_xrp_decimal(int(delivered)) if isinstance(delivered, str) else None

            history.append(
                LedgerTx(
                    tx_hash=entry.get("hash") or tx.get("hash", ""),
                    tx_type=tx.get("TransactionType", "?"),
                    direction="out" if outgoing else "in",
                    counterparty=tx.get("Destination") if outgoing else tx.get("Account"),
                    amount_xrp=amount,
                    result=meta.get("TransactionResult", "?"),
                    validated=bool(entry.get("validated")),
                    close_time=entry.get("close_time_iso"),
                )
            )
        return history

    async def send_payment(
        self,
        wallet: Wallet,
        destination: str,
        amount_drops: int,
        memo_text: Optional[str] = None,
        memo_data_hex: Optional[str] = None,
        destination_tag: Optional[int] = None,
    ) -> PaymentResult:
        """
        Sign, submit and wait for an XRP payment to validate.

        Args:
            wallet: Sending wallet
            destination: Destination classic address
            amount_drops: Amount in drops
            memo_text: Plain-text memo, hex encoded into MemoData
            memo_data_hex: Pre-encoded MemoData (e.g. a payment reference)
            destination_tag: Optional destination tag

        Raises:
            LedgerError: If submission fails or the result is not tesSUCCESS
            NetworkError: If the websocket fails mid-submission
        """
        memos = None
        if memo_text is not None or memo_data_hex is not None:
            data = memo_data_hex if memo_data_hex is not None else memo_text.encode().hex()
            memos = [Memo(memo_data=data.removeprefix("0x").upper(), memo_type=TEXT_PLAIN_HEX)]

        payment = Payment(
            account=wallet.address,
            destination=destination,
            amount=str(amount_drops),
            destination_tag=destination_tag,
            memos=memos,
        )

        self.logger.info(f"💸 Sending {drops_to_xrp_decimal(amount_drops)} XRP to {destination}")
        try:
            response = await submit_and_wait(payment, self.client, wallet)
        except XRPLException as e:
            raise LedgerError(f"XRPL payment failed: {e}") from e
        except Exception as e:
            raise NetworkError(f"XRPL payment failed: {e}") from e

        result = response.result
        code = (result.get("meta") or {}).get("TransactionResult", "unknown")
        tx_hash = result.get("hash", "")
        if code != "tesSUCCESS":
            raise LedgerError(f"XRPL payment failed: {code} (tx {tx_hash})", result_code=code)

        return PaymentResult(
            tx_hash=tx_hash,
            result_code=code,
            destination=destination,
            amount_drops=amount_drops,
            ledger_index=result.get("ledger_index"),
        )


def close_time(iso: Optional[str]) -> str:
    """Short display form of a ledger close time."""
    if not iso:
        return ""
    try:
        return datetime.fromisoformat(iso.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return iso
