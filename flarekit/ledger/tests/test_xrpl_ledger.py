"""Tests for the XRPL client wrapper."""
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, Mock, patch

from xrpl.asyncio.clients import AsyncWebsocketClient
from xrpl.constants import XRPLException
from xrpl.models.response import Response, ResponseStatus
from xrpl.wallet import Wallet

from flarekit.chain.errors import LedgerError, NetworkError, ValidationError
from flarekit.ledger.xrpl import (
    TEXT_PLAIN_HEX,
    XrplLedger,
    close_time,
    drops_to_xrp_decimal,
    validate_xrpl_address,
    xrp_to_drops_int,
)

ACCOUNT = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
OTHER = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"


class CannedWebsocketClient(AsyncWebsocketClient):
    """Real async client class with the socket replaced by canned replies."""

    def __init__(self, url, result=None, error=None):
        super().__init__(url)
        self.result = result
        self.error = error
        self.requests = []

    def is_open(self):
        return True

    async def _request_impl(self, request, *args, **kwargs):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return Response(status=ResponseStatus.SUCCESS, result=self.result)


@pytest.fixture
def xrpl_client():
    client = Mock()
    client.request = AsyncMock()
    client.close = AsyncMock()
    return client


@pytest.fixture
def ledger(xrpl_client):
    return XrplLedger("wss://xrpl.test", client=xrpl_client)


class TestAddressAndUnits:

    @pytest.mark.parametrize("address", [ACCOUNT, OTHER])
    def test_valid(self, address):
        assert validate_xrpl_address(address) == address

    @pytest.mark.parametrize("address", ["", "r123", "xPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe", "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpA0e"])
    def test_invalid(self, address):
        with pytest.raises(ValidationError, match="Invalid XRPL address format"):
            validate_xrpl_address(address)

    def test_drops(self):
        assert xrp_to_drops_int(Decimal("10.05")) == 10_050_000
        assert drops_to_xrp_decimal(10_050_000) == Decimal("10.05")

    def test_sub_drop_precision(self):
        with pytest.raises(ValidationError):
            xrp_to_drops_int(Decimal("0.0000001"))


class TestAccountInfo:

    @pytest.mark.asyncio
    async def test_activated(self, ledger, xrpl_client, make_response):
        xrpl_client.request.return_value = make_response({"account_data": {"Balance": "25000000"}})

        assert await ledger.balance_drops(ACCOUNT) == 25_000_000
        assert await ledger.balance_xrp(ACCOUNT) == Decimal(25)
        assert await ledger.is_activated(ACCOUNT)

    @pytest.mark.asyncio
    async def test_not_found(self, ledger, xrpl_client, make_response):
        xrpl_client.request.return_value = make_response({"error": "actNotFound"}, success=False)

        assert await ledger.account_info(ACCOUNT) is None
        assert await ledger.balance_drops(ACCOUNT) == 0
        assert not await ledger.is_activated(ACCOUNT)

    @pytest.mark.asyncio
    async def test_other_error(self, ledger, xrpl_client, make_response):
        xrpl_client.request.return_value = make_response(
            {"error": "tooBusy", "error_message": "The server is too busy"}, success=False
        )
        with pytest.raises(LedgerError) as excinfo:
            await ledger.account_info(ACCOUNT)
        assert excinfo.value.result_code == "tooBusy"

    @pytest.mark.asyncio
    async def test_transport_failure(self, ledger, xrpl_client):
        xrpl_client.request.side_effect = ConnectionError("socket closed")
        with pytest.raises(NetworkError):
            await ledger.account_info(ACCOUNT)

    @pytest.mark.asyncio
    async def test_library_failure(self, ledger, xrpl_client):
        xrpl_client.request.side_effect = XRPLException("bad request")
        with pytest.raises(LedgerError):
            await ledger.account_info(ACCOUNT)


class TestAsyncClient:
    """Requests go through xrpl-py's async client on the running loop."""

    @pytest.mark.asyncio
    async def test_account_info_inside_event_loop(self):
        client = CannedWebsocketClient(
            "wss://xrpl.test", result={"account_data": {"Account": OTHER, "Balance": "25000000"}}
        )

        info = await XrplLedger("wss://xrpl.test", client=client).account_info(OTHER)

        assert info["Balance"] == "25000000"
        assert client.requests[0].account == OTHER

    @pytest.mark.asyncio
    async def test_balance_inside_event_loop(self):
        client = CannedWebsocketClient("wss://xrpl.test", result={"account_data": {"Balance": "1500000"}})

        async with XrplLedger("wss://xrpl.test", client=client) as ledger:
            assert await ledger.balance_xrp(ACCOUNT) == Decimal("1.5")

    @pytest.mark.asyncio
    async def test_error_names_the_method(self):
        client = CannedWebsocketClient("wss://xrpl.test", error=RuntimeError("socket closed"))

        with pytest.raises(NetworkError) as excinfo:
            await XrplLedger("wss://xrpl.test", client=client).account_info(OTHER)

        assert "XRPL account_info failed: socket closed" in str(excinfo.value)
        assert "RequestMethod" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_unopened_ledger_has_no_client():
    with pytest.raises(NetworkError, match="not connected"):
        await XrplLedger("wss://xrpl.test").account_info(ACCOUNT)


@pytest.mark.asyncio
async def test_connect_failure_is_network_error():
    with patch("flarekit.ledger.xrpl.AsyncWebsocketClient") as client_cls:
        client_cls.return_value.open = AsyncMock(side_effect=OSError("refused"))
        with pytest.raises(NetworkError, match="Cannot connect to XRPL at wss://xrpl.test"):
            async with XrplLedger("wss://xrpl.test"):
                pass


@pytest.mark.asyncio
async def test_owned_client_is_closed():
    with patch("flarekit.ledger.xrpl.AsyncWebsocketClient") as client_cls:
        client = client_cls.return_value
        client.open = AsyncMock()
        client.close = AsyncMock()
        async with XrplLedger("wss://xrpl.test") as ledger:
            assert ledger.client is client
        client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_injected_client_is_not_closed(xrpl_client):
    async with XrplLedger("wss://xrpl.test", client=xrpl_client):
        pass
    xrpl_client.close.assert_not_called()


@pytest.mark.asyncio
async def test_recent_transactions(ledger, xrpl_client, make_response):
    xrpl_client.request.return_value = make_response({"transactions": [
        {
            "hash": "H1",
            "validated": True,
            "close_time_iso": "2025-06-01T12:30:00Z",
            "tx_json": {"TransactionType": "Payment", "Account": ACCOUNT, "Destination": OTHER, "DeliverMax": "1500000"},
            "meta": {"TransactionResult": "tesSUCCESS", "delivered_amount": "1500000"},
        },
        {
            "hash": "H2",
            "validated": False,
            "tx": {"TransactionType": "Payment", "Account": OTHER, "Destination": ACCOUNT,
                   "Amount": {"currency": "USD", "value": "1", "issuer": OTHER}},
            "meta": {"TransactionResult": "tesSUCCESS"},
        },
    ]})

    out, incoming = await ledger.recent_transactions(ACCOUNT, 2)

    assert out.is_outgoing
    assert out.counterparty == OTHER
    assert out.amount_xrp == Decimal("1.5")
    assert out.validated
    assert close_time(out.close_time) == "2025-06-01 12:30"
    assert incoming.direction == "in"
    assert incoming.counterparty == OTHER
    assert incoming.amount_xrp is None


class TestSendPayment:

    @pytest.fixture
    def wallet(self):
        return Wallet.create()

    @pytest.mark.asyncio
    async def test_payment_reference_memo(self, ledger, wallet, make_response):
        reference = "46425052664100010000000000000000000000000000000000000000000004d2"
        with patch("flarekit.ledger.xrpl.submit_and_wait", new_callable=AsyncMock) as submit:
            submit.return_value = make_response(
                {"hash": "TXHASH", "ledger_index": 99, "meta": {"TransactionResult": "tesSUCCESS"}}
            )
            result = await ledger.send_payment(wallet, OTHER, 10_050_000, memo_data_hex=reference)

        payment = submit.call_args[0][0]
        assert payment.amount == "10050000"
        assert payment.destination == OTHER
        assert payment.memos[0].memo_data == reference.upper()
        assert payment.memos[0].memo_type == TEXT_PLAIN_HEX
        assert result.tx_hash == "TXHASH"
        assert result.amount_xrp == Decimal("10.05")

    @pytest.mark.asyncio
    async def test_text_memo_and_tag(self, ledger, wallet, make_response):
        with patch("flarekit.ledger.xrpl.submit_and_wait", new_callable=AsyncMock) as submit:
            submit.return_value = make_response({"hash": "T", "meta": {"TransactionResult": "tesSUCCESS"}})
            await ledger.send_payment(wallet, OTHER, 1_000_000, memo_text="hi", destination_tag=5)

        payment = submit.call_args[0][0]
        assert payment.memos[0].memo_data == "6869"
        assert payment.destination_tag == 5

    @pytest.mark.asyncio
    async def test_failed_result(self, ledger, wallet, make_response):
        with patch("flarekit.ledger.xrpl.submit_and_wait", new_callable=AsyncMock) as submit:
            submit.return_value = make_response(
                {"hash": "T", "meta": {"TransactionResult": "tecUNFUNDED_PAYMENT"}}
            )
            with pytest.raises(LedgerError) as excinfo:
                await ledger.send_payment(wallet, OTHER, 1_000_000)
        assert excinfo.value.result_code == "tecUNFUNDED_PAYMENT"

    @pytest.mark.asyncio
    async def test_dropped_socket(self, ledger, wallet):
        with patch("flarekit.ledger.xrpl.submit_and_wait", new_callable=AsyncMock) as submit:
            submit.side_effect = ConnectionError("socket closed")
            with pytest.raises(NetworkError, match="XRPL payment failed"):
                await ledger.send_payment(wallet, OTHER, 1_000_000)
