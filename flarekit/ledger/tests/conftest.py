"""Test configuration for XRPL access."""
import pytest
from unittest.mock import Mock

from flarekit.ledger.xrpl import PaymentResult

SENDER = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"


class FakeLedger:
    """In-memory ledger keyed by address; balances in drops."""

    def __init__(self, balances=None):
        self.balances = dict(balances or {})
        self.sent = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def account_info(self, address):
        if address not in self.balances:
            return None
        return {"Account": address, "Balance": str(self.balances[address])}

    async def is_activated(self, address):
        return address in self.balances

    async def balance_drops(self, address):
        return self.balances.get(address, 0)

    async def recent_transactions(self, address, limit=10):
        return []

    async def send_payment(self, wallet, destination, amount_drops, memo_text=None,
                     memo_data_hex=None, destination_tag=None):
        self.sent.append({
            "destination": destination,
            "amount_drops": amount_drops,
            "memo_text": memo_text,
            "memo_data_hex": memo_data_hex,
            "destination_tag": destination_tag,
        })
        return PaymentResult(
            tx_hash="ABC123",
            result_code="tesSUCCESS",
            destination=destination,
            amount_drops=amount_drops,
        )


def xrpl_response(result, success=True):
    response = Mock()
    response.is_successful.return_value = success
    response.result = result
    return response


@pytest.fixture
def sender_wallet():
    wallet = Mock()
    wallet.address = SENDER
    return wallet


@pytest.fixture
def make_ledger():
    return FakeLedger


@pytest.fixture
def make_response():
    return xrpl_response
