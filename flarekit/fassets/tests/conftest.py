"""Test configuration for FAssets minting and redemption."""
import pytest
from unittest.mock import Mock

from flarekit.chain.client import TxResult
from flarekit.config import get_config
from flarekit.contracts.types import AgentInfo, CollateralReservation
from flarekit.fassets.service import FAssetsService
from flarekit.fassets.watcher import MintWatcher
from flarekit.ledger.xrpl import PaymentResult

XRP = 1_000_000
LOT_SIZE = 10 * XRP
MINTER_XRPL = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
AGENT_XRPL = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"


class FakeClient:
    """Chain client double: inline gather and run, fixed native balance."""

    def __init__(self, native=10**21):
        self.native = native

    async def gather(self, *calls):
        return [c() for c in calls]

    async def run(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)

    def native_balance(self, address):
        return self.native


class FakeLedger:
    """XRPL double holding balances in drops and recording payments."""

    def __init__(self, balances):
        self.balances = dict(balances)
        self.sent = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return None

    async def account_info(self, address):
        if address not in self.balances:
            return None
        return {"Balance": str(self.balances[address])}

    async def is_activated(self, address):
        return address in self.balances

    async def recent_transactions(self, address, limit=10):
        return []

    async def send_payment(self, wallet, destination, amount_drops, memo_text=None,
                     memo_data_hex=None, destination_tag=None):
        self.sent.append((destination, amount_drops, memo_data_hex))
        return PaymentResult("XRPLTX", "tesSUCCESS", destination, amount_drops)


def make_agent(vault="0x" + "ab" * 20, free_lots=100, fee_bips=25):
    return AgentInfo(
        agent_vault=vault,
        owner_management_address="0x" + "cd" * 20,
        fee_bips=fee_bips,
        minting_vault_collateral_ratio_bips=16000,
        minting_pool_collateral_ratio_bips=20000,
        free_collateral_lots=free_lots,
        status=0,
    )


async def no_sleep(seconds):
    return None


@pytest.fixture
def profile():
    return get_config().network_profile("flare")


@pytest.fixture
def reservation():
    return CollateralReservation(
        agent_vault="0x" + "ab" * 20,
        minter="0x" + "11" * 20,
        reservation_id=1234,
        value_uba=LOT_SIZE,
        fee_uba=50_000,
        first_underlying_block=1,
        last_underlying_block=2,
        last_underlying_timestamp=1_750_000_000,
        payment_address=AGENT_XRPL,
        payment_reference=bytes.fromhex("4642505266410001" + "00" * 22 + "04d2"),
        executor="0x" + "00" * 20,
        executor_fee_nat_wei=0,
    )


@pytest.fixture
def asset_manager(reservation):
    manager = Mock()
    manager.address = "0x2a3Fe068cD92178554cabcf7c95ADf49B4B0B6A8"
    manager.lot_size.return_value = LOT_SIZE
    manager.collateral_reservation_fee.return_value = 10**18
    manager.available_agents.return_value = [make_agent(free_lots=0), make_agent(vault="0x" + "ef" * 20)]
    manager.reserve_collateral.return_value = TxResult("0xreserve", 1, 1, 1)
    manager.collateral_reserved.return_value = reservation
    manager.redeem.return_value = TxResult("0xredeem", 2, 2, 1)
    return manager


@pytest.fixture
def fasset():
    token = Mock()
    token.address = "0xAd552A648C74D49E10027AB8a618A3ad4901c5bE"
    token.decimals.return_value = 6
    token.balance_of.return_value = 0
    token.ensure_allowance.return_value = True
    return token


@pytest.fixture
def xrpl_ledger():
    return FakeLedger({MINTER_XRPL: 50 * XRP, AGENT_XRPL: 100 * XRP})


@pytest.fixture
def client():
    return FakeClient()


@pytest.fixture
def service(client, profile, asset_manager, fasset, xrpl_ledger):
    return FAssetsService(
        client,
        profile,
        asset_manager=asset_manager,
        fasset=fasset,
        ledger_factory=lambda url: xrpl_ledger,
        watcher=MintWatcher(interval=30, attempts=3, sleep=no_sleep),
    )


@pytest.fixture
def signer():
    signer = Mock()
    signer.address = "0x" + "11" * 20
    return signer


@pytest.fixture
def xrpl_wallet():
    wallet = Mock()
    wallet.address = MINTER_XRPL
    return wallet
