"""Test configuration for DEX services."""
import pytest
from unittest.mock import Mock

from flarekit.chain.client import TxResult
from flarekit.config import get_config
from flarekit.dex.enosys import EnosysV3Service
from flarekit.dex.sparkdex import SparkDexV4Service

POOL = "0x" + "44" * 20
ROUTER = "0x" + "55" * 20
POSITION_MANAGER = "0x" + "66" * 20


class FakeClient:
    """Chain client double that runs gathered reads inline."""

    async def gather(self, *calls):
        return [c() for c in calls]

    async def run(self, fn, *args, **kwargs):
        return fn(*args, **kwargs)


def make_tx(tx_hash="0x" + "aa" * 32):
    return TxResult(tx_hash=tx_hash, block_number=100, gas_used=150_000, status=1)


@pytest.fixture
def profile():
    return get_config().network_profile("flare")


@pytest.fixture
def wflr(profile):
    return profile.tokens.resolve_token("WFLR")


@pytest.fixture
def fxrp(profile):
    return profile.tokens.resolve_token("FXRP")


@pytest.fixture
def signer():
    signer = Mock()
    signer.address = "0x" + "11" * 20
    return signer


@pytest.fixture
def erc20():
    """Token binding with a large balance and an allowance already set."""
    token = Mock()
    token.balance_of.return_value = 10**30
    token.ensure_allowance.return_value = False
    return token


@pytest.fixture
def pool_contract():
    return Mock()


@pytest.fixture
def enosys(profile, erc20, pool_contract):
    position_manager = Mock(address=POSITION_MANAGER)
    router = Mock(address=ROUTER)
    router.exact_input_single.return_value = make_tx()
    router.exact_input.return_value = make_tx()
    service = EnosysV3Service(
        FakeClient(),
        profile,
        position_manager=position_manager,
        factory=Mock(),
        quoter=Mock(),
        router=router,
    )
    service.token = Mock(return_value=erc20)
    service.pool = Mock(return_value=pool_contract)
    return service


@pytest.fixture
def sparkdex(profile, erc20, pool_contract):
    router = Mock(address=ROUTER)
    router.exact_input_single.return_value = make_tx()
    router.exact_input.return_value = make_tx()
    service = SparkDexV4Service(
        FakeClient(), profile, factory=Mock(), quoter=Mock(), router=router
    )
    service.token = Mock(return_value=erc20)
    service.pool = Mock(return_value=pool_contract)
    return service
