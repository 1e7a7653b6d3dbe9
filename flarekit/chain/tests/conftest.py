"""Test configuration for chain access."""
import pytest
from unittest.mock import MagicMock, Mock

from eth_abi import encode
from eth_utils import to_checksum_address
from web3 import Web3

from flarekit.chain.client import ChainClient, load_abi
from flarekit.chain.events import event_topic, get_event_abi

ASSET_MANAGER = "0x2a3Fe068cD92178554cabcf7c95ADf49B4B0B6A8"
AGENT_VAULT = "0x" + "ab" * 20
MINTER = "0x" + "cd" * 20
PAYMENT_REFERENCE = bytes.fromhex("46425052664100010000000000000000000000000000000000000000000004d2")


@pytest.fixture
def mock_web3():
    """Web3 double with an eth namespace."""
    web3 = MagicMock()
    web3.eth.get_transaction_count.return_value = 7
    web3.eth.gas_price = 25 * 10**9
    return web3


@pytest.fixture
def client(mock_web3):
    return ChainClient("https://rpc.test", 14, web3=mock_web3)


@pytest.fixture
def offline_client():
    """Client over a real Web3 instance that never connects."""
    return ChainClient("http://127.0.0.1:1", 14, web3=Web3(Web3.HTTPProvider("http://127.0.0.1:1")))


@pytest.fixture
def mock_signer():
    signer = Mock()
    signer.address = to_checksum_address("0x" + "11" * 20)
    signer.sign_transaction.return_value = Mock(raw_transaction=b"\x02signed")
    return signer


@pytest.fixture
def collateral_reserved_abi():
    return get_event_abi(load_abi("asset_manager"), "CollateralReserved")


@pytest.fixture
def collateral_reserved_log(collateral_reserved_abi):
    """Raw CollateralReserved log for a 10 XRP mint with a 0.05 XRP fee."""
    def _topic_address(address):
        return b"\x00" * 12 + bytes.fromhex(address[2:])

    data = encode(
        ["uint256", "uint256", "uint256", "uint256", "uint256", "string", "bytes32", "address", "uint256"],
        [
            10_000_000,
            50_000,
            90_000_000,
            90_000_100,
            1_750_000_000,
            "rAgentPaymentAddressXXXXXXXXXXXXX",
            PAYMENT_REFERENCE,
            "0x" + "00" * 20,
            0,
        ],
    )
    return {
        "address": ASSET_MANAGER,
        "topics": [
            bytes.fromhex(event_topic(collateral_reserved_abi)[2:]),
            _topic_address(AGENT_VAULT),
            _topic_address(MINTER),
            (1234).to_bytes(32, "big"),
        ],
        "data": data,
    }


@pytest.fixture
def reservation_fields():
    """Values encoded into collateral_reserved_log."""
    return {
        "asset_manager": ASSET_MANAGER,
        "agent_vault": AGENT_VAULT,
        "minter": MINTER,
        "payment_reference": PAYMENT_REFERENCE,
    }
