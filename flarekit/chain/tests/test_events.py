"""Tests for typed event decoding."""
import pytest
from decimal import Decimal

from flarekit.chain.errors import ContractError
from flarekit.chain.events import decode_event, event_signature, find_event, find_events
from flarekit.contracts.asset_manager import AssetManager
from flarekit.chain.client import TxResult
from flarekit.fassets.planning import required_payment_drops, required_payment_xrp

ASSET_MANAGER = "0x2a3Fe068cD92178554cabcf7c95ADf49B4B0B6A8"


def test_signature(collateral_reserved_abi):
    assert event_signature(collateral_reserved_abi) == (
        "CollateralReserved(address,address,uint256,uint256,uint256,uint256,"
        "uint256,uint256,string,bytes32,address,uint256)"
    )


def test_decode_collateral_reserved(collateral_reserved_abi, collateral_reserved_log, reservation_fields):
    args = decode_event(collateral_reserved_abi, collateral_reserved_log)

    assert args["agentVault"].lower() == reservation_fields["agent_vault"]
    assert args["minter"].lower() == reservation_fields["minter"]
    assert args["collateralReservationId"] == 1234
    assert args["valueUBA"] == 10_000_000
    assert args["feeUBA"] == 50_000
    assert args["paymentAddress"] == "rAgentPaymentAddressXXXXXXXXXXXXX"
    assert bytes(args["paymentReference"]) == reservation_fields["payment_reference"]


def test_wrong_event(collateral_reserved_abi, collateral_reserved_log):
    log = dict(collateral_reserved_log, topics=[b"\x00" * 32] + collateral_reserved_log["topics"][1:])
    with pytest.raises(ContractError, match="not a CollateralReserved event"):
        decode_event(collateral_reserved_abi, log)


def test_find_event_filters_by_emitter(collateral_reserved_abi, collateral_reserved_log):
    unrelated = {"address": ASSET_MANAGER, "topics": [b"\x11" * 32], "data": b""}
    logs = [unrelated, collateral_reserved_log]

    assert find_event(logs, collateral_reserved_abi, ASSET_MANAGER.lower()) is not None
    assert find_event(logs, collateral_reserved_abi, "0x" + "99" * 20) is None
    assert len(find_events(logs, collateral_reserved_abi)) == 1


def test_reservation_record_and_required_payment(offline_client, collateral_reserved_log, reservation_fields):
    manager = AssetManager(offline_client, ASSET_MANAGER)
    tx = TxResult(tx_hash="0x01", block_number=1, gas_used=1, status=1, logs=[collateral_reserved_log])

    reservation = manager.collateral_reserved(tx)

    assert reservation.reservation_id == 1234
    assert reservation.payment_reference == reservation_fields["payment_reference"]
    assert required_payment_drops(reservation) == 10_050_000
    assert required_payment_xrp(reservation) == Decimal("10.05")


def test_reservation_missing_event(offline_client):
    manager = AssetManager(offline_client, ASSET_MANAGER)
    tx = TxResult(tx_hash="0x02", block_number=1, gas_used=1, status=1, logs=[])
    with pytest.raises(ContractError, match="No CollateralReserved event"):
        manager.collateral_reserved(tx)
