"""Tests for the FAssets mint, redeem and status flows."""
import pytest
from decimal import Decimal
from unittest.mock import Mock

from flarekit.chain.errors import (
    AccountNotActivatedError,
    InsufficientFundsError,
    ValidationError,
)
from flarekit.fassets.service import FAssetsService

LOT_SIZE = 10_000_000
MINTER_XRPL = "rPT1Sjq2YGrBMTttX4GZHjKu9dyfzbpAYe"
AGENT_XRPL = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"


class TestInfo:

    @pytest.mark.asyncio
    async def test_info_with_balance(self, service, fasset):
        fasset.balance_of.return_value = 25_000_000

        info = await service.info("0x" + "11" * 20)

        assert info.lot_size == LOT_SIZE
        assert info.decimals == 6
        assert info.reservation_fee == 10**18
        assert info.redeemable_lots == 2

    @pytest.mark.asyncio
    async def test_agents_filters_full_vaults(self, service):
        agents = await service.agents()
        assert [a.agent_vault for a in agents] == ["0x" + "ef" * 20]


class TestMint:

    @pytest.mark.asyncio
    async def test_mint_pays_reference_and_sees_balance(
        self, service, asset_manager, fasset, xrpl_ledger, signer, xrpl_wallet, reservation
    ):
        fasset.balance_of.side_effect = [0, 0, LOT_SIZE]

        receipt = await service.mint(signer, xrpl_wallet, 1)

        assert receipt.agent_vault == "0x" + "ef" * 20
        asset_manager.reserve_collateral.assert_called_once_with(
            signer, "0x" + "ef" * 20, 1, 2500, 10**18
        )
        assert xrpl_ledger.sent == [(AGENT_XRPL, 10_050_000, reservation.payment_reference.hex())]
        assert receipt.required_drops == 10_050_000
        assert receipt.outcome.minted
        assert receipt.outcome.delta == LOT_SIZE

    @pytest.mark.asyncio
    async def test_mint_pending_after_wait(self, service, signer, xrpl_wallet):
        receipt = await service.mint(signer, xrpl_wallet, 1)

        assert receipt.outcome.pending
        assert receipt.payment.tx_hash == "XRPLTX"

    @pytest.mark.asyncio
    async def test_explicit_agent_skips_listing(self, service, asset_manager, signer, xrpl_wallet):
        receipt = await service.mint(signer, xrpl_wallet, 1, agent_vault="0x" + "77" * 20)

        assert receipt.agent_vault == "0x" + "77" * 20
        asset_manager.available_agents.assert_not_called()

    @pytest.mark.asyncio
    async def test_unfunded_xrpl_wallet_reserves_nothing(
        self, service, asset_manager, xrpl_ledger, signer, xrpl_wallet
    ):
        del xrpl_ledger.balances[MINTER_XRPL]

        with pytest.raises(AccountNotActivatedError):
            await service.mint(signer, xrpl_wallet, 1)
        asset_manager.reserve_collateral.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_on_xrp(self, service, asset_manager, xrpl_ledger, signer, xrpl_wallet):
        xrpl_ledger.balances[MINTER_XRPL] = 5_000_000

        with pytest.raises(InsufficientFundsError, match="Insufficient XRP"):
            await service.mint(signer, xrpl_wallet, 1)
        asset_manager.reserve_collateral.assert_not_called()

    @pytest.mark.asyncio
    async def test_short_on_flr(self, service, client, asset_manager, signer, xrpl_wallet):
        client.native = 0

        with pytest.raises(InsufficientFundsError, match="reservation fee"):
            await service.mint(signer, xrpl_wallet, 1)
        asset_manager.reserve_collateral.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_agent_within_fee_cap(self, service, signer, xrpl_wallet):
        with pytest.raises(ValidationError, match="No agent"):
            await service.mint(signer, xrpl_wallet, 1, max_fee_bips=10)

    @pytest.mark.asyncio
    async def test_zero_lots(self, service, signer, xrpl_wallet):
        with pytest.raises(ValidationError):
            await service.mint(signer, xrpl_wallet, 0)


class TestRedeem:

    @pytest.mark.asyncio
    async def test_invalid_address_makes_no_calls(self, profile, signer):
        client = Mock()
        asset_manager = Mock()
        fasset = Mock()
        service = FAssetsService(client, profile, asset_manager=asset_manager, fasset=fasset)

        with pytest.raises(ValidationError, match="Invalid XRPL address format"):
            await service.redeem(signer, 1, "not-an-address")

        client.gather.assert_not_called()
        asset_manager.lot_size.assert_not_called()
        asset_manager.redeem.assert_not_called()
        fasset.balance_of.assert_not_called()

    @pytest.mark.asyncio
    async def test_redeem(self, service, asset_manager, fasset, signer):
        fasset.balance_of.side_effect = [30_000_000, 10_000_000]

        receipt = await service.redeem(signer, 2, MINTER_XRPL)

        fasset.ensure_allowance.assert_called_once_with(signer, asset_manager.address, 20_000_000)
        asset_manager.redeem.assert_called_once_with(signer, 2, MINTER_XRPL)
        assert receipt.amount == 20_000_000
        assert receipt.remaining == 10_000_000
        assert receipt.approved

    @pytest.mark.asyncio
    async def test_insufficient_fxrp(self, service, asset_manager, fasset, signer):
        fasset.balance_of.return_value = 5_000_000

        with pytest.raises(InsufficientFundsError, match="Insufficient FXRP"):
            await service.redeem(signer, 1, MINTER_XRPL)
        asset_manager.redeem.assert_not_called()


class TestStatus:

    @pytest.mark.asyncio
    async def test_activated(self, service, fasset):
        fasset.balance_of.return_value = 7_000_000

        status = await service.status(MINTER_XRPL, "0x" + "11" * 20)

        assert status.activated
        assert status.balance_xrp == Decimal(50)
        assert status.fasset_balance == 7_000_000

    @pytest.mark.asyncio
    async def test_not_activated(self, service):
        status = await service.status("rGWrZyQqhTp9Xu7G5Pkayo7bXjH4k4QYpf")

        assert not status.activated
        assert status.balance_xrp == 0
        assert status.fasset_balance is None
