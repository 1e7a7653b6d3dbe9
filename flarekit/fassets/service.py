"""
FAssets mint and redeem of FXRP.

Minting spans two ledgers: a collateral reservation on Flare, an XRP
payment on the XRPL carrying the reservation's payment reference, then
an asynchronous mint executed by the agent once it proves the payment.
This service drives the first two steps and watches for the third.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Callable, List, Optional

from eth_account.signers.local import LocalAccount
from xrpl.wallet import Wallet

from ..chain.client import ChainClient, TxResult
from ..chain.errors import InsufficientFundsError, ValidationError
from ..amm.quoting import format_units
from ..contracts.asset_manager import AssetManager
from ..contracts.erc20 import Erc20Token
from ..contracts.types import AgentInfo, CollateralReservation
from ..ledger.payments import XrplPaymentService
from ..ledger.xrpl import (
    LedgerTx,
    PaymentResult,
    XrplLedger,
    drops_to_xrp_decimal,
    validate_xrpl_address,
)
from .planning import has_capacity, required_payment_drops, select_agent
from .watcher import MintOutcome, MintWatcher

PROTOCOL = "fassets"
MINT_DAPP_URL = "https://fassets.au.cc/mint"


@dataclass
class FAssetsInfo:
    fasset: str
    asset_manager: str
    lot_size: int
    decimals: int
    reservation_fee: int
    balance: Optional[int] = None

    @property
    def redeemable_lots(self) -> Optional[int]:
        if self.balance is None:
            return None
        return self.balance // self.lot_size


@dataclass
class MintReceipt:
    """Everything that happened during a mint, pending or not."""

    lots: int
    agent_vault: str
    reservation_fee: int
    reserve_tx: TxResult
    reservation: CollateralReservation
    payment: PaymentResult
    outcome: MintOutcome

    @property
    def required_drops(self) -> int:
        return required_payment_drops(self.reservation)


@dataclass
class RedeemReceipt:
    lots: int
    amount: int
    xrpl_address: str
    tx: TxResult
    approved: bool
    remaining: int


@dataclass
class AccountStatus:
    address: str
    activated: bool
    balance_xrp: Decimal
    transactions: List[LedgerTx] = field(default_factory=list)
    fasset_balance: Optional[int] = None


class FAssetsService:
    """Mint, redeem and inspect FXRP through the asset manager."""

    def __init__(
        self,
        client: ChainClient,
        profile,
        asset_manager: Optional[AssetManager] = None,
        fasset: Optional[Erc20Token] = None,
        ledger_factory: Optional[Callable[[str], XrplLedger]] = None,
        watcher: Optional[MintWatcher] = None,
    ):
        self.client = client
        self.profile = profile
        self.asset_manager = asset_manager or AssetManager(
            client, profile.contract(PROTOCOL, "asset_manager")
        )
        self.fasset = fasset or Erc20Token(client, profile.contract(PROTOCOL, "fasset"))
        self.ledger_factory = ledger_factory or XrplLedger
        self.xrpl_url = profile.wallet.XRPL_WSS
        self.max_fee_bips = profile.protocols.MAX_MINTING_FEE_BIPS
        self.agent_page_size = profile.protocols.AGENT_PAGE_SIZE
        self.watcher = watcher or MintWatcher(
            interval=profile.protocols.MINT_POLL_INTERVAL,
            attempts=profile.protocols.MINT_POLL_ATTEMPTS,
        )
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def info(self, address: Optional[str] = None) -> FAssetsInfo:
        """Lot size, decimals and the one-lot reservation fee; balance when address given."""
        lot_size, decimals, fee = await self.client.gather(
            self.asset_manager.lot_size,
            self.fasset.decimals,
            lambda: self.asset_manager.collateral_reservation_fee(1),
        )
        balance = await self.client.run(self.fasset.balance_of, address) if address else None
        return FAssetsInfo(
            fasset=self.fasset.address,
            asset_manager=self.asset_manager.address,
            lot_size=lot_size,
            decimals=decimals,
            reservation_fee=fee,
            balance=balance,
        )

    async def agents(self) -> List[AgentInfo]:
        """Agents with a real vault and at least one free lot."""
        listed = await self.client.run(self.asset_manager.available_agents, 0, self.agent_page_size)
        return [a for a in listed if has_capacity(a)]

    async def mint(
        self,
        signer: LocalAccount,
        xrpl_wallet: Wallet,
        lots: int,
        agent_vault: Optional[str] = None,
        max_fee_bips: Optional[int] = None,
    ) -> MintReceipt:
        """
        Reserve collateral, pay the agent on the XRPL, then wait for FXRP.

        A mint that hasn't landed when the wait runs out is returned with
        outcome.minted False; the reservation may still complete later.

        Raises:
            ValidationError: If no agent can take the lots
            AccountNotActivatedError: If the XRPL wallet doesn't exist on ledger
            InsufficientFundsError: If XRP or FLR can't cover the mint
            LedgerError: If the XRP payment fails
            ContractError: If the reservation reverts or emits no event
        """
        if lots < 1:
            raise ValidationError("--lots must be >= 1")
        max_fee_bips = self.max_fee_bips if max_fee_bips is None else max_fee_bips

        if agent_vault is None:
            agent = select_agent(await self.agents(), lots, max_fee_bips)
            agent_vault = agent.agent_vault
        self.logger.info(f"Agent: {agent_vault}")

        lot_size = await self.client.run(self.asset_manager.lot_size)
        async with self.ledger_factory(self.xrpl_url) as ledger:
            payments = XrplPaymentService(ledger)
            # Catch an unfunded XRPL wallet before paying the reservation fee
            await payments.check_funds(xrpl_wallet.address, lot_size * lots)

            reservation_fee, native = await self.client.gather(
                lambda: self.asset_manager.collateral_reservation_fee(lots),
                lambda: self.client.native_balance(signer.address),
            )
            if native < reservation_fee:
                raise InsufficientFundsError(
                    f"Insufficient FLR for the reservation fee. Need {format_units(reservation_fee, 18)}, "
                    f"have {format_units(native, 18)}"
                )

            self.logger.info("📝 Reserving collateral...")
            reserve_tx = await self.client.run(
                self.asset_manager.reserve_collateral,
                signer, agent_vault, lots, max_fee_bips, reservation_fee,
            )
            reservation = self.asset_manager.collateral_reserved(reserve_tx)
            required = required_payment_drops(reservation)
            self.logger.info(
                f"Reservation #{reservation.reservation_id}: send {drops_to_xrp_decimal(required)} XRP "
                f"to {reservation.payment_address}"
            )

            start_balance = await self.client.run(self.fasset.balance_of, signer.address)

            payment = await payments.send(
                xrpl_wallet,
                reservation.payment_address,
                required,
                memo_data_hex=reservation.payment_reference.hex(),
            )

        self.logger.info("⏳ Waiting for payment proof and minting...")
        outcome = await self.watcher.wait_for_mint(
            lambda: self.client.run(self.fasset.balance_of, signer.address),
            start_balance,
        )
        return MintReceipt(
            lots=lots,
            agent_vault=agent_vault,
            reservation_fee=reservation_fee,
            reserve_tx=reserve_tx,
            reservation=reservation,
            payment=payment,
            outcome=outcome,
        )

    async def redeem(self, signer: LocalAccount, lots: int, xrpl_address: str) -> RedeemReceipt:
        """
        Burn `lots` of FXRP and have an agent pay XRP to `xrpl_address`.

        Raises:
            ValidationError: On a bad lot count or XRPL address, before any network call
            InsufficientFundsError: If the FXRP balance can't cover the lots
            ContractError: If the redemption reverts
        """
        if lots < 1:
            raise ValidationError("--lots must be >= 1")
        validate_xrpl_address(xrpl_address)

        lot_size, decimals, balance = await self.client.gather(
            self.asset_manager.lot_size,
            self.fasset.decimals,
            lambda: self.fasset.balance_of(signer.address),
        )
        required = lot_size * lots
        if balance < required:
            raise InsufficientFundsError(
                f"Insufficient FXRP. Need {format_units(required, decimals)}, "
                f"have {format_units(balance, decimals)}"
            )

        approved = await self.client.run(
            self.fasset.ensure_allowance, signer, self.asset_manager.address, required
        )

        self.logger.info(f"🔥 Redeeming {lots} lot(s)...")
        tx = await self.client.run(self.asset_manager.redeem, signer, lots, xrpl_address)
        remaining = await self.client.run(self.fasset.balance_of, signer.address)
        return RedeemReceipt(
            lots=lots,
            amount=required,
            xrpl_address=xrpl_address,
            tx=tx,
            approved=approved,
            remaining=remaining,
        )

    async def status(self, xrpl_address: str, evm_address: Optional[str] = None,
                     limit: int = 5) -> AccountStatus:
        """XRPL balance and recent history, plus the Flare FXRP balance when asked."""
        validate_xrpl_address(xrpl_address)

        async with self.ledger_factory(self.xrpl_url) as ledger:
            info = await ledger.account_info(xrpl_address)
            balance = int(info["Balance"]) if info else 0
            transactions = await ledger.recent_transactions(xrpl_address, limit) if info else []

        fasset_balance = (
            await self.client.run(self.fasset.balance_of, evm_address) if evm_address else None
        )
        return AccountStatus(
            address=xrpl_address,
            activated=info is not None,
            balance_xrp=drops_to_xrp_decimal(balance),
            transactions=transactions,
            fasset_balance=fasset_balance,
        )
