"""
XRP payments with local pre-checks.

Every check that can be made against the ledger before signing is made
here, so a payment that would obviously fail never reaches submission.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from xrpl.wallet import Wallet

from ..chain.errors import (
    AccountNotActivatedError,
    DestinationNotActivatedError,
    InsufficientFundsError,
    ValidationError,
)
from .xrpl import (
    MIN_RESERVE_DROPS,
    MIN_RESERVE_XRP,
    PaymentResult,
    XrplLedger,
    drops_to_xrp_decimal,
    validate_xrpl_address,
)


@dataclass
class PaymentCheck:
    """Ledger state a payment was checked against."""

    balance_drops: int
    available_drops: int
    destination_activated: bool


class XrplPaymentService:
    """Checked XRP payments over an open XrplLedger."""

    def __init__(self, ledger: XrplLedger):
        self.ledger = ledger
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def check_funds(self, sender: str, amount_drops: int) -> Tuple[int, int]:
        """
        Verify the sender can spend `amount_drops` above its reserve.

        Returns:
            (balance, available) in drops

        Raises:
            AccountNotActivatedError: If the sender has no ledger account
            InsufficientFundsError: If the amount exceeds balance minus reserve
        """
        sender_info = await self.ledger.account_info(sender)
        if sender_info is None:
            raise AccountNotActivatedError(
                f"XRPL account {sender} not activated. "
                f"Need at least {MIN_RESERVE_XRP} XRP reserve plus the amount to send."
            )

        balance = int(sender_info["Balance"])
        available = balance - MIN_RESERVE_DROPS
        if amount_drops > available:
            raise InsufficientFundsError(
                f"Insufficient XRP balance. Available: {drops_to_xrp_decimal(max(available, 0))} XRP "
                f"(after {MIN_RESERVE_XRP} XRP reserve), need {drops_to_xrp_decimal(amount_drops)} XRP"
            )
        return balance, available

    async def check_payment(self, sender: str, destination: str, amount_drops: int) -> PaymentCheck:
        """
        Verify a payment can succeed before it is signed.

        Raises:
            ValidationError: If the amount is not positive or the address is malformed
            AccountNotActivatedError: If the sender has no ledger account
            InsufficientFundsError: If the amount exceeds balance minus reserve
            DestinationNotActivatedError: If the payment can't create the destination
        """
        if amount_drops <= 0:
            raise ValidationError("Amount must be greater than 0")
        validate_xrpl_address(destination)

        balance, available = await self.check_funds(sender, amount_drops)

        destination_activated = await self.ledger.is_activated(destination)
        if not destination_activated and amount_drops < MIN_RESERVE_DROPS:
            raise DestinationNotActivatedError(
                f"Destination account not activated. Send at least {MIN_RESERVE_XRP} XRP."
            )

        return PaymentCheck(
            balance_drops=balance,
            available_drops=available,
            destination_activated=destination_activated,
        )

    async def send(
        self,
        wallet: Wallet,
        destination: str,
        amount_drops: int,
        memo_text: Optional[str] = None,
        memo_data_hex: Optional[str] = None,
        destination_tag: Optional[int] = None,
    ) -> PaymentResult:
        """Check, then submit and wait for validation."""
        check = await self.check_payment(wallet.address, destination, amount_drops)
        if not check.destination_activated:
            self.logger.info(f"Destination {destination} will be activated by this payment")

        return await self.ledger.send_payment(
            wallet,
            destination,
            amount_drops,
            memo_text=memo_text,
            memo_data_hex=memo_data_hex,
            destination_tag=destination_tag,
        )
