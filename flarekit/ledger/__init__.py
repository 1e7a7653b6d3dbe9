"""XRP Ledger access: balances, history and checked payments."""

from .payments import PaymentCheck, XrplPaymentService
from .xrpl import (
    DROPS_PER_XRP,
    MIN_RESERVE_DROPS,
    MIN_RESERVE_XRP,
    XRPL_ADDRESS_RE,
    LedgerTx,
    PaymentResult,
    XrplLedger,
    close_time,
    drops_to_xrp_decimal,
    validate_xrpl_address,
    xrp_to_drops_int,
)

__all__ = [
    "DROPS_PER_XRP",
    "MIN_RESERVE_DROPS",
    "MIN_RESERVE_XRP",
    "XRPL_ADDRESS_RE",
    "LedgerTx",
    "PaymentResult",
    "PaymentCheck",
    "XrplLedger",
    "XrplPaymentService",
    "close_time",
    "drops_to_xrp_decimal",
    "validate_xrpl_address",
    "xrp_to_drops_int",
]
