"""FAssets minting and redemption of FXRP against XRP."""

from .planning import (
    UNBOUNDED_LOTS,
    format_free_lots,
    has_capacity,
    lots_from_args,
    required_payment_drops,
    required_payment_xrp,
    select_agent,
)
from .service import (
    MINT_DAPP_URL,
    AccountStatus,
    FAssetsInfo,
    FAssetsService,
    MintReceipt,
    RedeemReceipt,
)
from .watcher import MintOutcome, MintWatcher

__all__ = [
    "UNBOUNDED_LOTS",
    "format_free_lots",
    "has_capacity",
    "lots_from_args",
    "required_payment_drops",
    "required_payment_xrp",
    "select_agent",
    "MINT_DAPP_URL",
    "AccountStatus",
    "FAssetsInfo",
    "FAssetsService",
    "MintReceipt",
    "RedeemReceipt",
    "MintOutcome",
    "MintWatcher",
]
