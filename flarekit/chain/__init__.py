"""Chain access: the web3 client, event decoding and the error taxonomy."""

from .client import ChainClient, TxResult, load_abi, MAX_UINT128, MAX_UINT256, ZERO_ADDRESS
from .errors import (
    AccountNotActivatedError,
    ContractError,
    CredentialError,
    DestinationNotActivatedError,
    ErrorHandler,
    FlareKitError,
    InsufficientFundsError,
    LedgerError,
    NetworkError,
    UsageError,
    ValidationError,
)
from .events import decode_event, event_topic, find_event, find_events, get_event_abi

__all__ = [
    "ChainClient",
    "TxResult",
    "load_abi",
    "MAX_UINT128",
    "MAX_UINT256",
    "ZERO_ADDRESS",
    "AccountNotActivatedError",
    "ContractError",
    "CredentialError",
    "DestinationNotActivatedError",
    "ErrorHandler",
    "FlareKitError",
    "InsufficientFundsError",
    "LedgerError",
    "NetworkError",
    "UsageError",
    "ValidationError",
    "decode_event",
    "event_topic",
    "find_event",
    "find_events",
    "get_event_abi",
]
