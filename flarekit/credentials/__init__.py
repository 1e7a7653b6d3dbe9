"""Signer and wallet loading for Flare and the XRP Ledger."""

from .keystore import create_keystore, load_signer, resolve_password
from .xrpl_wallet import find_xrpl_wallet_file, generate_xrpl_wallet, load_xrpl_wallet

__all__ = [
    "create_keystore",
    "load_signer",
    "resolve_password",
    "find_xrpl_wallet_file",
    "generate_xrpl_wallet",
    "load_xrpl_wallet",
]
