"""
XRPL wallet files.

Wallet JSON holds at least `address` and a `secret` (or `seed`) from which
xrpl-py derives the signing keys.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from xrpl.wallet import Wallet

from ..chain.errors import CredentialError
from ..config.wallet import WalletConfig
from ..ledger.xrpl import MIN_RESERVE_XRP

logger = logging.getLogger(__name__)


def find_xrpl_wallet_file(path: Optional[str] = None,
                          wallet_config: Optional[WalletConfig] = None) -> Path:
    """First existing wallet file: an explicit path, then the configured defaults."""
    if path:
        candidate = Path(path).expanduser()
        if not candidate.is_file():
            raise CredentialError(f"XRPL wallet file not found: {candidate}")
        return candidate

    wallet_config = wallet_config or WalletConfig()
    candidates = wallet_config.xrpl_wallet_candidates()
    for candidate in candidates:
        if candidate.is_file():
            return candidate

    tried = ", ".join(str(c) for c in candidates)
    raise CredentialError(f"No XRPL wallet found. Tried: {tried}. Set XRPL_WALLET")


def load_xrpl_wallet(path: Optional[str] = None,
                     wallet_config: Optional[WalletConfig] = None) -> Wallet:
    """
    Load an XRPL wallet from its JSON file.

    Raises:
        CredentialError: If no file is found, it has no secret, or the secret is invalid
    """
    wallet_path = find_xrpl_wallet_file(path, wallet_config)
    try:
        data = json.loads(wallet_path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise CredentialError(f"Cannot read XRPL wallet {wallet_path}: {e}") from e

    seed = data.get("secret") or data.get("seed")
    if not seed:
        raise CredentialError(f"XRPL wallet {wallet_path} has no secret or seed")

    try:
        wallet = Wallet.from_seed(seed)
    except Exception as e:
        raise CredentialError(f"Invalid XRPL secret in {wallet_path}: {e}") from e

    expected = data.get("address")
    if expected and expected != wallet.address:
        raise CredentialError(
            f"XRPL wallet {wallet_path} address {expected} does not match its secret ({wallet.address})"
        )
    return wallet


def generate_xrpl_wallet(save_path: Optional[str] = None) -> Tuple[Dict[str, Any], Optional[Path]]:
    """
    Create a fresh XRPL wallet.

    Args:
        save_path: If given, the wallet JSON is written there with mode 0600

    Returns:
        (wallet data, resolved save path or None)
    """
    wallet = Wallet.create()
    data = {
        "address": wallet.classic_address,
        "secret": wallet.seed,
        "publicKey": wallet.public_key,
        "privateKey": wallet.private_key,
        "created": datetime.now(timezone.utc).isoformat(),
        "network": "XRPL Mainnet",
        "note": f"Needs {MIN_RESERVE_XRP} XRP reserve to activate on mainnet",
    }

    if save_path is None:
        return data, None

    target = Path(save_path).expanduser().resolve()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            f.write(json.dumps(data, indent=2) + "\n")
        os.chmod(target, 0o600)
    except OSError as e:
        raise CredentialError(f"Cannot write XRPL wallet {target}: {e}") from e

    logger.info(f"XRPL wallet saved to {target}")
    return data, target
