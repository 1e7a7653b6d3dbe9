"""
EVM signer loading from encrypted keystores.
"""

import json
import logging
import os
from pathlib import Path
from typing import Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from ..chain.errors import CredentialError
from ..config.wallet import WalletConfig

logger = logging.getLogger(__name__)


def resolve_password(keystore_path: str, wallet_config: WalletConfig) -> str:
    """
    Find the password for a keystore.

    Password files are tried in the order given by
    WalletConfig.password_file_candidates; the literal KEYSTORE_PASSWORD is
    the last resort.

    Raises:
        CredentialError: If no password source is available
    """
    for candidate in wallet_config.password_file_candidates(keystore_path):
        if candidate.is_file():
            logger.debug(f"Using keystore password from {candidate}")
            return candidate.read_text().strip()

    if wallet_config.KEYSTORE_PASSWORD:
        return wallet_config.KEYSTORE_PASSWORD

    raise CredentialError(
        "No keystore password found. Set AGENT_KEYSTORE_PASSWORD or "
        "KEYSTORE_PASSWORD_PATH to a password file, or KEYSTORE_PASSWORD"
    )


def load_signer(keystore_path: Optional[str] = None,
                wallet_config: Optional[WalletConfig] = None) -> LocalAccount:
    """
    Decrypt the operator's keystore into a signing account.

    Args:
        keystore_path: Keystore file, AGENT_KEYSTORE when None
        wallet_config: Wallet settings, read from the environment when None

    Raises:
        CredentialError: If the file is missing or unreadable, or the password is wrong
    """
    wallet_config = wallet_config or WalletConfig()
    path = Path(keystore_path or wallet_config.AGENT_KEYSTORE).expanduser()
    if not path.is_file():
        raise CredentialError(f"Keystore not found: {path}")

    try:
        keyfile = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise CredentialError(f"Cannot read keystore {path}: {e}") from e

    if "privateKey" in keyfile:
        logger.warning(f"⚠️  {path} holds an unencrypted private key; prefer an encrypted keystore")
        try:
            return Account.from_key(keyfile["privateKey"])
        except (ValueError, TypeError) as e:
            raise CredentialError(f"Invalid private key in {path}: {e}") from e

    password = resolve_password(str(path), wallet_config)
    try:
        private_key = Account.decrypt(keyfile, password)
    except (ValueError, KeyError, TypeError) as e:
        raise CredentialError(f"Cannot decrypt keystore {path}: {e}") from e
    return Account.from_key(private_key)


def create_keystore(path: str, password: str) -> LocalAccount:
    """
    Generate a new account and write it as an encrypted keystore.

    The file is created with mode 0600 and must not already exist.

    Raises:
        CredentialError: If the file exists or cannot be written
    """
    if not password:
        raise CredentialError("A password is required to encrypt the keystore")

    target = Path(path).expanduser()
    account = Account.create()
    keyfile = Account.encrypt(account.key, password)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
    except FileExistsError as e:
        raise CredentialError(f"Refusing to overwrite existing keystore {target}") from e
    except OSError as e:
        raise CredentialError(f"Cannot write keystore {target}: {e}") from e

    with os.fdopen(fd, "w") as f:
        json.dump(keyfile, f)

    logger.info(f"🔐 Keystore written to {target}")
    return account
