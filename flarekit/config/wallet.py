"""
Wallet and credential location settings.

Values are read when the config object is created rather than at import,
so a reloaded configuration picks up environment changes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .base import BaseConfig


def _env(key: str, default: Optional[str] = None):
    return field(default_factory=lambda: BaseConfig.get_env(key, default))


@dataclass
class WalletConfig(BaseConfig):
    """Where to find the operator's wallets and keystore passwords."""

    AGENT_WALLET: Optional[str] = _env("AGENT_WALLET")
    AGENT_KEYSTORE: str = _env("AGENT_KEYSTORE", "./keystore.json")

    # Path to a file holding the keystore password
    AGENT_KEYSTORE_PASSWORD: Optional[str] = _env("AGENT_KEYSTORE_PASSWORD")
    KEYSTORE_PASSWORD_PATH: Optional[str] = _env("KEYSTORE_PASSWORD_PATH")
    # Literal password, lowest priority
    KEYSTORE_PASSWORD: Optional[str] = _env("KEYSTORE_PASSWORD")

    XRPL_WSS: str = _env("XRPL_WSS", "wss://xrplcluster.com")
    XRPL_WALLET: Optional[str] = _env("XRPL_WALLET")

    def password_file_candidates(self, keystore_path: str) -> List[Path]:
        """Password files to try, in priority order."""
        keystore = Path(keystore_path).expanduser()
        candidates = [
            self.AGENT_KEYSTORE_PASSWORD,
            self.KEYSTORE_PASSWORD_PATH,
            str(keystore.parent / ".password"),
            str(keystore.with_name(keystore.stem + "-password")),
        ]
        return [Path(c).expanduser() for c in candidates if c]

    def xrpl_wallet_candidates(self) -> List[Path]:
        """XRPL wallet JSON files to try, in priority order."""
        home = Path.home()
        candidates = [
            self.XRPL_WALLET,
            str(home / ".secrets" / "xrpl-wallet.json"),
            str(home / ".openclaw" / "workspace" / ".secrets" / "xrpl-wallet.json"),
        ]
        return [Path(c).expanduser() for c in candidates if c]
