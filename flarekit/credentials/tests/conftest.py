"""Test configuration for wallet and keystore loading."""
import pytest

from flarekit.config.wallet import WalletConfig


@pytest.fixture
def wallet_config():
    """Wallet settings with every password source unset."""
    def _make(**overrides):
        values = {
            "AGENT_WALLET": None,
            "AGENT_KEYSTORE": "./keystore.json",
            "AGENT_KEYSTORE_PASSWORD": None,
            "KEYSTORE_PASSWORD_PATH": None,
            "KEYSTORE_PASSWORD": None,
            "XRPL_WSS": "wss://xrplcluster.com",
            "XRPL_WALLET": None,
        }
        values.update(overrides)
        return WalletConfig(**values)
    return _make


@pytest.fixture
def isolated_home(monkeypatch, tmp_path):
    """Point the home directory at an empty temp dir."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home
