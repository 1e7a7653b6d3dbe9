"""
Configuration management for flarekit.

Use get_config() to access all configuration settings, and
network_profile() to get the immutable bundle a command runs against.

Example:
    from flarekit.config import get_config

    config = get_config()
    profile = config.network_profile("flare")

    fxrp = profile.tokens.resolve_token("FXRP")
    quoter = profile.contract("enosys_v3", "quoter")
"""

from .base import BaseConfig, ConfigError
from .manager import ConfigManager, NetworkProfile, get_config, reload_config
from .networks import NetworkConfig
from .protocols import ProtocolConfig
from .tokens import TokenConfig, TokenInfo
from .wallet import WalletConfig

__all__ = [
    "BaseConfig",
    "ConfigError",
    "NetworkConfig",
    "ProtocolConfig",
    "TokenConfig",
    "TokenInfo",
    "WalletConfig",
    "ConfigManager",
    "NetworkProfile",
    "get_config",
    "reload_config",
]
