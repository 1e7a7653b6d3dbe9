"""
Configuration manager for flarekit.

This module provides a centralized way to access all configuration settings
across the application. It combines all configuration classes into a single
easy-to-use interface and assembles the immutable per-network profile that
commands receive.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import BaseConfig, ConfigError
from .networks import NetworkConfig
from .protocols import ProtocolConfig
from .tokens import TokenConfig
from .wallet import WalletConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkProfile:
    """
    Everything a command needs to talk to one network.

    Built once at process start and passed down explicitly.
    """

    key: str
    name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    native_symbol: str
    wrapped_native: str
    rpc_timeout: int
    tokens: TokenConfig
    protocols: ProtocolConfig
    wallet: WalletConfig

    def contract(self, protocol: str, name: str) -> str:
        return self.protocols.get_contract_address(protocol, name)

    def explorer_tx_url(self, tx_hash: str) -> str:
        return f"{self.explorer_url}/tx/{tx_hash}"


class ConfigManager:
    """
    Centralized configuration manager that combines all configuration classes.

    This class provides easy access to all configuration settings and ensures
    that configurations are properly initialized and validated.
    """

    def __init__(self, environment: str = None):
        """
        Initialize the configuration manager.

        Args:
            environment: Override the environment (local, dev, staging, production)
        """
        self._environment = environment
        self._base_config = None
        self._network_config = None
        self._token_config = None
        self._protocol_config = None
        self._wallet_config = None
        self._initialize_configs()

    def _initialize_configs(self):
        """Initialize all configuration objects."""
        try:
            self._base_config = BaseConfig()
            if self._environment:
                self._base_config.ENVIRONMENT = self._environment
                self._base_config._validate_config()

            self._network_config = NetworkConfig()
            self._token_config = TokenConfig()
            self._protocol_config = ProtocolConfig()
            self._wallet_config = WalletConfig()

            logger.debug(f"Configuration initialized for environment: {self.environment}")

        except ConfigError:
            raise
        except Exception as e:
            logger.error(f"Failed to initialize configuration: {e}")
            raise ConfigError(f"Configuration initialization failed: {e}")

    @property
    def environment(self) -> str:
        """Get current environment."""
        return self._base_config.ENVIRONMENT

    @property
    def base(self) -> BaseConfig:
        return self._base_config

    @property
    def networks(self) -> NetworkConfig:
        return self._network_config

    @property
    def tokens(self) -> TokenConfig:
        return self._token_config

    @property
    def protocols(self) -> ProtocolConfig:
        return self._protocol_config

    @property
    def wallet(self) -> WalletConfig:
        return self._wallet_config

    def network_profile(self, name_or_alias: Optional[str] = None) -> NetworkProfile:
        """
        Assemble the profile for a network.

        Args:
            name_or_alias: Network name or alias, default network when None

        Raises:
            ConfigError: If the network is unknown
        """
        network = self.networks.get_network(name_or_alias)
        return NetworkProfile(
            key=network["key"],
            name=network["name"],
            chain_id=network["chain_id"],
            rpc_url=network["rpc_url"],
            explorer_url=network["explorer_url"],
            native_symbol=network["native_symbol"],
            wrapped_native=network["wrapped_native"],
            rpc_timeout=self.networks.RPC_TIMEOUT,
            tokens=self.tokens,
            protocols=self.protocols,
            wallet=self.wallet,
        )

    def validate_configuration(self) -> bool:
        """
        Validate all configuration settings.

        Returns:
            True if all configurations are valid

        Raises:
            ConfigError: If any configuration is invalid
        """
        if not self.networks.supported_networks:
            raise ConfigError("No networks configured")

        for network in self.networks.list_networks():
            if not network["rpc_url"].startswith(("http://", "https://")):
                raise ConfigError(f"Invalid RPC URL for {network['key']}: {network['rpc_url']}")

        for protocol in self.protocols.supported_protocols:
            for name, address in self.protocols.get_protocol_config(protocol).items():
                if not address:
                    raise ConfigError(f"Missing {protocol} contract address: {name}")

        if not self.wallet.XRPL_WSS.startswith(("ws://", "wss://")):
            raise ConfigError(f"XRPL_WSS must be a websocket URL, got: {self.wallet.XRPL_WSS}")

        logger.debug("Configuration validation successful")
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert all configurations to dictionary format."""
        return {
            "environment": self.environment,
            "base": self.base.to_dict(),
            "networks": self.networks.to_dict(),
            "protocols": self.protocols.to_dict(),
            "wallet": self.wallet.to_dict(),
        }

    def __repr__(self) -> str:
        return f"ConfigManager(environment={self.environment})"


# Global configuration manager instance
_config_manager = None


def get_config(environment: str = None, force_reload: bool = False) -> ConfigManager:
    """
    Get the global configuration manager instance.

    Args:
        environment: Override environment
        force_reload: Force reload of configuration

    Returns:
        ConfigManager instance
    """
    global _config_manager

    if _config_manager is None or force_reload:
        _config_manager = ConfigManager(environment=environment)
        _config_manager.validate_configuration()

    return _config_manager


def reload_config(environment: str = None) -> ConfigManager:
    """Reload the global configuration manager."""
    return get_config(environment=environment, force_reload=True)
