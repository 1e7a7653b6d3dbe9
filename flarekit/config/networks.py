"""
Network configuration for flarekit.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .base import BaseConfig, ConfigError


@dataclass
class NetworkConfig(BaseConfig):
    """Chain settings for the supported EVM networks."""

    DEFAULT_NETWORK: str = BaseConfig.get_env("DEFAULT_NETWORK", "flare")

    FLARE_RPC_URL: str = BaseConfig.get_env(
        "FLARE_RPC", "https://flare-api.flare.network/ext/C/rpc"
    )
    FLARE_CHAIN_ID: int = 14

    # Seconds before an RPC request is abandoned
    RPC_TIMEOUT: int = BaseConfig.get_env_int("RPC_TIMEOUT", 30)

    @property
    def supported_networks(self) -> Dict[str, Dict]:
        """Get configuration for all supported networks."""
        return {
            "flare": {
                "name": "Flare",
                "chain_id": self.FLARE_CHAIN_ID,
                "rpc_url": self.FLARE_RPC_URL,
                "explorer_url": "https://flarescan.com",
                "native_symbol": "FLR",
                "wrapped_native": "0x1D80c49BbBCd1C0911346656B529DF9E5c2F783d",
            },
        }

    @property
    def aliases(self) -> Dict[str, str]:
        return {"flr": "flare"}

    def _canonical_name(self, name_or_alias: Optional[str]) -> str:
        key = (name_or_alias or self.DEFAULT_NETWORK).lower()
        return self.aliases.get(key, key)

    def get_network(self, name_or_alias: Optional[str] = None) -> Dict:
        """Get configuration for a network by name or alias."""
        key = self._canonical_name(name_or_alias)
        if key not in self.supported_networks:
            known = ", ".join(sorted(self.supported_networks))
            raise ConfigError(f"Unsupported network: {name_or_alias}. Known: {known}")
        return {"key": key, **self.supported_networks[key]}

    def get_network_by_chain_id(self, chain_id: int) -> Optional[Dict]:
        """Find a network by its chain id."""
        for key, network in self.supported_networks.items():
            if network["chain_id"] == chain_id:
                return {"key": key, **network}
        return None

    def list_networks(self) -> List[Dict]:
        """List supported networks in display order."""
        return [self.get_network(key) for key in self.supported_networks]

    def get_rpc_url(self, name_or_alias: Optional[str] = None) -> str:
        """Get RPC URL for a network."""
        return self.get_network(name_or_alias)["rpc_url"]

    def get_chain_id(self, name_or_alias: Optional[str] = None) -> int:
        """Get chain ID for a network."""
        return self.get_network(name_or_alias)["chain_id"]

    def explorer_tx_url(self, tx_hash: str, name_or_alias: Optional[str] = None) -> str:
        """Build an explorer link for a transaction hash."""
        return f"{self.get_network(name_or_alias)['explorer_url']}/tx/{tx_hash}"
