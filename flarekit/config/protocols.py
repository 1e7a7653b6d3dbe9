"""
Protocol-specific configuration for flarekit.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from .base import BaseConfig, ConfigError


@dataclass
class ProtocolConfig(BaseConfig):
    """Contract addresses and trading defaults for the supported protocols."""

    # Fee tiers in hundredths of a bip (500 = 0.05%)
    V3_FEE_TIERS: List[int] = field(default_factory=lambda: [500, 3000, 10000])
    DEFAULT_FEE: int = BaseConfig.get_env_int("DEFAULT_FEE", 3000)

    DEFAULT_SLIPPAGE_PCT: float = BaseConfig.get_env_float("DEFAULT_SLIPPAGE_PCT", 0.5)
    DEADLINE_SECONDS: int = BaseConfig.get_env_int("DEADLINE_SECONDS", 300)

    # Default tick spacing when a position's pool cannot be found
    FALLBACK_TICK_SPACING: int = 60

    # Quotes crossing more initialized ticks than this get a price impact warning
    HIGH_IMPACT_TICKS: int = 10

    # FAssets minting
    MAX_MINTING_FEE_BIPS: int = BaseConfig.get_env_int("MAX_MINTING_FEE_BIPS", 2500)
    MINT_POLL_INTERVAL: int = 30
    MINT_POLL_ATTEMPTS: int = 40
    AGENT_PAGE_SIZE: int = 20

    @property
    def enosys_v3_config(self) -> Dict[str, str]:
        """Enosys V3 (Uniswap V3 fork) contracts."""
        return {
            "position_manager": "0xd9770b1c7a6ccd33c75b5bcb1c0078f46be46657",
            "factory": "0x17AA157AC8C54034381b840Cb8f6bf7Fc355f0de",
            "swap_router": "0x5FD34090E9b195d8482Ad3CC63dB078534F1b113",
            "quoter": "0xE505Bf33e84dDA2183cd0E4a6E8B084b85BC4269",
        }

    @property
    def sparkdex_v4_config(self) -> Dict[str, str]:
        """SparkDex V4 (Algebra Integral) contracts."""
        return {
            "swap_router": "0x69D57B9D705eaD73a5d2f2476C30c55bD755cc2F",
            "quoter": "0x6AD6A4f233F1E33613e996CCc17409B93fF8bf5f",
            "factory": "0x805488DaA81c1b9e7C5cE3f1DCeA28F21448EC6A",
        }

    @property
    def fassets_config(self) -> Dict[str, str]:
        """FAssets (FXRP) contracts."""
        return {
            "asset_manager": "0x2a3Fe068cD92178554cabcf7c95ADf49B4B0B6A8",
            "fasset": "0xAd552A648C74D49E10027AB8a618A3ad4901c5bE",
        }

    @property
    def supported_protocols(self) -> List[str]:
        """Get list of supported protocols."""
        return ["enosys_v3", "sparkdex_v4", "fassets"]

    def get_protocol_config(self, protocol: str) -> Dict[str, str]:
        """Get contract addresses for a protocol."""
        if protocol == "enosys_v3":
            return self.enosys_v3_config
        elif protocol == "sparkdex_v4":
            return self.sparkdex_v4_config
        elif protocol == "fassets":
            return self.fassets_config
        else:
            known = ", ".join(self.supported_protocols)
            raise ConfigError(f"Unsupported protocol: {protocol}. Known: {known}")

    def get_contract_address(self, protocol: str, contract: str) -> str:
        """Get a single contract address for a protocol."""
        config = self.get_protocol_config(protocol)
        if contract not in config:
            raise ConfigError(f"Unknown {protocol} contract: {contract}")
        return config[contract]
