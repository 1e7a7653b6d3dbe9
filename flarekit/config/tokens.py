"""
Static token table for the Flare network.

Symbols resolve case-insensitively. ``FLR`` is an alias for the wrapped
native token so that pool and router calls see an ERC-20 address.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from eth_utils.address import is_address, to_checksum_address

from .base import BaseConfig, ConfigError

DEFAULT_DECIMALS = 18


@dataclass(frozen=True)
class TokenInfo:
    """
    Token descriptor.

    Attributes:
        symbol: Display symbol
        address: Checksummed contract address
        decimals: Decimal precision, None when unknown (raw address input)
    """

    symbol: str
    address: str
    decimals: Optional[int]

    @property
    def is_known(self) -> bool:
        return self.decimals is not None


_FLARE_TOKENS = {
    "WFLR": ("0x1D80c49BbBCd1C0911346656B529DF9E5c2F783d", 18),
    "BANK": ("0x194726F6C2aE988f1Ab5e1C943c17e591a6f6059", 18),
    "FXRP": ("0xAd552A648C74D49E10027AB8a618A3ad4901c5bE", 6),
    "sFLR": ("0x12e605bc104e93B45e1aD99F9e555f659051c2BB", 18),
    "rFLR": ("0x26d460c3Cf931Fb2014FA436a49e3Af08619810e", 18),
    "USDT0": ("0xe7cd86e13AC4309349F30B3435a9d337750fC82D", 6),
    "USDC.e": ("0xfbda5f676cb37624f28265a144a48b0d6e87d3b6", 6),
    "CDP": ("0x6Cd3a5Ba46FA254D4d2E3C2B37350ae337E94a0F", 18),
    "stXRP": ("0x4C18Ff3C89632c3Dd62E796c0aFA5c07c4c1B2b3", 6),
    "earnXRP": ("0xe533e447fd7720b2f8654da2b1953efa06b60bfa", 6),
    "HLN": ("0x140D8d3649Ec605CF69018C627fB44cCC76eC89f", 18),
    "APS": ("0xff56eb5b1a7faa972291117e5e9565da29bc808d", 18),
}

_ALIASES = {"FLR": "WFLR"}


@dataclass
class TokenConfig(BaseConfig):
    """Token lookup for the supported network."""

    @property
    def tokens(self) -> Dict[str, TokenInfo]:
        """All known tokens keyed by display symbol."""
        return {
            symbol: TokenInfo(symbol, to_checksum_address(address), decimals)
            for symbol, (address, decimals) in _FLARE_TOKENS.items()
        }

    @property
    def known_symbols(self) -> str:
        return ", ".join(self.tokens)

    def resolve_token(self, symbol_or_address: str) -> TokenInfo:
        """
        Resolve a symbol (case-insensitive) or a raw address.

        Raises:
            ConfigError: If the symbol is unknown and not an address
        """
        if not symbol_or_address:
            raise ConfigError(f"Token symbol required. Known: {self.known_symbols}")

        upper = symbol_or_address.upper()
        upper = _ALIASES.get(upper, upper)
        for symbol, token in self.tokens.items():
            if symbol.upper() == upper:
                return token

        if is_address(symbol_or_address):
            known = self.token_by_address(symbol_or_address)
            if known:
                return known
            return TokenInfo(symbol_or_address, to_checksum_address(symbol_or_address), None)

        raise ConfigError(f"Unknown token: {symbol_or_address}. Known: {self.known_symbols}")

    def token_by_address(self, address: str) -> Optional[TokenInfo]:
        """Look up a token by contract address."""
        lowered = address.lower()
        for token in self.tokens.values():
            if token.address.lower() == lowered:
                return token
        return None

    def symbol_for(self, address: str) -> str:
        """Display symbol for an address, shortened address when unknown."""
        token = self.token_by_address(address)
        return token.symbol if token else f"{address[:8]}..."

    def decimals_for(self, address: str) -> int:
        """Decimals for an address, 18 when unknown."""
        token = self.token_by_address(address)
        return token.decimals if token else DEFAULT_DECIMALS
