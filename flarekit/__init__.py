"""
flarekit: command-line tools for Flare DeFi.

Enosys V3 liquidity and swaps, SparkDex V4 swaps, FAssets minting and
redemption, EVM wallet operations and XRP Ledger payments.
"""

__version__ = "0.1.0"
