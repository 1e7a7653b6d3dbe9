"""
Command-line entry points.

Each module exposes main(argv=None) -> int and is installed as a console
script (flare-lp, flare-swap-v3, flare-swap-v4, flare-fassets,
flare-wallet, flare-xrpl).
"""
