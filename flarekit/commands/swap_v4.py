#!/usr/bin/env python3
"""
SparkDex V4 swaps (Algebra Integral on Flare).

Usage:
    flare-swap-v4 quote --from WFLR --to FXRP --amount 100 [--via USDT0]
    flare-swap-v4 swap --from WFLR --to FXRP --amount 100 [--slippage 0.5]
    flare-swap-v4 pool --from WFLR --to FXRP
"""

import sys

from ..amm.quoting import fee_to_percent, format_units, slippage_to_bips
from ..credentials import load_signer
from ..dex.sparkdex import SparkDexV4Service
from .common import box, connect, load_profile, new_parser, parse_amount, parse_csv, quote_box, run

# Algebra fees are dynamic and not on round tiers
FEE_PLACES = 4


def build_parser():
    parser = new_parser(
        "flare-swap-v4",
        "SparkDex V4 swaps (Algebra Integral on Flare)",
        epilog="Fees are dynamic per pool; there are no fee tiers.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("quote", help="Quote a swap")
    p.add_argument("--from", dest="from_token", required=True)
    p.add_argument("--to", dest="to_token", required=True)
    p.add_argument("--amount", required=True)
    p.add_argument("--via", help="Comma-separated intermediate tokens for multi-hop")

    p = sub.add_parser("swap", help="Execute a swap")
    p.add_argument("--from", dest="from_token", required=True)
    p.add_argument("--to", dest="to_token", required=True)
    p.add_argument("--amount", required=True)
    p.add_argument("--slippage", type=float, default=None, help="Slippage tolerance in percent")
    p.add_argument("--via")
    p.add_argument("--keystore")

    p = sub.add_parser("pool", help="Pool state for a pair")
    p.add_argument("--from", dest="from_token", required=True)
    p.add_argument("--to", dest="to_token", required=True)
    return parser


async def cmd_quote(args, profile, service):
    token_in = profile.tokens.resolve_token(args.from_token)
    token_out = profile.tokens.resolve_token(args.to_token)
    dec_in, dec_out = service.token_decimals(token_in), service.token_decimals(token_out)
    amount = parse_amount(args.amount, dec_in)
    via = [profile.tokens.resolve_token(s) for s in parse_csv(args.via)]

    quote = await service.quote(token_in, token_out, amount, via or None)
    print()
    if via:
        path = [token_in, *via, token_out]
        print(box("SparkDex V4: Multi-hop Quote", [
            ("Path", " → ".join(t.symbol for t in path)),
            ("Input", f"{format_units(amount, dec_in)} {token_in.symbol}"),
            ("Output", f"{format_units(quote.amount_out, dec_out)} {token_out.symbol}"),
            ("Gas est", str(quote.gas_estimate)),
        ]))
        if quote.warning:
            print(f"⚠️  {quote.warning}")
    else:
        print(quote_box("SparkDex V4: Quote", token_in, token_out, quote, dec_in, dec_out,
                        fee_places=FEE_PLACES))
    print()


async def cmd_swap(args, profile, service):
    token_in = profile.tokens.resolve_token(args.from_token)
    token_out = profile.tokens.resolve_token(args.to_token)
    dec_in, dec_out = service.token_decimals(token_in), service.token_decimals(token_out)
    amount = parse_amount(args.amount, dec_in)
    slippage = args.slippage if args.slippage is not None else profile.protocols.DEFAULT_SLIPPAGE_PCT
    bips = slippage_to_bips(slippage)
    via = [profile.tokens.resolve_token(s) for s in parse_csv(args.via)]

    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nSwapping {format_units(amount, dec_in)} {token_in.symbol} → {token_out.symbol} on SparkDex V4...")
    result = await service.swap(signer, token_in, token_out, amount, bips, via or None)
    print(f"  Expected:  {format_units(result.quote.amount_out, dec_out)} {token_out.symbol}")
    print(f"  Min out:   {format_units(result.min_amount_out, dec_out)} {token_out.symbol} ({slippage:g}% slippage)")
    if result.approved:
        print("  ✓ Approved")
    print(f"  Tx: {result.tx.tx_hash}")
    print(f"  ✓ Confirmed in block {result.tx.block_number} (gas: {result.tx.gas_used})\n")


async def cmd_pool(args, profile, service):
    token_a = profile.tokens.resolve_token(args.from_token)
    token_b = profile.tokens.resolve_token(args.to_token)
    info = await service.pool_info(token_a, token_b)
    if info is None:
        print(f"No SparkDex V4 pool for {token_a.symbol}/{token_b.symbol}")
        return

    print()
    print(box("SparkDex V4: Pool Info", [
        ("Pool", info.address),
        ("Pair", f"{token_a.symbol}/{token_b.symbol}"),
        ("Tick", str(info.tick)),
        ("Fee", fee_to_percent(info.fee, FEE_PLACES)),
        ("Liquidity", str(info.liquidity)),
        ("Spacing", str(info.tick_spacing)),
    ]))
    print()


COMMANDS = {
    "quote": cmd_quote,
    "swap": cmd_swap,
    "pool": cmd_pool,
}


async def _main(argv):
    args = build_parser().parse_args(argv)
    profile = load_profile(args)
    service = SparkDexV4Service(connect(profile), profile)
    await COMMANDS[args.command](args, profile, service)


def main(argv=None) -> int:
    return run(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
