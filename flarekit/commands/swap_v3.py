#!/usr/bin/env python3
"""
Enosys V3 swaps (Uniswap V3 on Flare).

Usage:
    flare-swap-v3 quote --from WFLR --to FXRP --amount 100 [--fee 3000]
    flare-swap-v3 quote --from WFLR --to USDT0 --amount 100 --via FXRP --fees 3000,500
    flare-swap-v3 best --from WFLR --to FXRP --amount 100
    flare-swap-v3 swap --from WFLR --to FXRP --amount 100 [--slippage 0.5] [--fee 3000]
    flare-swap-v3 pool --from WFLR --to FXRP [--fee 3000]
    flare-swap-v3 pools
"""

import sys

from ..amm.quoting import fee_to_percent, format_units, slippage_to_bips
from ..chain.errors import ContractError, UsageError
from ..credentials import load_signer
from ..dex.enosys import EnosysV3Service
from .common import (
    box,
    connect,
    load_profile,
    new_parser,
    parse_amount,
    parse_csv,
    parse_fee_list,
    quote_box,
    run,
)

# Pairs listed by `pools`
KNOWN_PAIRS = [
    ("WFLR", "sFLR"),
    ("WFLR", "FXRP"),
    ("WFLR", "HLN"),
    ("WFLR", "BANK"),
    ("sFLR", "FXRP"),
]


def build_parser():
    parser = new_parser(
        "flare-swap-v3",
        "Enosys V3 swaps (Uniswap V3 on Flare)",
        epilog="Fee tiers: 500 (0.05%), 3000 (0.3%), 10000 (1%)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    def pair_args(p, amount=True):
        p.add_argument("--from", dest="from_token", required=True)
        p.add_argument("--to", dest="to_token", required=True)
        if amount:
            p.add_argument("--amount", required=True)

    p = sub.add_parser("quote", help="Quote a swap (best tier when --fee is omitted)")
    pair_args(p)
    p.add_argument("--fee", type=int)
    p.add_argument("--via", help="Comma-separated intermediate tokens for multi-hop")
    p.add_argument("--fees", help="Comma-separated fee per hop for multi-hop")

    p = sub.add_parser("best", help="Best quote across fee tiers")
    pair_args(p)

    p = sub.add_parser("swap", help="Execute a swap")
    pair_args(p)
    p.add_argument("--fee", type=int)
    p.add_argument("--slippage", type=float, default=None, help="Slippage tolerance in percent")
    p.add_argument("--via")
    p.add_argument("--fees")
    p.add_argument("--keystore")

    p = sub.add_parser("pool", help="Pool state for a pair")
    pair_args(p, amount=False)
    p.add_argument("--fee", type=int)

    sub.add_parser("pools", help="List known pools")
    return parser


def _route(args, profile):
    via = [profile.tokens.resolve_token(s) for s in parse_csv(args.via)]
    fees = parse_fee_list(args.fees)
    if fees and not via:
        raise UsageError("--fees only applies with --via")
    if via and fees and len(fees) != len(via) + 1:
        raise UsageError(f"--fees needs {len(via) + 1} values for {len(via) + 1} hops")
    return via, fees


async def cmd_quote(args, profile, service):
    token_in = profile.tokens.resolve_token(args.from_token)
    token_out = profile.tokens.resolve_token(args.to_token)
    dec_in, dec_out = service.token_decimals(token_in), service.token_decimals(token_out)
    amount = parse_amount(args.amount, dec_in)
    via, fees = _route(args, profile)

    if via:
        hop_fees = fees or [args.fee or profile.protocols.DEFAULT_FEE] * (len(via) + 1)
        tokens = [token_in, *via, token_out]
        quote = await service.quote_path(tokens, hop_fees, amount)
        print()
        print(box("Enosys V3: Multi-hop Quote", [
            ("Path", " → ".join(t.symbol for t in tokens)),
            ("Fees", ", ".join(fee_to_percent(f) for f in hop_fees)),
            ("Input", f"{format_units(amount, dec_in)} {token_in.symbol}"),
            ("Output", f"{format_units(quote.amount_out, dec_out)} {token_out.symbol}"),
            ("Gas est", str(quote.gas_estimate)),
        ]))
        if quote.warning:
            print(f"⚠️  {quote.warning}")
        print()
        return

    if args.fee is None:
        await _print_best(service, token_in, token_out, amount, dec_in, dec_out)
        return

    quote = await service.quote(token_in, token_out, amount, args.fee)
    if quote is None:
        raise ContractError(f"No pool for {token_in.symbol}/{token_out.symbol} at fee {args.fee}")
    print()
    print(quote_box("Enosys V3: Quote", token_in, token_out, quote, dec_in, dec_out))
    print()


async def _print_best(service, token_in, token_out, amount, dec_in, dec_out):
    best, candidates = await service.best_quote(token_in, token_out, amount)
    if best is None:
        print("No pools found for this pair")
        return

    print()
    print(quote_box("Enosys V3: Best Quote", token_in, token_out, best, dec_in, dec_out))
    if len(candidates) > 1:
        print("  Other tiers:")
        for q in sorted(candidates, key=lambda q: q.amount_out, reverse=True):
            if q is not best:
                print(f"    {fee_to_percent(q.fee):<8}{format_units(q.amount_out, dec_out)} {token_out.symbol}")
    print()


async def cmd_best(args, profile, service):
    token_in = profile.tokens.resolve_token(args.from_token)
    token_out = profile.tokens.resolve_token(args.to_token)
    dec_in, dec_out = service.token_decimals(token_in), service.token_decimals(token_out)
    amount = parse_amount(args.amount, dec_in)
    await _print_best(service, token_in, token_out, amount, dec_in, dec_out)


async def cmd_swap(args, profile, service):
    token_in = profile.tokens.resolve_token(args.from_token)
    token_out = profile.tokens.resolve_token(args.to_token)
    dec_in, dec_out = service.token_decimals(token_in), service.token_decimals(token_out)
    amount = parse_amount(args.amount, dec_in)
    slippage = args.slippage if args.slippage is not None else profile.protocols.DEFAULT_SLIPPAGE_PCT
    bips = slippage_to_bips(slippage)
    via, fees = _route(args, profile)

    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nSwapping {format_units(amount, dec_in)} {token_in.symbol} → {token_out.symbol}...")
    result = await service.swap(
        signer, token_in, token_out, amount, bips, fee=args.fee, via=via or None, fees=fees or None
    )
    print(f"  Expected:  {format_units(result.quote.amount_out, dec_out)} {token_out.symbol}")
    print(f"  Min out:   {format_units(result.min_amount_out, dec_out)} {token_out.symbol} ({slippage:g}% slippage)")
    if result.approved:
        print("  ✓ Approved")
    print(f"  Tx: {result.tx.tx_hash}")
    print(f"  ✓ Confirmed in block {result.tx.block_number} (gas: {result.tx.gas_used})\n")


async def cmd_pool(args, profile, service):
    token_a = profile.tokens.resolve_token(args.from_token)
    token_b = profile.tokens.resolve_token(args.to_token)
    pools = await service.pool_info(token_a, token_b, [args.fee] if args.fee else None)
    if not pools:
        print(f"No Enosys V3 pool for {token_a.symbol}/{token_b.symbol}")
        return

    for info in pools:
        print(f"\n  {token_a.symbol}/{token_b.symbol}: {fee_to_percent(info.fee)} fee")
        print(f"  Pool:      {info.address}")
        print(f"  Tick:      {info.tick}")
        print(f"  Liquidity: {info.liquidity}")
        print(f"  Spacing:   {info.tick_spacing}")
    print()


async def cmd_pools(args, profile, service):
    print("\n Enosys V3 Pools")
    print("─" * 70)
    for sym_a, sym_b in KNOWN_PAIRS:
        token_a, token_b = profile.tokens.resolve_token(sym_a), profile.tokens.resolve_token(sym_b)
        for info in await service.pool_info(token_a, token_b):
            print(
                f"  {sym_a + '/' + sym_b:<14}{fee_to_percent(info.fee):<8}"
                f"{info.address}  liquidity {info.liquidity}"
            )
    print("─" * 70 + "\n")


COMMANDS = {
    "quote": cmd_quote,
    "best": cmd_best,
    "swap": cmd_swap,
    "pool": cmd_pool,
    "pools": cmd_pools,
}


async def _main(argv):
    args = build_parser().parse_args(argv)
    profile = load_profile(args)
    service = EnosysV3Service(connect(profile), profile)
    await COMMANDS[args.command](args, profile, service)


def main(argv=None) -> int:
    return run(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
