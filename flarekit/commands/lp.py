#!/usr/bin/env python3
"""
Enosys V3 liquidity positions.

Usage:
    flare-lp positions --address 0x...
    flare-lp check --address 0x...
    flare-lp mint --token0 WFLR --token1 FXRP --amount0 1000 --amount1 100 [--fee 3000] [--range 10]
    flare-lp add --token-id 123 --amount0 100 --amount1 10
    flare-lp remove --token-id 123 [--percent 100]
    flare-lp collect --token-id 123
"""

import sys

from ..amm.health import position_health
from ..amm.quoting import fee_to_percent, format_units
from ..amm.tick_math import tick_to_price
from ..chain.errors import UsageError
from ..credentials import load_signer
from ..dex.enosys import EnosysV3Service
from .common import (
    connect,
    load_profile,
    new_parser,
    parse_amount,
    run,
    short_address,
    wallet_address,
)

WIDE_RULE = "─" * 95
NARROW_RULE = "─" * 70


def build_parser():
    parser = new_parser(
        "flare-lp",
        "Enosys V3 LP manager (Uniswap V3 on Flare)",
        epilog="Fee tiers: 500 (0.05%), 3000 (0.3%), 10000 (1%)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("positions", "List positions"), ("check", "Range health check")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--address", help="Owner address (default: AGENT_WALLET)")

    p = sub.add_parser("mint", help="Mint a new position")
    p.add_argument("--token0", required=True)
    p.add_argument("--token1", required=True)
    p.add_argument("--amount0", required=True)
    p.add_argument("--amount1", required=True)
    p.add_argument("--fee", type=int, default=None)
    p.add_argument("--range", dest="range_pct", type=float, default=10.0,
                   help="Range half-width in percent around the current price")
    p.add_argument("--tick-lower", "--tickLower", dest="tick_lower", type=int)
    p.add_argument("--tick-upper", "--tickUpper", dest="tick_upper", type=int)
    p.add_argument("--keystore")

    p = sub.add_parser("add", help="Add liquidity to a position")
    p.add_argument("--token-id", "--tokenId", dest="token_id", type=int, required=True)
    p.add_argument("--amount0", default=None)
    p.add_argument("--amount1", default=None)
    p.add_argument("--keystore")

    p = sub.add_parser("remove", help="Remove liquidity and collect")
    p.add_argument("--token-id", "--tokenId", dest="token_id", type=int, required=True)
    p.add_argument("--percent", type=float, default=100.0)
    p.add_argument("--keystore")

    p = sub.add_parser("collect", help="Collect fees")
    p.add_argument("--token-id", "--tokenId", dest="token_id", type=int, required=True)
    p.add_argument("--keystore")
    return parser


def _price_range(tokens, position):
    dec0 = tokens.decimals_for(position.token0)
    dec1 = tokens.decimals_for(position.token1)
    low = tick_to_price(position.tick_lower, dec0, dec1)
    high = tick_to_price(position.tick_upper, dec0, dec1)
    return low, high, dec0, dec1


async def cmd_positions(args, profile, service):
    address = wallet_address(args, profile)
    positions = await service.fetch_positions(address)
    if not positions:
        print(f"\nNo Enosys V3 positions found for {address}\n")
        return

    tokens = profile.tokens
    print(f"\n Enosys V3 Positions for {short_address(address)}")
    print(WIDE_RULE)
    print(f"{'ID':<8}{'Pair':<16}{'Fee':<8}{'Range':<30}{'Liquidity':<18}Status")
    print(WIDE_RULE)
    for pos in positions:
        sym0, sym1 = tokens.symbol_for(pos.token0), tokens.symbol_for(pos.token1)
        low, high, dec0, dec1 = _price_range(tokens, pos)
        print(
            f"{pos.token_id:<8}{sym0 + '/' + sym1:<16}{fee_to_percent(pos.fee):<8}"
            f"{f'{low:.5g} - {high:.5g}':<30}{str(pos.liquidity)[:16]:<18}"
            f"{position_health(pos).label}"
        )
        if pos.tokens_owed0 > 0 or pos.tokens_owed1 > 0:
            print(
                f"{'':<8}  Uncollected: {format_units(pos.tokens_owed0, dec0)} {sym0}, "
                f"{format_units(pos.tokens_owed1, dec1)} {sym1}"
            )
    print(WIDE_RULE + "\n")


async def cmd_check(args, profile, service):
    address = wallet_address(args, profile)
    positions = await service.fetch_positions(address)
    if not positions:
        print(f"\nNo positions found for {address}\n")
        return

    tokens = profile.tokens
    alerts = 0
    print(f"\n Enosys V3 Health Check: {len(positions)} position(s)")
    print(NARROW_RULE)
    for pos in positions:
        health = position_health(pos)
        if health.needs_attention:
            alerts += 1
        sym0, sym1 = tokens.symbol_for(pos.token0), tokens.symbol_for(pos.token1)
        print(f"  #{pos.token_id}  {sym0}/{sym1} ({fee_to_percent(pos.fee)})  {health.label}")
        if pos.current_tick is not None:
            low, high, dec0, dec1 = _price_range(tokens, pos)
            price = tick_to_price(pos.current_tick, dec0, dec1)
            print(f"    Price: {price:.5g}  Range: [{low:.5g}, {high:.5g}]")
    print(NARROW_RULE)
    if alerts:
        print(f"  ⚠️  {alerts} position(s) need attention!\n")
    else:
        print("  ✅ All positions healthy\n")


async def cmd_mint(args, profile, service):
    token_a = profile.tokens.resolve_token(args.token0)
    token_b = profile.tokens.resolve_token(args.token1)
    amount_a = parse_amount(args.amount0, service.token_decimals(token_a))
    amount_b = parse_amount(args.amount1, service.token_decimals(token_b))
    fee = args.fee or profile.protocols.DEFAULT_FEE

    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nMinting Enosys V3 position: {token_a.symbol}/{token_b.symbol}")
    result = await service.mint_position(
        signer, token_a, token_b, amount_a, amount_b, fee,
        range_pct=args.range_pct, tick_lower=args.tick_lower, tick_upper=args.tick_upper,
    )
    print(
        f"  Fee: {fee_to_percent(fee)}, Current tick: {result.current_tick}, "
        f"Range: [{result.tick_lower}, {result.tick_upper}]"
    )
    print(f"  Tx: {result.tx.tx_hash}")
    token_id = result.token_id if result.token_id is not None else "?"
    print(f"  ✓ Minted position #{token_id} in block {result.tx.block_number}\n")


async def cmd_add(args, profile, service):
    if args.amount0 is None and args.amount1 is None:
        raise UsageError("add needs --amount0 and/or --amount1")

    data = await service.get_position(args.token_id)
    tokens = profile.tokens
    amount0 = parse_amount(args.amount0, tokens.decimals_for(data.token0)) if args.amount0 else 0
    amount1 = parse_amount(args.amount1, tokens.decimals_for(data.token1)) if args.amount1 else 0

    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nAdding liquidity to position #{args.token_id}...")
    tx = await service.add_liquidity(signer, args.token_id, amount0, amount1)
    print(f"  Tx: {tx.tx_hash}")
    print(f"  ✓ Liquidity added in block {tx.block_number}\n")


async def cmd_remove(args, profile, service):
    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nRemoving {args.percent:g}% liquidity from position #{args.token_id}...")
    result = await service.remove_liquidity(signer, args.token_id, args.percent)
    if result is None:
        print("Position has no liquidity")
        return

    print("  ✓ Liquidity decreased")
    print(f"  ✓ Collected in block {result.collect_tx.block_number}")
    if args.percent >= 100:
        print("  ✓ Position burned" if result.burned else "  ⚠ Could not burn (may have remaining tokens)")
    print()


async def cmd_collect(args, profile, service):
    data = await service.get_position(args.token_id)
    tokens = profile.tokens
    sym0, sym1 = tokens.symbol_for(data.token0), tokens.symbol_for(data.token1)

    signer = load_signer(args.keystore, profile.wallet)
    print(f"\nCollecting fees from position #{args.token_id} ({sym0}/{sym1})...")
    tx = await service.collect_fees(signer, args.token_id)
    print(f"  Tx: {tx.tx_hash}")
    print(f"  ✓ Fees collected in block {tx.block_number}\n")


COMMANDS = {
    "positions": cmd_positions,
    "check": cmd_check,
    "mint": cmd_mint,
    "add": cmd_add,
    "remove": cmd_remove,
    "collect": cmd_collect,
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
