#!/usr/bin/env python3
"""
XRP Ledger wallet: balance, history, payments and wallet creation.

Usage:
    flare-xrpl balance [--address r...] [--xrpl-key wallet.json]
    flare-xrpl history [--limit 10]
    flare-xrpl send --to r... --amount 12.5 [--memo text] [--tag 123]
    flare-xrpl create [--save ~/.secrets/xrpl-wallet.json] [--json]
"""

import json
import sys

from ..chain.errors import UsageError
from ..credentials import generate_xrpl_wallet, load_xrpl_wallet
from ..ledger import (
    MIN_RESERVE_DROPS,
    MIN_RESERVE_XRP,
    XrplLedger,
    XrplPaymentService,
    close_time,
    drops_to_xrp_decimal,
    validate_xrpl_address,
)
from .common import heading, load_profile, new_parser, parse_amount, run, short_address

XRP_DECIMALS = 6


def build_parser():
    parser = new_parser("flare-xrpl", "XRP Ledger wallet")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("balance", help="Balance and spendable amount")
    p.add_argument("--address", help="Any XRPL address (default: your wallet)")
    p.add_argument("--xrpl-key", dest="xrpl_key")

    p = sub.add_parser("history", help="Recent transactions")
    p.add_argument("--address")
    p.add_argument("--limit", type=int, default=10)
    p.add_argument("--xrpl-key", dest="xrpl_key")

    p = sub.add_parser("send", help="Send XRP")
    p.add_argument("--to", required=True)
    p.add_argument("--amount", required=True, help="Amount in XRP")
    p.add_argument("--memo")
    p.add_argument("--tag", type=int, help="Destination tag")
    p.add_argument("--xrpl-key", dest="xrpl_key")

    p = sub.add_parser("create", help="Generate a new XRPL wallet")
    p.add_argument("--save", help="Write the wallet JSON here (mode 0600)")
    p.add_argument("--json", action="store_true", help="JSON output only")
    return parser


def _address(args, profile) -> str:
    if args.address:
        return validate_xrpl_address(args.address)
    return load_xrpl_wallet(args.xrpl_key, profile.wallet).address


async def cmd_balance(args, profile):
    address = _address(args, profile)
    async with XrplLedger(profile.wallet.XRPL_WSS) as ledger:
        balance = await ledger.balance_drops(address)
    available = max(balance - MIN_RESERVE_DROPS, 0)

    print(heading("💰 XRPL Wallet Balance"))
    print(f"  Address:   {address}")
    print(f"  Balance:   {drops_to_xrp_decimal(balance)} XRP")
    print(f"  Reserve:   {MIN_RESERVE_XRP} XRP")
    print(f"  Available: {drops_to_xrp_decimal(available)} XRP")
    if balance == 0:
        print(f"  ⚠️  Not activated. Send at least {MIN_RESERVE_XRP} XRP to activate.")


async def cmd_history(args, profile):
    if args.limit < 1:
        raise UsageError("--limit must be >= 1")
    address = _address(args, profile)
    async with XrplLedger(profile.wallet.XRPL_WSS) as ledger:
        history = await ledger.recent_transactions(address, args.limit)

    print(heading(f"📜 XRPL Transaction History (last {args.limit})"))
    if not history:
        print("  No transactions")
        return
    for tx in history:
        direction = "📤 OUT" if tx.is_outgoing else "📥 IN "
        arrow = "→" if tx.is_outgoing else "←"
        amount = f"{tx.amount_xrp} XRP" if tx.amount_xrp is not None else "token"
        print(f"  {direction} {amount} {arrow} {short_address(tx.counterparty or '?')}")
        print(f"    TX: {tx.tx_hash}")
        print(f"    Status: {tx.result} | {close_time(tx.close_time)}")
        print()


async def cmd_send(args, profile):
    amount = parse_amount(args.amount, XRP_DECIMALS)
    destination = validate_xrpl_address(args.to)
    wallet = load_xrpl_wallet(args.xrpl_key, profile.wallet)

    async with XrplLedger(profile.wallet.XRPL_WSS) as ledger:
        payments = XrplPaymentService(ledger)
        check = await payments.check_payment(wallet.address, destination, amount)

        print(heading("💰 XRPL Send"))
        print(f"  From:      {wallet.address}")
        print(f"  To:        {destination}")
        print(f"  Amount:    {drops_to_xrp_decimal(amount)} XRP")
        print(f"  Balance:   {drops_to_xrp_decimal(check.balance_drops)} XRP")
        print(f"  Available: {drops_to_xrp_decimal(check.available_drops)} XRP")
        if not check.destination_activated:
            print("  ⚠️  Destination not activated; this payment will activate it.")
        if args.tag is not None:
            print(f"  Dest Tag:  {args.tag}")
        if args.memo:
            print(f"  Memo:      {args.memo}")

        print("\n💸 Sending...")
        result = await payments.send(
            wallet, destination, amount, memo_text=args.memo, destination_tag=args.tag
        )
        remaining = await ledger.balance_drops(wallet.address)

    print(f"\n  TX:     {result.tx_hash}")
    print(f"  Result: {result.result_code}")
    print(f"  Remaining: {drops_to_xrp_decimal(remaining)} XRP")
    print(f"\n✅ Sent {result.amount_xrp} XRP to {destination}")


async def cmd_create(args, profile):
    data, saved = generate_xrpl_wallet(args.save)
    if args.json:
        print(json.dumps(data, indent=2))
        return

    print()
    print("🔑 XRPL Wallet Generated")
    print("═" * 40)
    print(f"  Address:     {data['address']}")
    print(f"  Secret:      {data['secret']}")
    print(f"  Public Key:  {data['publicKey']}")
    print("═" * 40)
    print()
    print("⚠️  IMPORTANT:")
    print("  • Save your secret securely, it cannot be recovered!")
    print(f"  • Send at least {MIN_RESERVE_XRP} XRP to activate the address on mainnet")
    print("  • Never share your secret or private key")
    if saved:
        print(f"\n✅ Saved to {saved} (chmod 600)")
    else:
        print("\n💡 To save: flare-xrpl create --save ~/.secrets/xrpl-wallet.json")


COMMANDS = {
    "balance": cmd_balance,
    "history": cmd_history,
    "send": cmd_send,
    "create": cmd_create,
}


async def _main(argv):
    args = build_parser().parse_args(argv)
    profile = load_profile(args)
    await COMMANDS[args.command](args, profile)


def main(argv=None) -> int:
    return run(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
