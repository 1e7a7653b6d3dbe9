#!/usr/bin/env python3
"""
FAssets mint and redeem (FXRP <-> XRP).

Usage:
    flare-fassets info [--address 0x...]
    flare-fassets agents
    flare-fassets mint --lots 1 [--agent 0x...] [--max-fee 2500] [--xrpl-key wallet.json]
    flare-fassets redeem --lots 1 --xrpl-address r...
    flare-fassets status --xrpl-address r... [--address 0x...]

Flow:
    1. Create an XRPL wallet:  flare-xrpl create --save ~/.secrets/xrpl-wallet.json
    2. Fund it with the 1 XRP reserve plus the amount to mint
    3. Mint:   flare-fassets mint --lots 1
    4. Redeem: flare-fassets redeem --lots 1 --xrpl-address rXXX...
"""

import sys
from datetime import datetime, timezone

from ..amm.quoting import format_units
from ..credentials import load_signer, load_xrpl_wallet
from ..fassets import (
    MINT_DAPP_URL,
    FAssetsService,
    format_free_lots,
    lots_from_args,
    required_payment_xrp,
)
from ..ledger.xrpl import validate_xrpl_address
from .common import RULE, connect, heading, load_profile, new_parser, parse_amount, run

NATIVE_DECIMALS = 18


def build_parser():
    parser = new_parser(
        "flare-fassets",
        "FAssets mint & redeem (FXRP)",
        epilog="1 lot = the asset manager's lot size (see `info`).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="Show lot size, fees and optionally a balance")
    p.add_argument("--address", help="Flare address to show FXRP balance for")

    sub.add_parser("agents", help="List agents with free capacity")

    def size_args(p):
        group = p.add_mutually_exclusive_group(required=True)
        group.add_argument("--lots", type=int, help="Number of lots")
        group.add_argument("--amount", help="FXRP amount, a whole number of lots")

    p = sub.add_parser("mint", help="Mint FXRP by paying XRP to an agent")
    size_args(p)
    p.add_argument("--keystore", help="Flare keystore")
    p.add_argument("--xrpl-key", dest="xrpl_key", help="XRPL wallet JSON")
    p.add_argument("--agent", help="Agent vault (auto-selected when omitted)")
    p.add_argument("--max-fee", dest="max_fee", type=int, default=None,
                   help="Max minting fee in BIPS (default: MAX_MINTING_FEE_BIPS)")

    p = sub.add_parser("redeem", help="Redeem FXRP for XRP")
    size_args(p)
    p.add_argument("--xrpl-address", dest="xrpl_address", required=True)
    p.add_argument("--keystore")

    p = sub.add_parser("status", help="XRPL balance and history")
    p.add_argument("--xrpl-address", dest="xrpl_address", required=True)
    p.add_argument("--address", help="Flare address to show FXRP balance for")
    return parser


async def _lots(args, service) -> int:
    if args.amount is None:
        return lots_from_args(args.lots, None, 0)
    info = await service.info()
    return lots_from_args(None, parse_amount(args.amount, info.decimals), info.lot_size)


async def cmd_info(args, profile, service):
    info = await service.info(args.address)
    print(heading("📊 FAssets Info"))
    print(f"  FXRP Token:        {info.fasset}")
    print(f"  AssetManager:      {info.asset_manager}")
    print(f"  Lot Size:          {format_units(info.lot_size, info.decimals)} FXRP (= XRP)")
    print(f"  Decimals:          {info.decimals}")
    print(f"  Reservation Fee:   {format_units(info.reservation_fee, NATIVE_DECIMALS)} FLR per lot")
    print()
    if info.balance is not None:
        print(f"  FXRP Balance:      {format_units(info.balance, info.decimals)}")
        print(f"  Redeemable Lots:   {info.redeemable_lots}")


async def cmd_agents(args, profile, service):
    agents = await service.agents()
    print(heading("📋 Available Agents"))
    for agent in agents:
        print(f"  {agent.agent_vault}")
        print(f"    Free lots: {format_free_lots(agent.free_collateral_lots)}")
        print(f"    Fee:       {agent.fee_bips / 100:g}%")
    print(f"\n  Total: {len(agents)} agents with capacity")


async def cmd_mint(args, profile, service):
    lots = await _lots(args, service)
    xrpl_wallet = load_xrpl_wallet(args.xrpl_key, profile.wallet)
    signer = load_signer(args.keystore, profile.wallet)

    print(heading("🔄 FAssets Minting"))
    print(f"  Flare Wallet:  {signer.address}")
    print(f"  XRPL Wallet:   {xrpl_wallet.address}")
    print(f"  Lots:          {lots}")
    print()

    receipt = await service.mint(signer, xrpl_wallet, lots, args.agent, args.max_fee)
    reservation = receipt.reservation
    deadline = datetime.fromtimestamp(reservation.last_underlying_timestamp, tz=timezone.utc)

    print(f"  Agent:          {receipt.agent_vault}")
    print(f"  CRF:            {format_units(receipt.reservation_fee, NATIVE_DECIMALS)} FLR")
    print(f"  Reservation ID: {reservation.reservation_id}")
    print(f"  Paid:           {required_payment_xrp(reservation)} XRP to {reservation.payment_address}")
    print(f"  Payment ref:    0x{reservation.payment_reference.hex()}")
    print(f"  Deadline:       {deadline.isoformat()}")

    outcome = receipt.outcome
    if outcome.minted:
        decimals = service.fasset.decimals()
        print(f"  ✅ MINTED! +{format_units(outcome.delta, decimals)} FXRP")
        print(f"  New FXRP balance: {format_units(outcome.balance, decimals)}")
    else:
        minutes = int(service.watcher.max_wait_seconds // 60)
        print()
        print(f"  ⚠️ Minting not yet complete after {minutes} minutes.")
        print("  The XRP payment was successful; FXRP will be minted once the payment proof is submitted.")
        print("  You can:")
        print("    1. Wait longer, some agents take up to 30 min")
        print(f"    2. Execute via dApp: {MINT_DAPP_URL}")
        print(f"    3. Check balance: flare-fassets info --address {signer.address}")

    print()
    print(RULE)
    print("Summary:")
    print(f"  Reservation: #{reservation.reservation_id}")
    print(f"  XRP Sent: {required_payment_xrp(reservation)} to {reservation.payment_address}")
    print(f"  XRPL TX: {receipt.payment.tx_hash}")
    print(f"  Flare TX: {receipt.reserve_tx.tx_hash}")
    print(f"  Minted: {'✅' if outcome.minted else '⏳ Pending'}")


async def cmd_redeem(args, profile, service):
    validate_xrpl_address(args.xrpl_address)
    lots = await _lots(args, service)
    signer = load_signer(args.keystore, profile.wallet)

    print(heading("🔄 FAssets Redemption"))
    print(f"  Wallet:       {signer.address}")
    print(f"  Redeeming:    {lots} lot(s)")
    print(f"  XRPL Dest:    {args.xrpl_address}")
    print()

    receipt = await service.redeem(signer, lots, args.xrpl_address)
    decimals = service.fasset.decimals()
    if receipt.approved:
        print("✅ Approved FXRP to AssetManager")
    print(f"  TX: {receipt.tx.tx_hash}")
    print(f"  ✅ Confirmed (gas: {receipt.tx.gas_used})")
    print()
    print("⏳ Agent will send XRP to your XRPL address shortly (usually < 5 min)")
    print(f"  Monitor: flare-fassets status --xrpl-address {args.xrpl_address}")
    print(f"  Explorer: {profile.explorer_tx_url(receipt.tx.tx_hash)}")
    print(f"  FXRP redeemed:  {format_units(receipt.amount, decimals)}")
    print(f"  FXRP remaining: {format_units(receipt.remaining, decimals)}")


async def cmd_status(args, profile, service):
    status = await service.status(args.xrpl_address, args.address)
    print(heading("📊 XRPL Account Status"))
    print(f"  Address: {status.address}")
    print(f"  Balance: {status.balance_xrp} XRP")
    if status.activated:
        print("  Status:  ✅ Active")
    else:
        print("  Status:  ⚠️ Not activated (needs ≥1 XRP)")

    if status.transactions:
        print()
        print("  Recent Transactions:")
        for tx in status.transactions:
            direction = "📤 OUT" if tx.is_outgoing else "📥 IN"
            amount = f"{tx.amount_xrp} XRP" if tx.amount_xrp is not None else "token"
            print(f"    {direction} {amount} | {tx.tx_type} | {'✅' if tx.validated else '⏳'}")

    if status.fasset_balance is not None:
        decimals = service.fasset.decimals()
        print(f"\n  Flare FXRP: {format_units(status.fasset_balance, decimals)}")


COMMANDS = {
    "info": cmd_info,
    "agents": cmd_agents,
    "mint": cmd_mint,
    "redeem": cmd_redeem,
    "status": cmd_status,
}


async def _main(argv):
    args = build_parser().parse_args(argv)
    profile = load_profile(args)
    service = FAssetsService(connect(profile), profile)
    await COMMANDS[args.command](args, profile, service)


def main(argv=None) -> int:
    return run(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
