#!/usr/bin/env python3
"""
Wallet operations on Flare.

Usage:
    flare-wallet balance [--address 0x...] [--all]
    flare-wallet networks
    flare-wallet allowance --token FXRP --spender 0x... [--address 0x...]
    flare-wallet approve --token FXRP --spender 0x... [--amount 100]
    flare-wallet send --amount 10 --to 0x... [--token FXRP]
    flare-wallet wrap --amount 100
    flare-wallet unwrap --amount 100
    flare-wallet gas
    flare-wallet info --token 0x...|SYMBOL
    flare-wallet generate [--output ./keystore.json]
"""

import sys
from functools import partial

from web3 import Web3

from ..amm.quoting import format_units
from ..chain.client import MAX_UINT256
from ..chain.errors import InsufficientFundsError, ValidationError
from ..config import get_config
from ..contracts.erc20 import Erc20Token, WrappedNative
from ..credentials import create_keystore, load_signer, resolve_password
from .common import connect, heading, load_profile, new_parser, parse_amount, run, wallet_address

NATIVE_DECIMALS = 18
GWEI_DECIMALS = 9


def build_parser():
    parser = new_parser("flare-wallet", "Wallet operations on Flare")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("balance", help="Native and token balances")
    p.add_argument("--address")
    p.add_argument("--all", action="store_true", help="Include zero balances")

    sub.add_parser("networks", help="List supported networks")

    p = sub.add_parser("allowance", help="Check an allowance")
    p.add_argument("--token", required=True)
    p.add_argument("--spender", required=True)
    p.add_argument("--address")

    p = sub.add_parser("approve", help="Approve a spender")
    p.add_argument("--token", required=True)
    p.add_argument("--spender", required=True)
    p.add_argument("--amount", help="Amount to approve (default: unlimited)")
    p.add_argument("--keystore")

    p = sub.add_parser("send", help="Send native FLR or a token")
    p.add_argument("--amount", required=True)
    p.add_argument("--to", required=True)
    p.add_argument("--token", help="Token symbol or address (default: native)")
    p.add_argument("--keystore")

    for name, help_text in (("wrap", "Wrap FLR to WFLR"), ("unwrap", "Unwrap WFLR to FLR")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--amount", required=True)
        p.add_argument("--keystore")

    sub.add_parser("gas", help="Current gas price")

    p = sub.add_parser("info", help="Token lookup")
    p.add_argument("--token", required=True)

    p = sub.add_parser("generate", help="Generate a new encrypted keystore")
    p.add_argument("--output", help="Keystore path (default: AGENT_KEYSTORE)")
    return parser


def _require_address(address: str) -> str:
    if not Web3.is_address(address):
        raise ValidationError(f"Invalid address: {address}")
    return Web3.to_checksum_address(address)


async def cmd_balance(args, profile, client):
    address = _require_address(wallet_address(args, profile))
    tokens = list(profile.tokens.tokens.values())
    results = await client.gather(
        partial(client.native_balance, address),
        *[partial(Erc20Token(client, t.address).balance_of, address) for t in tokens],
    )
    native, balances = results[0], results[1:]

    print(heading(f"📊 Wallet {address}"))
    print(f"\n🔥 {profile.name.upper()} (Chain {profile.chain_id})")
    print(f"   {profile.native_symbol:<8} {format_units(native, NATIVE_DECIMALS)}")
    shown = 0
    for token, balance in zip(tokens, balances):
        if balance or args.all:
            print(f"   {token.symbol:<8} {format_units(balance, token.decimals)}")
            shown += 1
    if not shown:
        print("   (no token balances)")
    print()


async def cmd_networks(args, profile, client):
    print("\n🌐 Supported Networks:\n")
    for net in get_config().networks.list_networks():
        print(f"{net['key']:<10} {net['name']:<10} Chain {net['chain_id']}")
        print(f"           Native: {net['native_symbol']}")
        print(f"           RPC: {net['rpc_url']}")
        print(f"           Explorer: {net['explorer_url']}")
        print()


async def cmd_allowance(args, profile, client):
    token = profile.tokens.resolve_token(args.token)
    owner = _require_address(wallet_address(args, profile))
    spender = _require_address(args.spender)
    erc20 = Erc20Token(client, token.address)
    allowance, decimals = await client.gather(
        partial(erc20.allowance, owner, spender), erc20.decimals
    )
    text = "unlimited" if allowance >= MAX_UINT256 // 2 else format_units(allowance, decimals)
    print(f"\n  {token.symbol} allowance")
    print(f"  Owner:     {owner}")
    print(f"  Spender:   {spender}")
    print(f"  Allowance: {text}\n")


async def cmd_approve(args, profile, client):
    token = profile.tokens.resolve_token(args.token)
    spender = _require_address(args.spender)
    erc20 = Erc20Token(client, token.address)
    amount = MAX_UINT256
    if args.amount is not None:
        amount = parse_amount(args.amount, token.decimals if token.is_known else erc20.decimals())

    signer = load_signer(args.keystore, profile.wallet)
    label = "unlimited" if amount == MAX_UINT256 else args.amount
    print(f"\nApproving {spender} to spend {label} {token.symbol}...")
    tx = erc20.approve(signer, spender, amount)
    print(f"  Tx: {tx.tx_hash}")
    print(f"  ✓ Approved in block {tx.block_number}\n")


async def cmd_send(args, profile, client):
    to = _require_address(args.to)
    native = args.token is None or args.token.upper() == profile.native_symbol.upper()
    signer = load_signer(args.keystore, profile.wallet)

    if native:
        amount = parse_amount(args.amount, NATIVE_DECIMALS)
        balance = client.native_balance(signer.address)
        if balance < amount:
            raise InsufficientFundsError(
                f"Insufficient {profile.native_symbol}. Need {args.amount}, "
                f"have {format_units(balance, NATIVE_DECIMALS)}"
            )
        print(f"\nSending {args.amount} {profile.native_symbol} to {to}...")
        tx = client.send_native(signer, to, amount)
    else:
        token = profile.tokens.resolve_token(args.token)
        erc20 = Erc20Token(client, token.address)
        decimals = token.decimals if token.is_known else erc20.decimals()
        amount = parse_amount(args.amount, decimals)
        balance = erc20.balance_of(signer.address)
        if balance < amount:
            raise InsufficientFundsError(
                f"Insufficient {token.symbol}. Need {args.amount}, have {format_units(balance, decimals)}"
            )
        print(f"\nSending {args.amount} {token.symbol} to {to}...")
        tx = erc20.transfer(signer, to, amount)

    print(f"  Tx: {tx.tx_hash}")
    print(f"  ✓ Confirmed in block {tx.block_number}")
    print(f"  Explorer: {profile.explorer_tx_url(tx.tx_hash)}\n")


async def cmd_wrap(args, profile, client):
    amount = parse_amount(args.amount, NATIVE_DECIMALS)
    wrapped = WrappedNative(client, profile.wrapped_native)
    signer = load_signer(args.keystore, profile.wallet)

    if args.command == "wrap":
        balance = client.native_balance(signer.address)
        if balance < amount:
            raise InsufficientFundsError(
                f"Insufficient {profile.native_symbol}. Need {args.amount}, "
                f"have {format_units(balance, NATIVE_DECIMALS)}"
            )
        print(f"\nWrapping {args.amount} {profile.native_symbol}...")
        tx = wrapped.deposit(signer, amount)
    else:
        balance = wrapped.balance_of(signer.address)
        if balance < amount:
            raise InsufficientFundsError(
                f"Insufficient W{profile.native_symbol}. Need {args.amount}, "
                f"have {format_units(balance, NATIVE_DECIMALS)}"
            )
        print(f"\nUnwrapping {args.amount} W{profile.native_symbol}...")
        tx = wrapped.withdraw(signer, amount)

    print(f"  Tx: {tx.tx_hash}")
    print(f"  ✓ Confirmed in block {tx.block_number}\n")


async def cmd_gas(args, profile, client):
    gas_price, block = await client.gather(client.gas_price, client.block_number)
    print(f"\n⛽ {profile.name} gas")
    print(f"  Gas price: {format_units(gas_price, GWEI_DECIMALS, places=2)} gwei")
    print(f"  Block:     {block}")
    print(f"  Transfer:  {format_units(gas_price * 21000, NATIVE_DECIMALS)} {profile.native_symbol} (21000 gas)\n")


async def cmd_info(args, profile, client):
    token = profile.tokens.resolve_token(args.token)
    erc20 = Erc20Token(client, token.address)
    name, symbol, decimals, supply = await client.gather(
        erc20.name, erc20.symbol, erc20.decimals, erc20.total_supply
    )
    print(f"\n  Token:    {name} ({symbol})")
    print(f"  Address:  {token.address}")
    print(f"  Decimals: {decimals}")
    print(f"  Supply:   {format_units(supply, decimals)}\n")


async def cmd_generate(args, profile, client):
    path = args.output or profile.wallet.AGENT_KEYSTORE
    password = resolve_password(path, profile.wallet)
    account = create_keystore(path, password)
    print("\n🔑 Flare Wallet Generated")
    print(f"  Address:  {account.address}")
    print(f"  Keystore: {path} (chmod 600)")
    print("\n⚠️  Back up the keystore and its password; neither can be recovered.\n")


COMMANDS = {
    "balance": cmd_balance,
    "networks": cmd_networks,
    "allowance": cmd_allowance,
    "approve": cmd_approve,
    "send": cmd_send,
    "wrap": cmd_wrap,
    "unwrap": cmd_wrap,
    "gas": cmd_gas,
    "info": cmd_info,
    "generate": cmd_generate,
}


async def _main(argv):
    args = build_parser().parse_args(argv)
    profile = load_profile(args)
    await COMMANDS[args.command](args, profile, connect(profile))


def main(argv=None) -> int:
    return run(_main, argv)


if __name__ == "__main__":
    sys.exit(main())
