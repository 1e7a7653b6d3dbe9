"""
Shared plumbing for the flarekit command-line tools.

Every tool is an async main taking argv, wrapped by run() which maps the
outcome to an exit code: 0 on success, 1 on any error with the message on
stderr, 130 on Ctrl-C.
"""

import argparse
import asyncio
import logging
import sys
from decimal import Decimal, localcontext
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from ..amm.quoting import NAIVE_QUOTE_WARNING, Quote, fee_to_percent, format_units, parse_units
from ..chain.client import ChainClient
from ..chain.errors import FlareKitError, UsageError
from ..config import ConfigError, NetworkProfile, TokenInfo, get_config

logger = logging.getLogger(__name__)

BOX_WIDTH = 45
RULE = "═" * 31


class CommandParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit 1 instead of 2."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, f"✗ Error: {message}\n")


def new_parser(prog: str, description: str, epilog: Optional[str] = None) -> CommandParser:
    parser = CommandParser(
        prog=prog,
        description=description,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    parser.add_argument(
        "--network", default=None, help="Network name or alias (default: DEFAULT_NETWORK)"
    )
    return parser


def print_error(error: BaseException) -> None:
    print(f"✗ Error: {error}", file=sys.stderr)


def run(main: Callable[[List[str]], Awaitable[None]], argv: Optional[Sequence[str]] = None) -> int:
    """
    Run an async command main and return its process exit code.

    Args:
        main: Coroutine function taking the argument list
        argv: Arguments, sys.argv[1:] when None
    """
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        asyncio.run(main(args))
    except SystemExit as e:
        if e.code is None:
            return 0
        return e.code if isinstance(e.code, int) else 1
    except KeyboardInterrupt:
        logger.info("⏹️  Interrupted by user")
        return 130
    except (FlareKitError, ConfigError) as e:
        print_error(e)
        return 1
    except Exception as e:
        logger.debug("Unexpected error", exc_info=True)
        print_error(e)
        return 1
    return 0


# ── Context ─────────────────────────────────────────────────────────────────


def load_profile(args: argparse.Namespace) -> NetworkProfile:
    return get_config().network_profile(getattr(args, "network", None))


def connect(profile: NetworkProfile) -> ChainClient:
    return ChainClient.from_profile(profile)


def wallet_address(args: argparse.Namespace, profile: NetworkProfile) -> str:
    """--address, falling back to AGENT_WALLET."""
    address = getattr(args, "address", None) or profile.wallet.AGENT_WALLET
    if not address:
        raise UsageError("--address required (or set AGENT_WALLET)")
    return address


def resolve_tokens(profile: NetworkProfile, *symbols: str) -> List[TokenInfo]:
    return [profile.tokens.resolve_token(s) for s in symbols]


def parse_amount(text: str, decimals: int) -> int:
    return parse_units(text, decimals)


def parse_csv(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [item.strip() for item in text.split(",") if item.strip()]


def parse_fee_list(text: Optional[str]) -> List[int]:
    try:
        return [int(f) for f in parse_csv(text)]
    except ValueError as e:
        raise UsageError(f"--fees must be comma-separated integers: {text}") from e


# ── Formatting ──────────────────────────────────────────────────────────────


def short_address(address: str) -> str:
    """0x1234ab...abcdef"""
    if not address or len(address) <= 16:
        return address
    return f"{address[:8]}...{address[-6:]}"


def box(title: str, rows: Sequence[Tuple[str, str]], width: int = BOX_WIDTH) -> str:
    """
    Render a titled box of label/value rows.

    ┌─────┐
    │ title │
    ├─────┤
    │  Label:  value │
    └─────┘
    """
    lines = [f"  {(label + ':').ljust(10)} {value}" for label, value in rows]
    inner = max([width, len(title) + 4, *[len(line) + 1 for line in lines]])

    out = ["┌" + "─" * inner + "┐", "│" + title.center(inner) + "│", "├" + "─" * inner + "┤"]
    out += ["│" + line.ljust(inner) + "│" for line in lines]
    out.append("└" + "─" * inner + "┘")
    return "\n".join(out)


def heading(title: str) -> str:
    return f"{title}\n{RULE}"


def tx_line(profile: NetworkProfile, tx_hash: str) -> str:
    return f"  Explorer: {profile.explorer_tx_url(tx_hash)}"


def exchange_rate(amount_in: int, decimals_in: int, amount_out: int, decimals_out: int) -> str:
    if amount_in == 0:
        return "n/a"
    with localcontext() as ctx:
        ctx.prec = 50
        rate = Decimal(amount_out).scaleb(-decimals_out) / Decimal(amount_in).scaleb(-decimals_in)
    return f"{rate:.6f}"


def quote_box(title: str, token_in: TokenInfo, token_out: TokenInfo, quote: Quote,
              decimals_in: int, decimals_out: int, fee_places: int = 2) -> str:
    """Box for a single quote: From/To/Rate/Fee/Gas est."""
    rate = exchange_rate(quote.amount_in, decimals_in, quote.amount_out, decimals_out)
    rows = [
        ("From", f"{format_units(quote.amount_in, decimals_in)} {token_in.symbol}"),
        ("To", f"{format_units(quote.amount_out, decimals_out)} {token_out.symbol}"),
        ("Rate", f"1 {token_in.symbol} = {rate} {token_out.symbol}"),
    ]
    if quote.fee is not None:
        rows.append(("Fee", fee_to_percent(quote.fee, fee_places)))
    if quote.gas_estimate:
        rows.append(("Gas est", str(quote.gas_estimate)))
    if quote.ticks_crossed:
        rows.append(("Ticks", str(quote.ticks_crossed)))
    text = box(title, rows)
    if quote.is_naive_fallback:
        text += f"\n⚠️  ESTIMATE ONLY: {NAIVE_QUOTE_WARNING}"
    elif quote.warning:
        text += f"\n⚠️  {quote.warning}"
    return text
