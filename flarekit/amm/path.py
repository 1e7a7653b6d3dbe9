"""
Packed swap path encoding for multi-hop routes.

V3 paths interleave 20-byte token addresses with 3-byte fee tiers:
    token0 | fee0 | token1 | fee1 | token2 ...

Algebra Integral paths interleave tokens with 20-byte pool deployer
addresses; the zero address selects the default (non-custom) pool:
    token0 | deployer0 | token1 | deployer1 | token2 ...
"""

from typing import List, Optional, Sequence, Tuple

from eth_utils import is_address, to_bytes, to_checksum_address

from ..chain.errors import ValidationError

ADDR_SIZE = 20
FEE_SIZE = 3
MAX_UINT24 = 2**24 - 1
DEFAULT_DEPLOYER = "0x" + "00" * ADDR_SIZE


def _address_bytes(address: str) -> bytes:
    if not is_address(address):
        raise ValidationError(f"Invalid address in path: {address}")
    return to_bytes(hexstr=address)


def encode_v3_path(tokens: Sequence[str], fees: Sequence[int]) -> bytes:
    """
    Encode a V3 multi-hop path.

    Args:
        tokens: Token addresses in swap order, at least two
        fees: Fee tier for each hop, len(tokens) - 1 entries

    Raises:
        ValidationError: On a length mismatch, bad address or out-of-range fee
    """
    if len(tokens) < 2:
        raise ValidationError("A path needs at least two tokens")
    if len(fees) != len(tokens) - 1:
        raise ValidationError(
            f"Path with {len(tokens)} tokens needs {len(tokens) - 1} fees, got {len(fees)}"
        )

    encoded = _address_bytes(tokens[0])
    for fee, token in zip(fees, tokens[1:]):
        if not 0 <= fee <= MAX_UINT24:
            raise ValidationError(f"Fee {fee} does not fit in uint24")
        encoded += fee.to_bytes(FEE_SIZE, "big") + _address_bytes(token)
    return encoded


def decode_v3_path(path: bytes) -> Tuple[List[str], List[int]]:
    """Split a V3 path back into (tokens, fees)."""
    step = ADDR_SIZE + FEE_SIZE
    if len(path) < 2 * ADDR_SIZE + FEE_SIZE or (len(path) - ADDR_SIZE) % step:
        raise ValidationError(f"Invalid V3 path length: {len(path)}")

    tokens = [to_checksum_address(path[:ADDR_SIZE])]
    fees = []
    offset = ADDR_SIZE
    while offset < len(path):
        fees.append(int.from_bytes(path[offset:offset + FEE_SIZE], "big"))
        offset += FEE_SIZE
        tokens.append(to_checksum_address(path[offset:offset + ADDR_SIZE]))
        offset += ADDR_SIZE
    return tokens, fees


def encode_algebra_path(tokens: Sequence[str], deployers: Optional[Sequence[str]] = None) -> bytes:
    """
    Encode an Algebra Integral multi-hop path.

    Args:
        tokens: Token addresses in swap order, at least two
        deployers: Pool deployer per hop; defaults to the zero address for every hop
    """
    if len(tokens) < 2:
        raise ValidationError("A path needs at least two tokens")
    if deployers is None:
        deployers = [DEFAULT_DEPLOYER] * (len(tokens) - 1)
    if len(deployers) != len(tokens) - 1:
        raise ValidationError(
            f"Path with {len(tokens)} tokens needs {len(tokens) - 1} deployers, got {len(deployers)}"
        )

    encoded = _address_bytes(tokens[0])
    for deployer, token in zip(deployers, tokens[1:]):
        encoded += _address_bytes(deployer) + _address_bytes(token)
    return encoded


def decode_algebra_path(path: bytes) -> Tuple[List[str], List[str]]:
    """Split an Algebra path back into (tokens, deployers)."""
    step = 2 * ADDR_SIZE
    if len(path) < 3 * ADDR_SIZE or (len(path) - ADDR_SIZE) % step:
        raise ValidationError(f"Invalid Algebra path length: {len(path)}")

    tokens = [to_checksum_address(path[:ADDR_SIZE])]
    deployers = []
    for offset in range(ADDR_SIZE, len(path), step):
        deployers.append(to_checksum_address(path[offset:offset + ADDR_SIZE]))
        tokens.append(to_checksum_address(path[offset + ADDR_SIZE:offset + step]))
    return tokens, deployers
