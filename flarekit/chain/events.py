"""
Typed event log decoding.

Logs are decoded against a declared event ABI entry: indexed arguments
come from the topics, the rest from the data field. Nothing is read by
fixed byte offset.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from eth_abi import decode
from eth_utils import keccak, to_checksum_address
from hexbytes import HexBytes

from .errors import ContractError

logger = logging.getLogger(__name__)


def _canonical_type(param: Dict[str, Any]) -> str:
    abi_type = param["type"]
    if abi_type.startswith("tuple"):
        inner = ",".join(_canonical_type(c) for c in param["components"])
        return f"({inner}){abi_type[len('tuple'):]}"
    return abi_type


def _is_dynamic(abi_type: str) -> bool:
    return abi_type in ("string", "bytes") or abi_type.endswith("]") or abi_type.startswith("(")


def event_signature(event_abi: Dict[str, Any]) -> str:
    types = ",".join(_canonical_type(i) for i in event_abi["inputs"])
    return f"{event_abi['name']}({types})"


def event_topic(event_abi: Dict[str, Any]) -> str:
    """Hex topic0 for an event ABI entry."""
    return "0x" + keccak(text=event_signature(event_abi)).hex()


def _topic_hex(topic: Any) -> str:
    return "0x" + bytes(HexBytes(topic)).hex()


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type.startswith("bytes") and isinstance(value, bytes):
        return HexBytes(value)
    return value


def decode_event(event_abi: Dict[str, Any], log: Dict[str, Any]) -> Dict[str, Any]:
    """
    Decode a raw log into a dict of named arguments.

    Args:
        event_abi: Event entry from a contract ABI
        log: Receipt log with "topics" and "data"

    Returns:
        Mapping of argument name to decoded value. Indexed dynamic values
        (strings, bytes, arrays) are only available as their topic hash.

    Raises:
        ContractError: If the log is not an instance of this event
    """
    topics = [HexBytes(t) for t in log.get("topics", [])]
    expected = event_topic(event_abi)
    if not topics or _topic_hex(topics[0]) != expected:
        raise ContractError(f"Log is not a {event_abi['name']} event")

    inputs = event_abi["inputs"]
    indexed = [i for i in inputs if i.get("indexed")]
    non_indexed = [i for i in inputs if not i.get("indexed")]

    if len(topics) - 1 != len(indexed):
        raise ContractError(
            f"{event_abi['name']} expects {len(indexed)} indexed topics, got {len(topics) - 1}"
        )

    args: Dict[str, Any] = {}
    for param, topic in zip(indexed, topics[1:]):
        abi_type = _canonical_type(param)
        if _is_dynamic(abi_type):
            args[param["name"]] = topic
        else:
            args[param["name"]] = _normalize(abi_type, decode([abi_type], bytes(topic))[0])

    data = HexBytes(log.get("data", b""))
    types = [_canonical_type(p) for p in non_indexed]
    try:
        values = decode(types, bytes(data)) if types else ()
    except Exception as e:
        raise ContractError(f"Failed to decode {event_abi['name']} data: {e}") from e

    for param, abi_type, value in zip(non_indexed, types, values):
        args[param["name"]] = _normalize(abi_type, value)

    return args


def find_event(
    logs: Iterable[Dict[str, Any]],
    event_abi: Dict[str, Any],
    address: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """
    Decode the first log matching an event, optionally filtered by emitter.

    Returns:
        Decoded arguments, or None if no log matches
    """
    matches = find_events(logs, event_abi, address)
    return matches[0] if matches else None


def find_events(
    logs: Iterable[Dict[str, Any]],
    event_abi: Dict[str, Any],
    address: Optional[str] = None,
) -> List[Dict[str, Any]]:
    topic = event_topic(event_abi)
    wanted = address.lower() if address else None
    decoded = []
    for log in logs:
        topics = log.get("topics") or []
        if not topics or _topic_hex(topics[0]) != topic:
            continue
        if wanted and str(log.get("address", "")).lower() != wanted:
            continue
        decoded.append(decode_event(event_abi, log))
    return decoded


def get_event_abi(abi: List[Dict[str, Any]], name: str) -> Dict[str, Any]:
    """Pick an event entry out of a full contract ABI."""
    for entry in abi:
        if entry.get("type") == "event" and entry.get("name") == name:
            return entry
    raise ContractError(f"Event {name} not in ABI")
