from __future__ import annotations

import re
from typing import Callable, Sequence

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from eth_utils import keccak, to_checksum_address

from bridgeflow.domain.errors import DecodeError
from bridgeflow.domain.models import BridgeExecuted, EventLog
from bridgeflow.domain.value_types import Topic0


# event BridgeExecuted(address indexed sender, address indexed recipient,
#                      address inputToken, address outputToken, uint256 inputAmount, bytes extData)
BRIDGE_EXECUTED_SIGNATURE = "BridgeExecuted(address,address,address,address,uint256,bytes)"
BRIDGE_EXECUTED_T0 = Topic0("0x" + keccak(text=BRIDGE_EXECUTED_SIGNATURE).hex())
_DATA_TYPES = ("address", "address", "uint256", "bytes")

# c=<digits> at the start of the payload or right after '&' / '?'
_CHAIN_ID_RE = re.compile(r"(?:^|[&?])c=([0-9]+)")


# ---------- hex helpers -------------------------------------------------------

def hex_to_bytes(s: str) -> bytes:
    h = s[2:] if s[:2].lower() == "0x" else s
    if len(h) % 2: h = "0" + h
    return bytes.fromhex(h) if h else b""

def _addr_from_topic(t: str) -> str:
    h = t[2:] if t[:2].lower() == "0x" else t
    if len(h) != 64:
        raise DecodeError(f"topic is not a 32-byte word: {t!r}")
    if h[:24].strip("0"):
        raise DecodeError(f"topic is not a left-padded address: {t!r}")
    try:
        return to_checksum_address("0x" + h[-40:])
    except ValueError as e:
        raise DecodeError(f"topic is not hex: {t!r}") from e


# ---------- event -------------------------------------------------------------

def decode_bridge_executed(log: EventLog) -> BridgeExecuted:
    """Decode a raw log as BridgeExecuted; raise DecodeError on any shape mismatch."""
    topics = [t.lower() for t in log.topics]
    if len(topics) != 3 or topics[0] != BRIDGE_EXECUTED_T0:
        raise DecodeError(f"unexpected topics for BridgeExecuted: {log.topics!r}")
    try:
        data = hex_to_bytes(log.data_hex)
        input_token, output_token, amount, ext_data = abi_decode(_DATA_TYPES, data)
    except (DecodingError, ValueError) as e:
        raise DecodeError(f"malformed BridgeExecuted data in {log.tx_hash}: {e}") from e
    return BridgeExecuted(
        sender=_addr_from_topic(topics[1]),
        recipient=_addr_from_topic(topics[2]),
        input_token=to_checksum_address(input_token),
        output_token=to_checksum_address(output_token),
        input_amount=int(amount),
        ext_data=bytes(ext_data),
    )


# ---------- routing payload ---------------------------------------------------

TextDecoder = Callable[[bytes], str]

# Tried in order; the first one that does not raise wins.
ROUTE_TEXT_DECODERS: tuple[tuple[str, TextDecoder], ...] = (
    ("utf-8",   lambda b: b.decode("utf-8")),
    ("latin-1", lambda b: b.decode("latin-1")),
)


def decode_route_text(payload: bytes, decoders: Sequence[tuple[str, TextDecoder]] = ROUTE_TEXT_DECODERS) -> str | None:
    for _name, dec in decoders:
        try:
            return dec(payload)
        except UnicodeDecodeError:
            continue
    return None


def parse_destination_chain_id(text: str) -> int | None:
    """Return the first ``c=<digits>`` value of a key=value routing string, if any."""
    m = _CHAIN_ID_RE.search(text)
    return int(m.group(1)) if m else None


def destination_chain_id(ext_data: bytes) -> int | None:
    text = decode_route_text(ext_data)
    if text is None:
        return None
    return parse_destination_chain_id(text)
