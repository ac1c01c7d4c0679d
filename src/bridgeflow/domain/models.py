from __future__ import annotations
from dataclasses import dataclass
from typing import Any
from .value_types import Address, Topic0, Status


@dataclass(slots=True, frozen=True)
class BlockRange:
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid block range [{self.start}, {self.end}]")

    def span(self) -> int: return self.end - self.start + 1


@dataclass(slots=True, frozen=True)
class Chunk:
    start: int
    end: int
    def span(self) -> int: return self.end - self.start + 1


@dataclass(slots=True, frozen=True)
class EventLog:
    address: Address
    topics: tuple[Topic0, ...]         # lowercased with 0x
    data_hex: str                      # hex with 0x (or "0x")
    block_number: int
    tx_hash: str
    log_index: int


@dataclass(slots=True, frozen=True)
class BridgeExecuted:
    sender: str                        # checksum addresses
    recipient: str
    input_token: str
    output_token: str
    input_amount: int
    ext_data: bytes


@dataclass(slots=True, frozen=True)
class TransferRecord:
    tx_hash: str
    block_number: int
    log_index: int
    from_addr: str
    to_addr: str
    token: str
    amount: int                        # uint256, python int
    is_deposit: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "txHash": self.tx_hash,
            "blockNumber": self.block_number,
            "from": self.from_addr,
            "to": self.to_addr,
            "token": self.token,
            "amount": self.amount,
            "isDeposit": self.is_deposit,
        }


@dataclass(slots=True, frozen=True)
class ChunkRec:
    network: str
    from_block: int
    to_block: int
    status: Status
    attempt: int = 1
    error: str | None = None
    logs: int = 0
    updated_at: float = 0.0
