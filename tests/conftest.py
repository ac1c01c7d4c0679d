from __future__ import annotations

from typing import Callable

import pytest
from eth_abi import encode as abi_encode

from bridgeflow.config import BridgeConfig
from bridgeflow.domain.decoding import BRIDGE_EXECUTED_T0
from bridgeflow.domain.models import EventLog
from bridgeflow.domain.value_types import Address, Topic0

CONTRACT = "0xe530d28960d48708ccf3e62aa7b42a80bc427aef"
SENDER = "0x1111111111111111111111111111111111111111"
RECIPIENT = "0x2222222222222222222222222222222222222222"
INPUT_TOKEN = "0x3333333333333333333333333333333333333333"
OUTPUT_TOKEN = "0x4444444444444444444444444444444444444444"


def _addr_topic(addr: str) -> Topic0:
    return Topic0("0x" + "0" * 24 + addr[2:].lower())


def make_log(
    block_number: int,
    ext_data: bytes = b"c=173",
    *,
    amount: int = 10**18,
    log_index: int = 0,
    tx_hash: str | None = None,
    sender: str = SENDER,
    recipient: str = RECIPIENT,
) -> EventLog:
    data = abi_encode(["address", "address", "uint256", "bytes"],
                      [INPUT_TOKEN, OUTPUT_TOKEN, amount, ext_data])
    return EventLog(
        address=Address(CONTRACT),
        topics=(BRIDGE_EXECUTED_T0, _addr_topic(sender), _addr_topic(recipient)),
        data_hex="0x" + data.hex(),
        block_number=block_number,
        tx_hash=tx_hash or "0x" + f"{block_number:064x}",
        log_index=log_index,
    )


FailFn = Callable[[str, int, int], bool]


class FakeLogSource:
    """In-memory LogSource; `fail(network, fb, tb)` decides which requests raise."""

    def __init__(self, logs: dict[str, list[EventLog]] | None = None, fail: FailFn | None = None,
                 latest: int = 1_000_000) -> None:
        self.logs = logs or {}
        self.fail = fail
        self.latest = latest
        self.calls: list[tuple[str, int, int]] = []
        self.succeeded: list[tuple[str, int, int]] = []

    async def get_logs(self, network, address, topic0s, from_block, to_block):
        self.calls.append((network, from_block, to_block))
        if self.fail is not None and self.fail(network, from_block, to_block):
            raise RuntimeError(f"query returned more than 10000 results [{from_block}, {to_block}]")
        self.succeeded.append((network, from_block, to_block))
        return [l for l in self.logs.get(network, []) if from_block <= l.block_number <= to_block]

    async def latest_block(self, network):
        return self.latest


@pytest.fixture
def config() -> BridgeConfig:
    return BridgeConfig()


@pytest.fixture
def fake_source() -> FakeLogSource:
    return FakeLogSource()
