# bridgeflow/ports/rpc.py
from __future__ import annotations

from typing import Protocol, Sequence
from ..domain.models import EventLog
from ..domain.value_types import Address, Topic0


class LogSource(Protocol):
    """Port for a multi-chain eth_getLogs provider."""

    async def get_logs(
        self,
        network: str,
        address: Address,
        topic0s: Sequence[Topic0],
        from_block: int,
        to_block: int,
    ) -> list[EventLog]:
        """Return logs of `address` on `network` for [from_block, to_block] inclusive, in chain order."""

    async def latest_block(self, network: str) -> int:
        """Return the latest block number of `network`."""
