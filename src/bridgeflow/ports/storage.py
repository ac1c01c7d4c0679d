# bridgeflow/ports/storage.py
from __future__ import annotations

from typing import Iterable, Protocol
from ..domain.models import ChunkRec, TransferRecord


class TransferSink(Protocol):
    """Port for persisting classified transfers (e.g., Parquet)."""

    async def write(self, records: Iterable[TransferRecord]) -> None:
        """Persist the records of one scan, preserving their order."""


class ManifestSink(Protocol):
    """Port for appending chunk attempt records (e.g., JSONL manifest)."""

    async def append(self, rec: ChunkRec) -> None:
        """Append a manifest record atomically (callers handle ordering/locking)."""
