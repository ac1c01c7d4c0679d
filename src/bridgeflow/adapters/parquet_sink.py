from __future__ import annotations
import os, pyarrow as pa, pyarrow.parquet as pq
from typing import Iterable

from ..ports.storage import TransferSink
from ..domain.models import TransferRecord

TRANSFER_SCHEMA = pa.schema([
    ("network",      pa.string()),
    ("tx_hash",      pa.string()),
    ("block_number", pa.int64()),
    ("log_index",    pa.int64()),
    ("from",         pa.string()),
    ("to",           pa.string()),
    ("token",        pa.string()),
    ("amount",       pa.string()),     # uint256 as decimal string
    ("is_deposit",   pa.bool_()),
])

def records_to_table(records: Iterable[TransferRecord], network: str) -> pa.Table:
    recs = list(records)
    return pa.Table.from_arrays(
        arrays=[
            pa.array([network] * len(recs), pa.string()),
            pa.array([r.tx_hash for r in recs], pa.string()),
            pa.array([r.block_number for r in recs], pa.int64()),
            pa.array([r.log_index for r in recs], pa.int64()),
            pa.array([r.from_addr for r in recs], pa.string()),
            pa.array([r.to_addr for r in recs], pa.string()),
            pa.array([r.token for r in recs], pa.string()),
            pa.array([str(r.amount) for r in recs], pa.string()),
            pa.array([r.is_deposit for r in recs], pa.bool_()),
        ],
        schema=TRANSFER_SCHEMA,
    )

class ParquetTransferSink(TransferSink):
    def __init__(self, path: str, network: str, codec: str = "zstd") -> None:
        self.path = path
        self.network = network
        self.codec = codec
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    async def write(self, records: Iterable[TransferRecord]) -> None:
        tmp = self.path + ".tmp"
        table = records_to_table(records, self.network)
        pq.write_table(table, tmp, compression=self.codec)
        os.replace(tmp, self.path)
