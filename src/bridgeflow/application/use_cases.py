from __future__ import annotations

import asyncio
import logging
import os
from typing import Awaitable, Callable

from bridgeflow.adapters.manifest_jsonl import JSONLManifest
from bridgeflow.adapters.parquet_sink import ParquetTransferSink
from bridgeflow.application.utils import _now_ts_str, _parse_end_block
from ..config import BridgeConfig
from ..domain.classification import classify_all
from ..domain.models import TransferRecord
from ..domain.value_types import Direction
from ..ports.rpc import LogSource
from ..ports.storage import ManifestSink
from .scanner import scan_logs

logger = logging.getLogger(__name__)

TransferFetcher = Callable[[int, int], Awaitable[list[TransferRecord]]]


async def _scan_and_classify(
    *,
    source: LogSource,
    network: str,
    from_block: int,
    to_block: int,
    direction: Direction,
    config: BridgeConfig,
    manifest: ManifestSink | None,
    cancel: asyncio.Event | None,
) -> tuple[int, list[TransferRecord]]:
    """Return (raw log count, classified transfers)."""
    logs = await scan_logs(
        source=source, network=network, from_block=from_block, to_block=to_block,
        config=config, manifest=manifest, cancel=cancel,
    )
    records = classify_all(logs, config.target_chain_id, direction)
    logger.info("%s [%d, %d] %s: %d logs -> %d transfers",
                network, from_block, to_block, direction, len(logs), len(records))
    return len(logs), records


async def scan_transfers(
    *,
    source: LogSource,
    network: str,
    from_block: int,
    to_block: int,
    direction: Direction,
    config: BridgeConfig,
    manifest: ManifestSink | None = None,
    cancel: asyncio.Event | None = None,
) -> list[TransferRecord]:
    _, records = await _scan_and_classify(
        source=source, network=network, from_block=from_block, to_block=to_block,
        direction=direction, config=config, manifest=manifest, cancel=cancel,
    )
    return records


def inflow_adapter(source: LogSource, network: str, config: BridgeConfig) -> TransferFetcher:
    """Source chain -> target chain deposits found on `network`."""
    async def fetch(from_block: int, to_block: int) -> list[TransferRecord]:
        return await scan_transfers(
            source=source, network=network, from_block=from_block, to_block=to_block,
            direction="inflow", config=config,
        )
    return fetch


def outflow_adapter(source: LogSource, config: BridgeConfig) -> TransferFetcher:
    """Target chain -> any other chain withdrawals, found on the target chain itself."""
    async def fetch(from_block: int, to_block: int) -> list[TransferRecord]:
        return await scan_transfers(
            source=source, network=config.target_network, from_block=from_block, to_block=to_block,
            direction="outflow", config=config,
        )
    return fetch


def build_bridge_adapter(source: LogSource, config: BridgeConfig) -> dict[str, TransferFetcher]:
    adapter: dict[str, TransferFetcher] = {n: inflow_adapter(source, n, config) for n in config.source_networks}
    adapter[config.target_network] = outflow_adapter(source, config)
    return adapter


async def scan_to_parquet(
    *,
    source: LogSource,
    network: str,
    start_block: int | str,
    end_block: int | str,        # supports 'latest'
    out_path: str,
    config: BridgeConfig,
    direction: Direction | None = None,
    manifest_dir: str | None = None,
) -> dict[str, int]:
    """
    Scan one network, classify, and write the transfers to a Parquet file.
    When `manifest_dir` is set, every chunk attempt goes to a NEW per-run JSONL manifest.
    """
    s_block = int(start_block)
    e_block = _parse_end_block(end_block)
    if e_block is None:
        e_block = await source.latest_block(network)
    if s_block > e_block:
        raise ValueError(f"start_block ({s_block}) must be <= end_block ({e_block})")

    manifest: ManifestSink | None = None
    if manifest_dir:
        run_basename = f"run_{_now_ts_str()}_{network}_{s_block}_{e_block}.jsonl"
        manifest = JSONLManifest(os.path.join(manifest_dir, run_basename))

    logs_cnt, records = await _scan_and_classify(
        source=source, network=network, from_block=s_block, to_block=e_block,
        direction=direction or config.direction_for(network),
        config=config, manifest=manifest, cancel=None,
    )

    sink = ParquetTransferSink(out_path, network=network)
    await sink.write(records)

    return {
        "from_block": s_block,
        "to_block": e_block,
        "logs": logs_cnt,
        "records": len(records),
    }
