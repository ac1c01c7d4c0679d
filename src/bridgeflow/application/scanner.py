from __future__ import annotations

import asyncio
import logging
import time

from ..config import BridgeConfig
from ..domain.decoding import BRIDGE_EXECUTED_T0
from ..domain.errors import FetchError, ScanCancelled
from ..domain.models import BlockRange, ChunkRec, EventLog
from ..domain.value_types import Status
from ..ports.rpc import LogSource
from ..ports.storage import ManifestSink
from .planning import plan_chunks, shrink_end

logger = logging.getLogger(__name__)


async def scan_logs(
    *,
    source: LogSource,
    network: str,
    from_block: int,
    to_block: int,
    config: BridgeConfig,
    manifest: ManifestSink | None = None,
    cancel: asyncio.Event | None = None,
) -> list[EventLog]:
    """
    Fetch every BridgeExecuted log of the configured contract on `network`
    for [from_block, to_block], in ascending chunk order.

    The range is cut into `config.chunk_size_for(network)` sized chunks. A failed
    request is retried on the first half of its window (same start block) until
    it succeeds; the rest of the planned chunk is then requested from the next
    block. A window of `config.min_shrink_span` blocks or less that still fails
    raises FetchError and nothing is returned.

    One request in flight at a time. `cancel` is checked before each request.
    """
    rng = BlockRange(from_block, to_block)

    step = config.chunk_size_for(network)
    topic0s = [BRIDGE_EXECUTED_T0]
    out: list[EventLog] = []

    for chunk in plan_chunks(rng.start, rng.end, step):
        cursor = chunk.start
        while cursor <= chunk.end:
            end = chunk.end
            attempt = 0
            while True:
                if cancel is not None and cancel.is_set():
                    raise ScanCancelled(f"scan of {network} cancelled at block {cursor}")
                attempt += 1
                try:
                    logs = await source.get_logs(network, config.contract, topic0s, cursor, end)
                except Exception as e:
                    span = end - cursor + 1
                    await _record(manifest, network, cursor, end, "failed", attempt, f"{type(e).__name__}: {e}", 0)
                    if span <= config.min_shrink_span:
                        logger.error("%s [%d, %d] failed at minimum span: %s", network, cursor, end, e)
                        raise FetchError(network, cursor, end, e) from e
                    new_end = shrink_end(cursor, end)
                    logger.warning("%s [%d, %d] failed (%s); retrying [%d, %d]", network, cursor, end, e, cursor, new_end)
                    end = new_end
                    continue
                break
            out.extend(logs)
            await _record(manifest, network, cursor, end, "done", attempt, None, len(logs))
            logger.debug("%s [%d, %d] -> %d logs", network, cursor, end, len(logs))
            cursor = end + 1

    return out


async def _record(manifest: ManifestSink | None, network: str, fb: int, tb: int,
                  status: Status, attempt: int, err: str | None, logs_cnt: int) -> None:
    if manifest is None:
        return
    await manifest.append(ChunkRec(
        network=network, from_block=fb, to_block=tb, status=status,
        attempt=attempt, error=err, logs=logs_cnt, updated_at=time.time(),
    ))
