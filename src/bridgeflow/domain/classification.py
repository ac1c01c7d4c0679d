from __future__ import annotations

import logging
from typing import Iterable

from bridgeflow.domain.decoding import decode_bridge_executed, destination_chain_id
from bridgeflow.domain.errors import DecodeError
from bridgeflow.domain.models import EventLog, TransferRecord
from bridgeflow.domain.value_types import Direction

logger = logging.getLogger(__name__)


def classify(log: EventLog, target_chain_id: int, direction: Direction) -> TransferRecord | None:
    """
    Turn one raw BridgeExecuted log into a TransferRecord, or None to skip it.

    inflow  keeps transfers whose destination is the target chain (isDeposit=True).
    outflow keeps transfers whose destination is any other known chain (isDeposit=False).
    A destination that cannot be decoded never matches either direction.
    """
    try:
        ev = decode_bridge_executed(log)
    except DecodeError as e:
        logger.debug("skip %s#%d: %s", log.tx_hash, log.log_index, e)
        return None

    dest = destination_chain_id(ev.ext_data)
    if dest is None:
        logger.debug("skip %s#%d: no destination in extData", log.tx_hash, log.log_index)
        return None

    to_target = dest == target_chain_id
    if direction == "inflow":
        if not to_target:
            return None
    elif direction == "outflow":
        if to_target:
            return None
    else:
        raise ValueError(f"unknown direction: {direction!r}")

    return TransferRecord(
        tx_hash=log.tx_hash,
        block_number=log.block_number,
        log_index=log.log_index,
        from_addr=ev.sender,
        to_addr=ev.recipient,
        token=ev.input_token,
        amount=ev.input_amount,
        is_deposit=direction == "inflow",
    )


def classify_all(logs: Iterable[EventLog], target_chain_id: int, direction: Direction) -> list[TransferRecord]:
    out: list[TransferRecord] = []
    for log in logs:
        rec = classify(log, target_chain_id, direction)
        if rec is not None:
            out.append(rec)
    return out
