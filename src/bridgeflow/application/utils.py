from datetime import datetime, timezone


def _now_ts_str() -> str:
    return datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _parse_end_block(value: int | str) -> int | None:
    """int or decimal string -> int; 'latest' -> None (resolve through the RPC)."""
    if isinstance(value, str):
        v = value.strip().lower()
        if v == "latest":
            return None
        return int(v, 16) if v.startswith("0x") else int(v)
    return int(value)
