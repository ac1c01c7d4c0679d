from __future__ import annotations
import asyncio, logging, httpx
from typing import Any, Mapping, Sequence
from ..domain.errors import ConfigError, RpcError
from ..domain.models import EventLog
from ..domain.value_types import Address, Topic0
from ..ports.rpc import LogSource

logger = logging.getLogger(__name__)

def _to_hex_block(n: int) -> str: return hex(int(n))
def _is_topic_hash(x: str) -> bool: return isinstance(x, str) and x.startswith("0x") and len(x)==66
def _normalize_topic0_list(t0s: Sequence[Topic0]) -> list[str]:
    return [str(t).strip().lower() for t in t0s]

def _build_topics_param(topic0s: Sequence[Topic0]) -> list[list[str]]:
    t0s = _normalize_topic0_list(topic0s)
    if not all(_is_topic_hash(x) for x in t0s):
        raise ValueError(f"Invalid topic0(s): {t0s}")
    return [t0s]

def _as_int(v: Any) -> int:
    return int(v, 16) if isinstance(v, str) else int(v)

def _to_event_log(rl: dict[str, Any]) -> EventLog:
    return EventLog(
        address=Address(rl["address"].lower()),
        topics=tuple(Topic0(t.lower()) for t in rl.get("topics", [])),
        data_hex=str(rl.get("data") or "0x"),
        block_number=_as_int(rl["blockNumber"]),
        tx_hash=rl["transactionHash"].lower(),
        log_index=_as_int(rl.get("logIndex", 0)),
    )

class HttpxLogSource(LogSource):
    """JSON-RPC log source with one endpoint per network."""

    def __init__(
        self,
        endpoints: Mapping[str, str],
        timeout_s: int = 20,
        max_conn: int = 16,
        *,
        max_429_retries: int = 3,
        backoff_s: float = 1.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoints = dict(endpoints)
        self.max_429_retries = max_429_retries
        self.backoff_s = backoff_s
        self.client = httpx.AsyncClient(
            http2=transport is None,
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=max_conn, max_keepalive_connections=max(1, max_conn//2)),
            transport=transport,
        )

    def _url(self, network: str) -> str:
        try:
            return self.endpoints[network]
        except KeyError:
            raise ConfigError(f"no RPC endpoint configured for network {network!r}") from None

    async def _call(self, network: str, method: str, params: list[Any]) -> Any:
        url = self._url(network)
        payload = {"jsonrpc":"2.0","id":1,"method":method,"params":params}
        # retry on 429 with simple backoff; everything else is the caller's problem
        for attempt in range(self.max_429_retries):
            r = await self.client.post(url, json=payload)
            if r.status_code == 429:
                ra = r.headers.get("Retry-After")
                delay = max(self.backoff_s, float(ra)) if ra and ra.isdigit() else (self.backoff_s * (2**attempt))
                logger.warning("%s %s rate limited, sleeping %.1fs", network, method, delay)
                await asyncio.sleep(delay); continue
            r.raise_for_status()
            data = r.json()
            if "error" in data:
                err = data["error"]
                if isinstance(err, dict):
                    raise RpcError(str(err.get("message")), err.get("code"))
                raise RpcError(str(err))
            return data.get("result")
        raise RpcError(f"Retries exhausted for {method}", 429)

    async def latest_block(self, network: str) -> int:
        return int(await self._call(network, "eth_blockNumber", []), 16)

    async def get_logs(self, network: str, address: Address, topic0s: Sequence[Topic0],
                       from_block: int, to_block: int) -> list[EventLog]:
        res = await self._call(network, "eth_getLogs", [{
            "address": str(address),
            "fromBlock": _to_hex_block(from_block),
            "toBlock": _to_hex_block(to_block),
            "topics": _build_topics_param(topic0s),
        }])
        return [_to_event_log(rl) for rl in (res or [])]

    async def aclose(self) -> None:
        await self.client.aclose()

    async def __aenter__(self) -> HttpxLogSource:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
