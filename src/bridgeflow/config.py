from __future__ import annotations

import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from bridgeflow.domain.errors import ConfigError
from bridgeflow.domain.value_types import Address, Direction, Network

ORBITER_CONTRACT = Address("0xe530d28960d48708CcF3e62Aa7B42A80bC427Aef")
ENI_CHAIN_ID = 173
ENI_NETWORK = Network("eni")

SOURCE_NETWORKS: tuple[Network, ...] = tuple(Network(n) for n in (
    "ethereum", "bsc", "polygon", "arbitrum", "optimism", "base",
))

# Conservative per-chain eth_getLogs windows (blocks per request)
CHUNK_SIZES: Mapping[str, int] = MappingProxyType({
    "bsc":      400,
    "polygon":  1_500,
    "arbitrum": 4_000,
    "optimism": 4_000,
    "base":     4_000,
})
DEFAULT_CHUNK_SIZE = 3_000   # ethereum, eni & others
MIN_SHRINK_SPAN = 50

RPC_ENV_PREFIX = "BRIDGEFLOW_RPC_"


@dataclass(slots=True, frozen=True)
class BridgeConfig:
    contract: Address = ORBITER_CONTRACT
    target_chain_id: int = ENI_CHAIN_ID
    target_network: Network = ENI_NETWORK
    source_networks: tuple[Network, ...] = SOURCE_NETWORKS
    chunk_sizes: Mapping[str, int] = field(default_factory=lambda: CHUNK_SIZES)
    default_chunk_size: int = DEFAULT_CHUNK_SIZE
    min_shrink_span: int = MIN_SHRINK_SPAN

    def __post_init__(self) -> None:
        if not isinstance(self.chunk_sizes, MappingProxyType):
            object.__setattr__(self, "chunk_sizes", MappingProxyType(dict(self.chunk_sizes)))
        bad = {k: v for k, v in self.chunk_sizes.items() if v <= 0}
        if bad:
            raise ConfigError(f"chunk sizes must be positive: {bad}")
        if self.default_chunk_size <= 0:
            raise ConfigError(f"default_chunk_size must be positive, got {self.default_chunk_size}")
        # a 2-block window cannot be halved any further
        if self.min_shrink_span < 2:
            raise ConfigError(f"min_shrink_span must be >= 2 so a failing window always shrinks or stops, got {self.min_shrink_span}")
        if self.target_network in self.source_networks:
            raise ConfigError(f"target network {self.target_network!r} cannot also be a source network")

    def chunk_size_for(self, network: str) -> int:
        return self.chunk_sizes.get(network, self.default_chunk_size)

    def direction_for(self, network: str) -> Direction:
        return "outflow" if network == self.target_network else "inflow"

    @property
    def networks(self) -> tuple[Network, ...]:
        return (*self.source_networks, self.target_network)


def rpc_env_var(network: str) -> str:
    return RPC_ENV_PREFIX + network.upper().replace("-", "_")


def load_rpc_endpoints(networks: tuple[str, ...], environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Map network -> RPC url from BRIDGEFLOW_RPC_<NETWORK>; unset networks are left out."""
    env = os.environ if environ is None else environ
    out: dict[str, str] = {}
    for n in networks:
        url = env.get(rpc_env_var(n), "").strip()
        if url:
            out[n] = url
    return out
