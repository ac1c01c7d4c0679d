from __future__ import annotations


class BridgeFlowError(Exception):
    """Base class for every error raised by bridgeflow."""


class ConfigError(BridgeFlowError, ValueError):
    pass


class RpcError(BridgeFlowError):
    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(f"RPC error code={code} message={message}")
        self.code = code
        self.message = message


class FetchError(BridgeFlowError):
    """A sub-chunk still failed after shrinking down to the minimum span."""

    def __init__(self, network: str, from_block: int, to_block: int, cause: BaseException) -> None:
        super().__init__(
            f"eth_getLogs failed on {network} for [{from_block}, {to_block}]: "
            f"{type(cause).__name__}: {cause}"
        )
        self.network = network
        self.from_block = from_block
        self.to_block = to_block


class DecodeError(BridgeFlowError, ValueError):
    """Raw log does not match the BridgeExecuted layout."""


class ScanCancelled(BridgeFlowError):
    pass
