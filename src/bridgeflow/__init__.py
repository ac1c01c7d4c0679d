"""bridgeflow: chunked BridgeExecuted log scanner for bridge volume accounting."""
__version__ = "0.1.0"
