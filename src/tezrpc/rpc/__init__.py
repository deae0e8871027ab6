"""
RPC layer: request execution, error classification and endpoint wrappers
for a single Tezos node.

Uses httpx for HTTP and structlog for request logging.
"""
