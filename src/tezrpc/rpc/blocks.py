"""
Typed wrappers for common node endpoints.

Each wrapper supplies a path (and body) to the client and decodes the bytes
it gets back. Decoding failures raise ``ResponseDecodeError`` carrying the
raw body.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from ..spec.models import Block, Constants
from ..spec.schemas import SchemaValidationError
from .errors import ResponseDecodeError
from .query import RPCOption

if TYPE_CHECKING:
    from .client import TezosClient

MAIN_CHAIN = "main"


def _decode(body: bytes, what: str) -> Any:
    try:
        return json.loads(body)
    except ValueError as exc:
        raise ResponseDecodeError(f"could not decode {what}: {exc}", body=body) from exc


def _decode_int(body: bytes, what: str) -> int:
    value = _decode(body, what)
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ResponseDecodeError(f"could not decode {what}: {exc}", body=body) from exc


def head(client: "TezosClient") -> Block:
    """Get the current head of the main chain."""
    return block(client, "head")


def block(client: "TezosClient", block_id: str) -> Block:
    """Get a block by hash, level, or alias such as ``head``."""
    body = client.get(f"/chains/{MAIN_CHAIN}/blocks/{block_id}")
    payload = _decode(body, "block")
    try:
        return Block.from_dict(payload)
    except SchemaValidationError as exc:
        raise ResponseDecodeError(f"could not decode block: {exc}", body=body) from exc


def constants(client: "TezosClient", block_hash: str) -> Constants:
    """Get the network constants in effect at ``block_hash``."""
    body = client.get(f"/chains/{MAIN_CHAIN}/blocks/{block_hash}/context/constants")
    payload = _decode(body, "network constants")
    try:
        return Constants.from_dict(payload, block_hash=block_hash)
    except SchemaValidationError as exc:
        raise ResponseDecodeError(f"could not decode network constants: {exc}", body=body) from exc


def balance(client: "TezosClient", block_hash: str, address: str) -> int:
    """Get the balance of ``address`` in mutez."""
    body = client.get(
        f"/chains/{MAIN_CHAIN}/blocks/{block_hash}/context/contracts/{address}/balance"
    )
    return _decode_int(body, "balance")


def counter(client: "TezosClient", block_hash: str, address: str) -> int:
    body = client.get(
        f"/chains/{MAIN_CHAIN}/blocks/{block_hash}/context/contracts/{address}/counter"
    )
    return _decode_int(body, "counter")


def chain_id(client: "TezosClient") -> str:
    body = client.get(f"/chains/{MAIN_CHAIN}/chain_id")
    value = _decode(body, "chain id")
    if not isinstance(value, str):
        raise ResponseDecodeError(f"could not decode chain id: expected string, got {value!r}", body=body)
    return value


def is_bootstrapped(client: "TezosClient") -> bool:
    body = client.get(f"/chains/{MAIN_CHAIN}/is_bootstrapped")
    value = _decode(body, "bootstrap status")
    if not isinstance(value, dict) or "bootstrapped" not in value:
        raise ResponseDecodeError(
            f"could not decode bootstrap status: {value!r}", body=body
        )
    return bool(value["bootstrapped"])


def inject_operation(client: "TezosClient", signed_operation: str, chain: str = MAIN_CHAIN) -> str:
    """
    Inject a signed operation.

    Args:
        client: Client to use
        signed_operation: Hex encoded, signed operation bytes
        chain: Chain to inject into

    Returns:
        The operation hash
    """
    body = client.post(
        "/injection/operation",
        json.dumps(signed_operation),
        RPCOption("chain", chain),
    )
    value = _decode(body, "operation hash")
    if not isinstance(value, str):
        raise ResponseDecodeError(
            f"could not decode operation hash: expected string, got {value!r}", body=body
        )
    return value
