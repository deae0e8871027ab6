"""
Error types raised by the RPC client, and detection of the node's embedded
error payloads.

A Tezos node may answer ``200 OK`` and still report a failure by returning a
JSON array of ``{"kind": ..., "error": ...}`` records instead of the expected
payload. ``classify_rpc_errors`` recognises that shape.

Every error raised after a response was received keeps the raw bytes on
``.body`` so callers can run their own diagnostics.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from ..spec.schemas import (
    RPC_ERRORS_SCHEMA,
    RPC_ERRORS_STRICT_SCHEMA,
    SchemaRegistry,
    SchemaValidationError,
)


class TezosError(RuntimeError):
    exit_code: int = 1

    def __init__(self, message: str, body: Optional[bytes] = None) -> None:
        super().__init__(message)
        self.body = body


class RequestConstructionError(TezosError):
    exit_code = 2


class TransportError(TezosError):
    exit_code = 3


class BodyReadError(TezosError):
    exit_code = 4


class HTTPStatusError(TezosError):
    exit_code = 5

    def __init__(self, status_code: int, body: bytes) -> None:
        text = body.decode("utf-8", errors="replace")
        super().__init__(f"response returned code {status_code} with body {text}", body=body)
        self.status_code = status_code


class MalformedErrorPayloadError(TezosError):
    exit_code = 6


@dataclass(frozen=True)
class RPCErrorEntry:
    kind: str
    error: str


RPCErrors = list[RPCErrorEntry]


class RPCError(TezosError):
    exit_code = 7

    def __init__(self, errors: RPCErrors, body: Optional[bytes] = None) -> None:
        first = errors[0]
        super().__init__(f"rpc error ({first.kind}): {first.error}", body=body)
        self.kind = first.kind
        self.error = first.error
        self.errors = errors


class ResponseDecodeError(TezosError):
    exit_code = 8


_STEP_LABELS = {
    "head": "chain head",
    "constants": "network constants",
}


class BootstrapError(TezosError):
    exit_code = 9

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(
            f"could not initialize library with network constants: "
            f"failed to fetch {_STEP_LABELS.get(step, step)}: {cause}",
            body=getattr(cause, "body", None),
        )
        self.step = step
        self.cause = cause


def classify_rpc_errors(
    body: bytes,
    strict: bool = False,
    registry: SchemaRegistry | None = None,
) -> Optional[RPCErrors]:
    """
    Inspect a 200 response body for an embedded RPC error payload.

    Args:
        body: Raw response bytes
        strict: Decode against the strict error schema instead of scanning
            for the ``error`` substring first
        registry: Schema registry (default: bundled schemas)

    Returns:
        The decoded error entries, or None if the body is not an error payload

    Raises:
        MalformedErrorPayloadError: Compatibility mode only, when the body
            mentions ``error`` but does not decode as an error payload
    """
    registry = registry or SchemaRegistry.default()

    if strict:
        return _classify_strict(body, registry)

    if b"error" not in body:
        return None

    try:
        payload = json.loads(body)
        registry.validate_instance(payload, RPC_ERRORS_SCHEMA)
    except (ValueError, SchemaValidationError) as exc:
        raise MalformedErrorPayloadError(
            f"could not unmarshal rpc error: {exc}", body=body
        ) from exc

    # An empty array carries no error to report.
    if not payload:
        return None

    return [
        RPCErrorEntry(kind=item.get("kind", ""), error=item.get("error", ""))
        for item in payload
    ]


def _classify_strict(body: bytes, registry: SchemaRegistry) -> Optional[RPCErrors]:
    try:
        payload = json.loads(body)
    except ValueError:
        return None

    if not registry.is_valid(payload, RPC_ERRORS_STRICT_SCHEMA):
        return None

    return [RPCErrorEntry(kind=item["kind"], error=item["error"]) for item in payload]
