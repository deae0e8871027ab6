"""
Tezos RPC client.

Turns logical RPC calls into HTTP requests against a single node, reads the
whole response and separates success from the node's error payloads. On
construction through ``new`` the client fetches the chain head and caches the
network constants for it.
"""

from __future__ import annotations

import threading
import time
from typing import NamedTuple, Optional, Union

import httpx

from ..config import ClientConfig
from ..observability import get_logger
from ..spec.models import Block, Constants
from ..utils import cleanse_host
from . import blocks
from .errors import (
    BodyReadError,
    BootstrapError,
    HTTPStatusError,
    RequestConstructionError,
    RPCError,
    TezosError,
    TransportError,
    classify_rpc_errors,
)
from .query import RPCOption, attach_options
from .transport import HttpxTransport, Transport

logger = get_logger(__name__)


class TezosClient:
    """Synchronous client for one Tezos node.

    Safe to share between threads: the transport is expected to be, and the
    cached constants and transport references are swapped under a lock.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        transport: Optional[Transport] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._host = cleanse_host(host if host is not None else self._config.host)
        self._transport: Transport = transport or HttpxTransport(timeout=self._config.timeout)
        self._constants: Optional[Constants] = None
        self._lock = threading.Lock()
        self._log = logger.bind(component="rpc", host=self._host)

    @property
    def host(self) -> str:
        return self._host

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def transport(self) -> Transport:
        with self._lock:
            return self._transport

    @property
    def constants(self) -> Optional[Constants]:
        with self._lock:
            return self._constants

    def set_transport(self, transport: Union[Transport, httpx.Client]) -> None:
        """Replace the transport used by every later call.

        An ``httpx.Client`` is accepted directly and wrapped.
        """
        if isinstance(transport, httpx.Client):
            transport = HttpxTransport(client=transport)
        with self._lock:
            self._transport = transport

    def set_constants(self, constants: Constants) -> None:
        """Replace the cached network constants. No validation is done."""
        with self._lock:
            self._constants = constants

    # ============ Bootstrap ============

    def bootstrap(self) -> Constants:
        """Fetch the chain head, then the constants for it, and cache them.

        Raises:
            BootstrapError: naming the step that failed. Cached constants are
                left untouched.
        """
        try:
            head = self.head()
        except TezosError as exc:
            self._log.warning("bootstrap_failed", step="head", error=str(exc))
            raise BootstrapError("head", exc) from exc

        try:
            constants = self.fetch_constants(head.hash)
        except TezosError as exc:
            self._log.warning(
                "bootstrap_failed", step="constants", block_hash=head.hash, error=str(exc)
            )
            raise BootstrapError("constants", exc) from exc

        self.set_constants(constants)
        self._log.info("bootstrap_complete", block_hash=head.hash, level=head.level)
        return constants

    def head(self) -> Block:
        return blocks.head(self)

    def fetch_constants(self, block_hash: str) -> Constants:
        return blocks.constants(self, block_hash)

    # ============ HTTP verbs ============

    def get(self, path: str, *options: RPCOption) -> bytes:
        return self._call("GET", path, None, options)

    def post(self, path: str, body: Union[bytes, str], *options: RPCOption) -> bytes:
        return self._call("POST", path, body, options)

    def delete(self, path: str, *options: RPCOption) -> bytes:
        return self._call("DELETE", path, None, options)

    def _call(
        self,
        method: str,
        path: str,
        body: Union[bytes, str, None],
        options: tuple[RPCOption, ...],
    ) -> bytes:
        headers = {"Content-Type": "application/json"} if body is not None else None
        try:
            request = httpx.Request(method, f"{self._host}{path}", content=body, headers=headers)
        except (httpx.InvalidURL, ValueError, TypeError) as exc:
            raise RequestConstructionError(f"failed to construct request: {exc}") from exc

        attach_options(request, *options)

        return self._do(request)

    def _do(self, request: httpx.Request) -> bytes:
        transport = self.transport
        log = self._log.bind(method=request.method, path=request.url.path)
        log.debug("rpc_request", query=request.url.query.decode("ascii"))
        start_ns = time.perf_counter_ns()

        try:
            response = transport.send(request)
        except httpx.HTTPError as exc:
            log.warning("rpc_failed", error_class="TransportError", error=str(exc))
            raise TransportError(f"failed to complete request: {exc}") from exc

        try:
            body = self._read_body(response)
        except BodyReadError as exc:
            log.warning("rpc_failed", error_class="BodyReadError", error=str(exc))
            raise
        finally:
            response.close()

        log = log.bind(
            status_code=response.status_code,
            bytes=len(body),
            duration_ms=round((time.perf_counter_ns() - start_ns) / 1_000_000, 2),
        )

        if response.status_code != httpx.codes.OK:
            log.warning("rpc_failed", error_class="HTTPStatusError")
            raise HTTPStatusError(response.status_code, body)

        try:
            errors = classify_rpc_errors(body, strict=self._config.strict_errors)
        except TezosError as exc:
            log.warning("rpc_failed", error_class=type(exc).__name__, error=str(exc))
            raise

        if errors:
            log.warning("rpc_failed", error_class="RPCError", kind=errors[0].kind)
            raise RPCError(errors, body=body)

        transport.close_idle_connections()
        log.debug("rpc_complete")

        return body

    @staticmethod
    def _read_body(response: httpx.Response) -> bytes:
        buffer = bytearray()
        try:
            for chunk in response.iter_bytes():
                buffer.extend(chunk)
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise BodyReadError(
                f"could not read response body: {exc}", body=bytes(buffer)
            ) from exc
        return bytes(buffer)


class NewClientResult(NamedTuple):
    client: TezosClient
    error: Optional[BootstrapError]


def new(
    host: Optional[str] = None,
    config: Optional[ClientConfig] = None,
    transport: Optional[Transport] = None,
) -> NewClientResult:
    """
    Create a client and initialize it with the node's network constants.

    A client is returned even when bootstrapping fails, so the caller can
    repair it with ``set_constants`` or ``set_transport``. Check ``error``.

    Without ``config`` the settings come from ``ClientConfig.from_env``,
    which loads ``.env`` into the process environment first.

    Args:
        host: Node URL (default: config host, see ``ClientConfig.from_env``)
        config: Client configuration
        transport: Transport to use instead of the default httpx one

    Returns:
        NewClientResult(client, error)

    Raises:
        ValueError: ``config`` was omitted and the environment holds an
            invalid setting (e.g. a non-numeric ``TEZOS_RPC_TIMEOUT``).
            No client is returned in that case.
    """
    config = config or ClientConfig.from_env()
    client = TezosClient(host, transport=transport, config=config)
    try:
        client.bootstrap()
    except BootstrapError as exc:
        return NewClientResult(client, exc)
    return NewClientResult(client, None)
