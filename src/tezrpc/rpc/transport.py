from __future__ import annotations

from typing import Optional, Protocol

import httpx

from ..config import DEFAULT_TIMEOUT


class Transport(Protocol):
    """What the client needs from an HTTP transport.

    Implementations must be safe to share between threads.
    """

    def send(self, request: httpx.Request) -> httpx.Response:
        """Send the request and return a response whose body may be unread."""
        ...

    def close_idle_connections(self) -> None:
        ...


class HttpxTransport:
    """Transport backed by a pooled ``httpx.Client``."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if client is None:
            # connect, read, write and pool acquisition all bounded by `timeout`
            client = httpx.Client(timeout=httpx.Timeout(timeout))
        self._client = client

    @property
    def client(self) -> httpx.Client:
        return self._client

    def send(self, request: httpx.Request) -> httpx.Response:
        return self._client.send(request, stream=True)

    def close_idle_connections(self) -> None:
        # httpx has no public hook for this; reach the httpcore pool of the
        # default transport when there is one.
        pool = getattr(getattr(self._client, "_transport", None), "_pool", None)
        if pool is None:
            return
        for connection in pool.connections:
            if connection.is_idle():
                connection.close()

    def close(self) -> None:
        self._client.close()
