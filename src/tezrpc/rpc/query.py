from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class RPCOption:
    """A single query-string parameter for an RPC call."""

    key: str
    value: str


def attach_options(request: httpx.Request, *options: RPCOption) -> httpx.Request:
    """Append options to the request's query string, in order.

    Existing query parameters are kept. Repeated keys are additive, so
    ``RPCOption("a", "1"), RPCOption("a", "2")`` yields ``a=1&a=2``.
    """
    if not options:
        return request
    params = list(request.url.params.multi_items())
    params.extend((opt.key, opt.value) for opt in options)
    request.url = request.url.copy_with(params=httpx.QueryParams(params))
    return request
