"""
Client configuration.

Values come from the environment, after loading a ``.env`` file from the
current directory if one exists:

- TEZOS_RPC_URL: node to talk to (default: http://localhost:8732)
- TEZOS_RPC_TIMEOUT: connect/TLS/read timeout in seconds (default: 10)
- TEZOS_RPC_STRICT_ERRORS: "1"/"true" to decode error payloads strictly
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

DEFAULT_RPC_URL = "http://localhost:8732"
DEFAULT_TIMEOUT = 10.0

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


def get_rpc_url() -> str:
    """Get the RPC URL from environment or default."""
    return os.environ.get("TEZOS_RPC_URL", DEFAULT_RPC_URL)


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class ClientConfig:
    host: str = DEFAULT_RPC_URL
    timeout: float = DEFAULT_TIMEOUT
    strict_errors: bool = False

    def __post_init__(self) -> None:
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "ClientConfig":
        load_dotenv(env_file)

        raw_timeout = os.environ.get("TEZOS_RPC_TIMEOUT")
        if raw_timeout is None:
            timeout = DEFAULT_TIMEOUT
        else:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ValueError(f"TEZOS_RPC_TIMEOUT must be a number, got {raw_timeout!r}") from exc

        strict = _parse_bool(
            "TEZOS_RPC_STRICT_ERRORS", os.environ.get("TEZOS_RPC_STRICT_ERRORS", "")
        )

        return cls(host=get_rpc_url(), timeout=timeout, strict_errors=strict)
