__all__ = [
    # Client
    "TezosClient",
    "NewClientResult",
    "new",
    # Transport
    "Transport",
    "HttpxTransport",
    # Query options
    "RPCOption",
    "attach_options",
    # Errors
    "TezosError",
    "RequestConstructionError",
    "TransportError",
    "BodyReadError",
    "HTTPStatusError",
    "MalformedErrorPayloadError",
    "RPCError",
    "RPCErrorEntry",
    "RPCErrors",
    "ResponseDecodeError",
    "BootstrapError",
    "classify_rpc_errors",
    # Models
    "Block",
    "Constants",
    # Config
    "ClientConfig",
    # Units
    "MUTEZ",
    "cleanse_host",
    "mutez_to_tez",
    "tez_to_mutez",
    # Logging
    "configure_logging",
]

from .config import ClientConfig
from .observability import configure_logging
from .rpc.client import NewClientResult, TezosClient, new
from .rpc.errors import (
    BodyReadError,
    BootstrapError,
    HTTPStatusError,
    MalformedErrorPayloadError,
    RequestConstructionError,
    ResponseDecodeError,
    RPCError,
    RPCErrorEntry,
    RPCErrors,
    TezosError,
    TransportError,
    classify_rpc_errors,
)
from .rpc.query import RPCOption, attach_options
from .rpc.transport import HttpxTransport, Transport
from .spec.models import Block, Constants
from .utils import MUTEZ, cleanse_host, mutez_to_tez, tez_to_mutez
