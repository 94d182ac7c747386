"""
JSON-RPC 2.0 Module

Transport-independent request/response semantics:
- caller_interface: the Caller every transport implements
- envelope: request, notification and response envelopes
- params: per-method parameter records
- http_client: production Caller over HTTP
"""

from .caller_interface import CallerInterface
from .caller_factory import CallerFactory, TransportType
from .envelope import JSONRPC_VERSION
from .http_client import HttpRpcClient

__all__ = [
    "CallerInterface",
    "CallerFactory",
    "TransportType",
    "JSONRPC_VERSION",
    "HttpRpcClient"
]
