"""
HTTP JSON-RPC client

Production Caller: POSTs JSON-RPC 2.0 envelopes to the XO API endpoint over
httpx and unwraps the response envelope.
"""

import itertools
import logging
import threading
import time
from typing import Any, Dict, Optional

import httpx

from xo_sdk.errors import TransportError
from xo_sdk.rpc.caller_interface import CallerInterface
from xo_sdk.rpc.codec import decode_result
from xo_sdk.rpc.envelope import (
    build_request,
    build_notification,
    encode_envelope,
    decode_body,
    unwrap_response,
)
from xo_sdk.telemetry.tracer import create_span, inject_trace_headers
from xo_sdk.telemetry.metrics import record_latency, increment_counter

logger = logging.getLogger(__name__)

class HttpRpcClient(CallerInterface):
    """
    JSON-RPC 2.0 client over HTTP
    Request ids come from a per-session counter starting at 0
    """

    def __init__(self,
                 url: str,
                 timeout: float = 30.0,
                 path: str = "/api",
                 headers: Optional[Dict[str, str]] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        """Initialize the HTTP client

        Args:
            url: Base URL of the XO server
            timeout: Request timeout in seconds
            path: API endpoint path
            headers: Extra headers sent with every request
            transport: httpx transport override (used by tests)
        """
        self.url = url.rstrip("/")
        self.endpoint = f"{self.url}{path}"
        self.timeout = timeout
        self._ids = itertools.count()
        self._id_lock = threading.Lock()
        self._closed = False
        self.client = httpx.Client(
            timeout=httpx.Timeout(timeout),
            headers={"Content-Type": "application/json", **(headers or {})},
            transport=transport,
        )
        logger.info(f"HTTP RPC client targeting {self.endpoint}")

    def _next_id(self) -> int:
        with self._id_lock:
            return next(self._ids)

    def _ensure_open(self, method: str):
        if self._closed:
            raise TransportError(f"client for {self.endpoint} is closed", method)

    def _post(self, method: str, body: bytes) -> httpx.Response:
        headers = inject_trace_headers({})
        try:
            response = self.client.post(self.endpoint, content=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Request {method} timed out after {self.timeout}s")
            increment_counter("rpc.client.errors", 1, {"type": "timeout", "method": method})
            raise TransportError(f"request timed out ({self.timeout}s)", method) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error calling {method}: {e}")
            increment_counter("rpc.client.errors", 1, {"type": "http_error", "method": method})
            raise TransportError(f"HTTP request failed: {e}", method) from e

        if response.is_error:
            logger.error(f"{method} returned HTTP {response.status_code}")
            increment_counter("rpc.client.errors", 1, {"type": "http_status", "method": method})
            raise TransportError(
                f"HTTP {response.status_code} from {self.endpoint}", method, response.status_code
            )
        return response

    def call(self, method: str, params: Any = None, result_type: Any = None,
             *, request_id: Optional[int] = None) -> Any:
        """Send a JSON-RPC 2.0 request and wait for the response

        Args:
            method: Method name to call
            params: Method parameters
            result_type: Type the ``result`` member is decoded into
            request_id: Explicit envelope id

        Returns:
            Decoded result, or None when result_type is None

        Raises:
            SerializationError: Parameters could not be encoded
            TransportError: Connection failure, timeout or HTTP error status,
                or the client is closed
            DecodeError: Invalid response envelope or result shape
            RemoteError: The server returned a JSON-RPC error
        """
        self._ensure_open(method)
        if request_id is None:
            request_id = self._next_id()

        body = encode_envelope(build_request(method, params, request_id))

        with create_span("rpc.call", {"rpc.system": "jsonrpc", "rpc.method": method}):
            start_time = time.time()
            logger.debug(f"Sending request: {body[:200]!r}")
            increment_counter("rpc.client.requests", 1, {"method": method})

            response = self._post(method, body)

            latency_ms = (time.time() - start_time) * 1000
            record_latency("rpc.client.latency", latency_ms, {"method": method})
            logger.debug(f"Received response for {method}, latency: {latency_ms:.2f}ms")

            envelope = decode_body(response.content, method)
            try:
                result = unwrap_response(envelope, request_id, method)
            except Exception:
                increment_counter("rpc.client.errors", 1, {"type": "rpc_error", "method": method})
                raise

            increment_counter("rpc.client.success", 1, {"method": method})
            if result_type is None:
                return None
            return decode_result(result, result_type)

    def notify(self, method: str, params: Any = None) -> None:
        """Send a JSON-RPC 2.0 notification; the response body is ignored"""
        self._ensure_open(method)
        body = encode_envelope(build_notification(method, params))
        with create_span("rpc.notify", {"rpc.system": "jsonrpc", "rpc.method": method}):
            logger.debug(f"Sending notification: {body[:200]!r}")
            increment_counter("rpc.client.notifications", 1, {"method": method})
            self._post(method, body)

    def close(self):
        """Close the underlying HTTP client"""
        if self._closed:
            return
        self._closed = True
        self.client.close()
        logger.debug(f"HTTP RPC client for {self.endpoint} closed")
