"""
Contract test transport

Caller that sends JSON-RPC 2.0 requests to the mock provider of a Pact.
The full response body is decoded into the result type; there is no
result/error unwrapping because the mock answers with the bare result.
"""

import logging
import time
from typing import Any, Optional

import httpx

from xo_sdk.contract.pact import Pact
from xo_sdk.errors import TransportError, DecodeError
from xo_sdk.rpc.caller_interface import CallerInterface
from xo_sdk.rpc.codec import decode_result
from xo_sdk.rpc.envelope import build_request, encode_envelope, decode_body
from xo_sdk.telemetry.metrics import record_latency, increment_counter

logger = logging.getLogger(__name__)

# The mock expects every request with this id
CONTRACT_REQUEST_ID = 0


class ContractCaller(CallerInterface):
    """
    Caller backed by a Pact mock provider
    Closing it tears the Pact down, which verifies the recorded interactions
    """

    def __init__(self, pact: Pact, path: str = "/api"):
        """Initialize the transport

        Args:
            pact: Registry whose mock server receives the requests
            path: API endpoint path on the mock server
        """
        self.pact = pact
        self.path = path
        self._closed = False
        # The mock is always local, so proxy settings from the environment are ignored
        self.client = httpx.Client(trust_env=False)

    @property
    def url(self) -> str:
        """Endpoint on the mock server; reading it never starts the server"""
        return f"http://{self.pact.host}:{self.pact.server.port}{self.path}"

    def _ensure_open(self, method: str):
        if self._closed:
            raise TransportError("contract caller is closed", method)

    def call(self, method: str, params: Any = None, result_type: Any = None,
             *, request_id: Optional[int] = None) -> Any:
        """Issue a standard request against the mock provider

        Returns:
            Decoded response body, or None when result_type is None
        """
        self._ensure_open(method)
        self.pact.setup()
        if request_id is None:
            request_id = CONTRACT_REQUEST_ID

        message = encode_envelope(build_request(method, params, request_id))

        # The mock matches headers exactly; without an explicit Content-Type
        # verification reports a mismatch
        headers = {"Content-Type": "application/json"}

        start_time = time.time()
        increment_counter("rpc.contract.requests", 1, {"method": method})
        try:
            response = self.client.post(self.url, content=message, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Contract request {method} failed: {e}")
            increment_counter("rpc.contract.errors", 1, {"type": "http_error", "method": method})
            raise TransportError(f"HTTP request failed: {e}", method) from e
        record_latency("rpc.contract.latency", (time.time() - start_time) * 1000, {"method": method})

        if result_type is None:
            return None

        try:
            body = response.read()
        except httpx.HTTPError as e:
            raise DecodeError(f"cannot read response body: {e}", method) from e

        logger.debug(f"Mock responded to {method} with HTTP {response.status_code}: {body[:200]!r}")
        return decode_result(decode_body(body, method), result_type)

    def notify(self, method: str, params: Any = None) -> None:
        """Notifications are not exercised against the mock provider"""
        self._ensure_open(method)
        logger.debug(f"Ignoring notification {method}")

    def close(self):
        """Close the HTTP client and tear down the Pact

        Raises:
            VerificationError: Teardown found unmatched or unexpected requests
        """
        if self._closed:
            return
        self._closed = True
        self.client.close()
        self.pact.teardown()
