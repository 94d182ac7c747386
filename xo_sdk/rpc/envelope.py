"""
JSON-RPC 2.0 envelopes

Builds request and notification objects, encodes them for the wire and
unwraps response objects (http://www.jsonrpc.org/specification).
"""

import json
import logging
from typing import Any, Dict, Optional

from xo_sdk.errors import SerializationError, DecodeError, RemoteError
from xo_sdk.rpc.params import encode_params

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"


def build_request(method: str, params: Any = None, request_id: int = 0) -> Dict[str, Any]:
    """Create a request object

    Args:
        method: Method name
        params: Method parameters
        request_id: Correlation id

    Returns:
        Dict: Request envelope

    Raises:
        SerializationError: Parameters could not be encoded
    """
    request = {"method": method}
    encoded = encode_params(method, params)
    if encoded is not None:
        request["params"] = encoded
    request["id"] = request_id
    request["jsonrpc"] = JSONRPC_VERSION
    return request


def build_notification(method: str, params: Any = None) -> Dict[str, Any]:
    """Create a notification object, a request without an id"""
    notification = {"method": method}
    encoded = encode_params(method, params)
    if encoded is not None:
        notification["params"] = encoded
    notification["jsonrpc"] = JSONRPC_VERSION
    return notification


def encode_envelope(envelope: Dict[str, Any]) -> bytes:
    """Serialize an envelope to a UTF-8 JSON body

    Raises:
        SerializationError: The envelope holds values JSON cannot represent
    """
    try:
        return json.dumps(envelope, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise SerializationError(f"cannot encode request: {e}", envelope.get("method")) from e


def decode_body(body: bytes, method: Optional[str] = None) -> Any:
    """Parse a response body as JSON

    Raises:
        DecodeError: The body is not valid JSON
    """
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(f"response is not valid JSON: {e}", method) from e


def unwrap_response(response: Any, request_id: int, method: Optional[str] = None) -> Any:
    """Validate a response object and return its ``result`` member

    Args:
        response: Parsed response body
        request_id: Id the request was sent with
        method: Method name, for error messages

    Returns:
        The raw ``result`` value

    Raises:
        DecodeError: Not a JSON-RPC 2.0 response, or the id does not match
        RemoteError: The response carries an error object
    """
    if not isinstance(response, dict) or response.get("jsonrpc") != JSONRPC_VERSION:
        logger.error(f"Invalid JSON-RPC 2.0 response: {response}")
        raise DecodeError("invalid JSON-RPC 2.0 response", method)

    if response.get("id") != request_id:
        logger.error(f"Response id mismatch: {response.get('id')} != {request_id}")
        raise DecodeError(f"response id mismatch: {response.get('id')} != {request_id}", method)

    if response.get("error") is not None:
        error = response["error"]
        if not isinstance(error, dict):
            raise DecodeError(f"malformed error object: {error!r}", method)
        raise RemoteError(
            code=error.get("code", -1),
            message=error.get("message", ""),
            data=error.get("data"),
            method=method,
        )

    if "result" not in response:
        raise DecodeError("response has neither result nor error", method)

    return response["result"]
