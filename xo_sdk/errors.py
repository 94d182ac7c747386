"""
Error types

Everything a Caller raises derives from RpcError so domain code can catch
transport problems in one place. Contract verification failures are kept out
of that hierarchy: they subclass AssertionError and are meant to fail the test
that produced them.
"""

from typing import Any, Optional


class XoError(Exception):
    """Base class for all SDK errors"""


class RpcError(XoError):
    """Base class for errors raised by a Caller"""

    def __init__(self, message: str, method: Optional[str] = None):
        super().__init__(message)
        self.method = method


class SerializationError(RpcError):
    """Parameters or the request envelope could not be encoded as JSON"""


class TransportError(RpcError):
    """The HTTP exchange itself failed"""

    def __init__(self, message: str, method: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, method)
        self.status_code = status_code


class DecodeError(RpcError):
    """The response body was unreadable, not JSON, or not the expected shape"""


class RemoteError(RpcError):
    """The server answered with a JSON-RPC error object"""

    def __init__(self, code: int, message: str, data: Any = None, method: Optional[str] = None):
        super().__init__(f"[{code}] {message}", method)
        self.code = code
        self.data = data


class NotFoundError(XoError):
    """A domain lookup matched nothing"""


class VerificationError(AssertionError):
    """Observed traffic did not satisfy the registered interactions

    Args:
        message: Summary line
        problems: One human-readable line per missing or mismatched interaction
    """

    def __init__(self, message: str, problems: Optional[list] = None):
        self.problems = list(problems or [])
        details = "".join(f"\n  - {p}" for p in self.problems)
        super().__init__(f"{message}{details}")
