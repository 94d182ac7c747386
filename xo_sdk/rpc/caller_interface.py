"""
Caller interface

Defines the capability every transport (production HTTP, contract test mock)
implements. Domain code depends only on this interface, so the underlying
transport can change without touching it.
"""

import abc
from typing import Any, Optional


class CallerInterface(abc.ABC):
    """Caller interface, defines the methods every transport must implement"""
    
    @abc.abstractmethod
    def call(self, method: str, params: Any = None, result_type: Any = None,
             *, request_id: Optional[int] = None) -> Any:
        """Send a JSON-RPC request and wait for the response
        
        Args:
            method: Method name to call
            params: Method parameters, a parameter record or a plain dict
            result_type: Type to decode the response into; when None the
                response body is not decoded and None is returned
            request_id: Overrides the envelope id chosen by the transport
            
        Returns:
            The decoded result, or None when result_type is None
            
        Raises:
            SerializationError: Parameters could not be encoded
            TransportError: The HTTP exchange failed
            DecodeError: The response could not be decoded into result_type
        """
        pass
    
    @abc.abstractmethod
    def notify(self, method: str, params: Any = None) -> None:
        """Send a notification; no response is expected
        
        Args:
            method: Method name
            params: Method parameters
        """
        pass
    
    @abc.abstractmethod
    def close(self) -> None:
        """Close the connection and release resources; safe to call twice"""
        pass
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc, tb):
        self.close()
