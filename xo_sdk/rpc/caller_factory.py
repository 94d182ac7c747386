"""
Caller factory

Creates Caller instances by transport type, so code can pick the production
transport or the contract test transport from configuration.
"""

from typing import Dict, Any

from xo_sdk.rpc.caller_interface import CallerInterface
from xo_sdk.rpc.http_client import HttpRpcClient

class TransportType:
    """Transport type constants"""
    HTTP = "http"
    CONTRACT = "contract"

class CallerFactory:
    """Caller factory, creates transport instances"""
    
    @staticmethod
    def create(transport_type: str, config: Dict[str, Any] = None) -> CallerInterface:
        """Create a Caller
        
        Args:
            transport_type: "http" or "contract"
            config: Transport parameters; "url" and "timeout" for http,
                "pact" (a Pact instance) and optional "path" for contract
            
        Returns:
            CallerInterface: Caller instance
            
        Raises:
            ValueError: Invalid transport type or missing parameters
        """
        if config is None:
            config = {}
            
        if transport_type.lower() == TransportType.HTTP:
            if not config.get("url"):
                raise ValueError("http transport requires a url")
            return HttpRpcClient(
                url=config["url"],
                timeout=config.get("timeout", 30.0),
                path=config.get("path", "/api")
            )
        elif transport_type.lower() == TransportType.CONTRACT:
            if config.get("pact") is None:
                raise ValueError("contract transport requires a pact")
            # Imported here so production code does not load the aiohttp mock provider
            from xo_sdk.contract.transport import ContractCaller
            return ContractCaller(
                pact=config["pact"],
                path=config.get("path", "/api")
            )
        else:
            raise ValueError(f"Invalid transport type: {transport_type}")
