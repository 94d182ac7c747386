"""
Configuration settings for the XO client and the contract mock provider
"""
import os
from typing import Dict, Any, Optional
from dataclasses import dataclass


def _env_flag(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).lower() in ["1", "true", "yes"]


@dataclass
class ClientConfig:
    """Configuration for the production JSON-RPC client"""
    url: str
    username: Optional[str] = None
    password: Optional[str] = None
    timeout: float = 30.0
    api_path: str = "/api"

    # Tracing configuration
    enable_telemetry: bool = False
    service_name: str = "xo_sdk"
    otlp_endpoint: str = "localhost:4317"

    @classmethod
    def from_env(cls) -> "ClientConfig":
        """Create config from environment variables"""
        url = os.getenv("XOA_URL")
        if not url:
            raise ValueError("XOA_URL is not configured")
        return cls(
            url=url,
            username=os.getenv("XOA_USER"),
            password=os.getenv("XOA_PASSWORD"),
            timeout=float(os.getenv("XOA_TIMEOUT", "30")),
            enable_telemetry=_env_flag("XOA_ENABLE_TELEMETRY"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "localhost:4317"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging; the password is never included"""
        return {
            "url": self.url,
            "username": self.username,
            "timeout": self.timeout,
            "api_path": self.api_path,
            "enable_telemetry": self.enable_telemetry,
        }


@dataclass
class MockProviderConfig:
    """Configuration for the contract testing mock provider"""
    consumer: str = "xo-sdk-py"
    provider: str = "xenorchestra"
    host: str = "127.0.0.1"
    port: int = 0  # 0 lets the OS pick a free port
    pact_dir: Optional[str] = None

    @classmethod
    def from_env(cls) -> "MockProviderConfig":
        """Create config from environment variables"""
        return cls(
            consumer=os.getenv("PACT_CONSUMER", "xo-sdk-py"),
            provider=os.getenv("PACT_PROVIDER", "xenorchestra"),
            host=os.getenv("PACT_HOST", "127.0.0.1"),
            port=int(os.getenv("PACT_PORT", "0")),
            pact_dir=os.getenv("PACT_DIR"),
        )
