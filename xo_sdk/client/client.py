"""
XO API client

Translates typed domain operations into generic JSON-RPC calls on a Caller.
Each operation is a single request/response round trip; wire-level
correctness is left to the transport.
"""
import logging
from dataclasses import replace
from typing import List, Optional

from xo_sdk.config import ClientConfig
from xo_sdk.errors import NotFoundError
from xo_sdk.rpc.caller_interface import CallerInterface
from xo_sdk.rpc.http_client import HttpRpcClient
from xo_sdk.rpc.params import (
    SignInParams,
    UserCreateParams,
    UserGetAllParams,
    UserSetParams,
    UserDeleteParams,
)
from xo_sdk.client.user import User
from xo_sdk.telemetry import setup_tracer, setup_metrics


logger = logging.getLogger(__name__)


class Client:
    """Xen Orchestra client"""

    def __init__(self, rpc: CallerInterface):
        self.rpc = rpc

    @classmethod
    def from_config(cls, config: Optional[ClientConfig] = None) -> "Client":
        """Connect to the XO server described by config and sign in

        Args:
            config: Client settings; read from the environment when omitted

        Returns:
            Client: A signed-in client using the HTTP transport
        """
        config = config or ClientConfig.from_env()
        logger.info(f"Creating XO client: {config.to_dict()}")

        if config.enable_telemetry:
            setup_tracer(config.service_name, config.otlp_endpoint)
            setup_metrics(config.service_name, config.otlp_endpoint)

        rpc = HttpRpcClient(url=config.url, timeout=config.timeout, path=config.api_path)
        client = cls(rpc)
        if config.username:
            try:
                client.sign_in(config.username, config.password or "")
            except Exception:
                rpc.close()
                raise
        return client

    def sign_in(self, email: str, password: str) -> None:
        self.rpc.call("session.signInWithPassword", SignInParams(email=email, password=password), dict)
        logger.info(f"Signed in to XO as {email}")

    def create_user(self, user: User) -> User:
        """Create a user and return it with the id assigned by the server"""
        user_id = self.rpc.call(
            "user.create",
            UserCreateParams(email=user.email, password=user.password),
            str,
        )
        logger.debug(f"Created user {user.email} with id {user_id}")
        return replace(user, id=user_id)

    def get_all_users(self) -> List[User]:
        return self.rpc.call("user.getAll", UserGetAllParams(), List[User])

    def get_user(self, user: User) -> User:
        """Look up a user by id

        Raises:
            NotFoundError: No user has ``user.id``
        """
        for candidate in self.get_all_users():
            if candidate.id == user.id:
                return candidate
        raise NotFoundError(f"could not find user with id: {user.id}")

    def update_user(self, user: User) -> bool:
        params = UserSetParams(id=user.id, email=user.email or None, password=user.password or None)
        return self.rpc.call("user.set", params, bool)

    def delete_user(self, user: User) -> bool:
        return self.rpc.call("user.delete", UserDeleteParams(id=user.id), bool)

    def close(self):
        self.rpc.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
