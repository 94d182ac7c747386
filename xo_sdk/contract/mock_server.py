"""
Mock provider HTTP server

Runs an aiohttp application on its own event loop in a background thread.
Every incoming request is handed to a synchronous handler (the interaction
registry) which decides the response.
"""

import asyncio
import logging
import socket
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from aiohttp import web

from xo_sdk.contract.matching import ObservedRequest

logger = logging.getLogger(__name__)


@dataclass
class MockResponse:
    """Response produced by the request handler"""
    status: int = 200
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""


RequestHandler = Callable[[ObservedRequest], MockResponse]


class MockServer:
    """
    Threaded aiohttp server bound to host:port (port 0 picks a free port)
    """

    def __init__(self, handler: RequestHandler, host: str = "127.0.0.1", port: int = 0):
        """Initialize the mock server

        Args:
            handler: Called for every request, on the server thread
            host: Bind address
            port: Bind port, 0 to let the OS choose
        """
        self.handler = handler
        self.host = host
        self.port = port
        self.running = False
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._runner: Optional[web.AppRunner] = None
        self._started = threading.Event()
        self._start_error: Optional[BaseException] = None

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def _handle(self, request: web.Request) -> web.Response:
        observed = ObservedRequest(
            method=request.method,
            path=request.path,
            query={key: request.query.getall(key) for key in request.query.keys()},
            headers={name.lower(): value for name, value in request.headers.items()},
            body=await request.read(),
        )
        logger.debug(f"Mock server received {observed.describe()}")
        response = self.handler(observed)
        return web.Response(status=response.status, headers=response.headers, body=response.body)

    async def _setup(self):
        app = web.Application()
        app.router.add_route("*", "/{tail:.*}", self._handle)
        self._runner = web.AppRunner(app, access_log=None)
        await self._runner.setup()

        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            sock.bind((self.host, self.port))
        except OSError:
            sock.close()
            raise
        self.port = sock.getsockname()[1]

        site = web.SockSite(self._runner, sock)
        await site.start()

    def _run(self):
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_until_complete(self._setup())
        except Exception as e:
            logger.error(f"Mock server failed to start: {e}")
            self._start_error = e
            if self._runner is not None:
                self._loop.run_until_complete(self._runner.cleanup())
            self._started.set()
            self._loop.close()
            return

        self._started.set()
        try:
            self._loop.run_forever()
        finally:
            self._loop.run_until_complete(self._runner.cleanup())
            self._loop.close()

    def start(self):
        """Start serving in a daemon thread; returns once the port is bound

        Raises:
            OSError: The address could not be bound
        """
        if self.running:
            return
        self._started.clear()
        self._start_error = None
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name="mock-provider", daemon=True)
        self._thread.start()
        self._started.wait()

        if self._start_error is not None:
            self._thread.join()
            raise self._start_error

        self.running = True
        logger.info(f"Mock server listening on {self.base_url}")

    def stop(self):
        """Stop the server and wait for its thread to exit"""
        if not self.running:
            return
        self.running = False
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join()
        logger.info(f"Mock server on {self.base_url} stopped")
