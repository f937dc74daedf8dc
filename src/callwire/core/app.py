"""Application: composed from modules via app.register(module). ASGI app backed by Starlette."""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from callwire.core.config import ServerConfig
from callwire.core.container import Container
from callwire.core.module import Module

logger = logging.getLogger(__name__)

Endpoint = Callable[[Request], Awaitable[Response]]


class Application:
    """
    Application. Composed from modules via register(module).
    Callable as an ASGI app (Starlette underneath); run() serves it with uvicorn, start() / stop() in the background.
    """

    def __init__(self, config: Any = None) -> None:
        self._modules: list[Module] = []
        self._container = Container()
        self._routes: list[Route] = []
        self._asgi: Starlette | None = None
        self._server: Any = None
        self._thread: threading.Thread | None = None
        if config is not None:
            self._container.register_instance(type(config), config)
            self._container.register_instance("config", config)

    def register(self, module: Module) -> Application:
        """Register a module (RpcModule, ...). Returns self for chaining."""
        module.register_into(self)
        self._modules.append(module)
        return self

    def add_route(self, path: str, endpoint: Endpoint, methods: list[str] | None = None) -> None:
        """Add an HTTP route. Routes are fixed once the app has served its first request."""
        if self._asgi is not None:
            raise RuntimeError("cannot add routes after the application has started")
        if methods is None:
            methods = ["GET"]
        self._routes.append(Route(path, endpoint, methods=methods))

    @property
    def container(self) -> Container:
        """DI container: registration and resolution of dependencies."""
        return self._container

    @property
    def routes(self) -> list[Route]:
        return list(self._routes)

    async def __call__(self, scope: Any, receive: Any, send: Any) -> None:
        if self._asgi is None:
            self._asgi = Starlette(routes=list(self._routes))
        await self._asgi(scope, receive, send)

    def run(self, host: str | None = None, port: int | None = None, log_level: str | None = None) -> None:
        """Serve with uvicorn (blocks). Unset arguments come from the registered ServerConfig."""
        import uvicorn

        host, port, log_level = self._listen_on(host, port, log_level)
        uvicorn.run(self, host=host, port=port, log_level=log_level)

    def start(
        self,
        wait: bool = False,
        host: str | None = None,
        port: int | None = None,
        log_level: str | None = None,
    ) -> Application:
        """
        Serve with uvicorn. wait=False serves from a background thread and returns
        once the socket is listening; stop() shuts it down.
        """
        import uvicorn

        if self._server is not None:
            raise RuntimeError("application is already serving")
        host, port, log_level = self._listen_on(host, port, log_level)
        server = uvicorn.Server(uvicorn.Config(self, host=host, port=port, log_level=log_level))
        self._server = server
        if wait:
            try:
                server.run()
            finally:
                self._server = None
            return self
        thread = threading.Thread(target=server.run, name="callwire-server", daemon=True)
        self._thread = thread
        thread.start()
        while not server.started and thread.is_alive():
            time.sleep(0.01)
        if not server.started:
            self._server = self._thread = None
            raise RuntimeError(f"server failed to start on {host}:{port}")
        return self

    def stop(self, grace_period: float = 0.5, timeout: float = 1.5) -> None:
        """
        Stop a server started with start(wait=False). In-flight requests get grace_period
        seconds; after that the server is forced down, waiting at most timeout seconds in total.
        """
        server, thread = self._server, self._thread
        if server is None or thread is None:
            return
        server.should_exit = True
        thread.join(grace_period)
        if thread.is_alive():
            server.force_exit = True
            thread.join(max(timeout - grace_period, 0.0))
        self._server = self._thread = None
        logger.info("Server stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _listen_on(self, host: str | None, port: int | None, log_level: str | None) -> tuple[str, int, str]:
        config = self._container.resolve(ServerConfig) if ServerConfig in self._container else ServerConfig()
        host = host or config.host
        port = port or config.port
        logger.info(f"Serving {', '.join(r.path for r in self._routes)} on http://{host}:{port}")
        return host, port, log_level or config.log_level
