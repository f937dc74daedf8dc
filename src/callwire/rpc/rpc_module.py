"""
RpcModule: building block for function calls: server (accept calls) and client (call other processors).
Configure via .server(...) and .client(...); register with app.register(rpc).
"""
from __future__ import annotations

import dataclasses
import logging
from typing import Any

from starlette.requests import Request
from starlette.responses import Response

from callwire.calls.dispatcher import Dispatcher
from callwire.codec import Codec
from callwire.core.app import Application
from callwire.core.config import ServerConfig
from callwire.core.module import Module

logger = logging.getLogger(__name__)


class RpcModule(Module):
    """
    RPC as object: .server(path, handler) and .client(interface, processor).
    One object describes both accepting calls and calling other processors.
    """

    def __init__(self) -> None:
        self._server_path: str | None = None
        self._server_handler: Any = None
        self._server_codec: Codec | None = None
        self._dispatcher: Dispatcher | None = None
        self._clients: list[tuple[type, Any, Codec | None]] = []

    def server(self, path: str = "/rpc", handler: Any = None, *, codec: Codec | None = None) -> RpcModule:
        """
        POST route for incoming calls. handler: the target object (instance or module),
        a ready Dispatcher, or a class (then registered and resolved from container).
        To serve a class's static/class methods without instantiating it, pass Dispatcher(cls).
        """
        self._server_path = "/" + path.strip("/")
        self._server_handler = handler
        self._server_codec = codec
        return self

    def client(self, interface: type, processor: Any, *, codec: Codec | None = None) -> RpcModule:
        """Register a call proxy for interface in the container; processor: URL, transport or send()."""
        self._clients.append((interface, processor, codec))
        return self

    def register_into(self, app: Application) -> None:
        if self._server_path is not None:
            if self._server_handler is None:
                raise ValueError("RpcModule.server() requires a handler")
            if isinstance(self._server_handler, type):
                app.container.register_class(self._server_handler)
            app.add_route(self._server_path, self._make_endpoint(app), methods=["POST"])
            logger.debug(f"RPC endpoint registered at {self._server_path}")
        if self._clients:
            from callwire.calls.proxy import get_processor

            for interface, processor, codec in self._clients:
                app.container.register_instance(interface, get_processor(interface, processor, codec=codec))

    def dispatcher(self, app: Application) -> Dispatcher:
        """Dispatcher for the configured handler; built on first use."""
        if self._dispatcher is None:
            handler = self._server_handler
            if isinstance(handler, type):
                handler = app.container.resolve(handler)
            if isinstance(handler, Dispatcher):
                self._dispatcher = handler
            else:
                self._dispatcher = Dispatcher(handler, codec=self._server_codec)
        return self._dispatcher

    def _make_endpoint(self, app: Application) -> Any:
        async def endpoint(request: Request) -> Response:
            payload = await request.body()
            result = await self.dispatcher(app).handle_async(payload)
            return Response(content=result, media_type="application/json")
        return endpoint


def rpc_server(
    target: Any,
    *,
    path: str | None = None,
    config: ServerConfig | None = None,
    codec: Codec | None = None,
) -> Application:
    """One-liner: an Application with a single RPC route serving target. Call .run() to serve."""
    config = config or ServerConfig.from_env()
    if path is not None:
        config = dataclasses.replace(config, path=path)
    return Application(config=config).register(RpcModule().server(config.path, target, codec=codec))
