"""Transports out of the box: HTTP POST over httpx, and in-process dispatch."""
from __future__ import annotations

import logging
from typing import Any

import httpx

from callwire.calls.dispatcher import Dispatcher
from callwire.codec import Codec
from callwire.rpc.protocol import TransportError

logger = logging.getLogger(__name__)

_HEADERS = {"content-type": "application/json"}


class HttpTransport:
    """POST each envelope to one URL. Pass client= to reuse a configured httpx.Client."""

    def __init__(
        self,
        url: str,
        *,
        client: httpx.Client | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def post(self, payload: bytes) -> bytes:
        try:
            response = self._client.post(self.url, content=payload, headers=_HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"POST {self.url} failed: {e}")
            raise TransportError(str(e)) from e
        return response.content

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> HttpTransport:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncHttpTransport:
    """Async POST; without client= a short-lived httpx.AsyncClient is opened per call."""

    def __init__(
        self,
        url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = 30.0,
    ) -> None:
        self.url = url
        self._client = client
        self._timeout = timeout

    async def post(self, payload: bytes) -> bytes:
        try:
            if self._client is not None:
                response = await self._client.post(self.url, content=payload, headers=_HEADERS)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(self.url, content=payload, headers=_HEADERS)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.debug(f"POST {self.url} failed: {e}")
            raise TransportError(str(e)) from e
        return response.content


class LocalTransport:
    """Dispatch in-process against a target (or ready Dispatcher); same bytes as over HTTP."""

    def __init__(self, target: Any, *, codec: Codec | None = None) -> None:
        self.dispatcher = target if isinstance(target, Dispatcher) else Dispatcher(target, codec=codec)

    def post(self, payload: bytes) -> bytes:
        return self.dispatcher.handle(payload)


class AsyncLocalTransport(LocalTransport):
    """LocalTransport for async interfaces; coroutine functions on the target are awaited."""

    async def post(self, payload: bytes) -> bytes:  # type: ignore[override]
        return await self.dispatcher.handle_async(payload)
