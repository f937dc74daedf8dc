"""Transport protocols: post request bytes, get response bytes. HTTP is one choice among many."""
from typing import Protocol, runtime_checkable


class TransportError(Exception):
    """Transport failed or returned something that is not a Result Envelope."""


@runtime_checkable
class Transport(Protocol):
    """Blocking request/response channel."""

    def post(self, payload: bytes) -> bytes:
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Request/response channel that suspends the calling task while waiting."""

    async def post(self, payload: bytes) -> bytes:
        ...
