"""Module protocol: anything with register_into(app) can be attached to an Application."""
from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from callwire.core.app import Application


@runtime_checkable
class Module(Protocol):
    """Configured on its own (RpcModule().server(...).client(...)), then passed to app.register(module)."""

    def register_into(self, app: Application) -> None:
        """Add routes and container registrations to app."""
        ...
