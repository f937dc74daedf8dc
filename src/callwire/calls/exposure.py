"""@exposed: marks a function or method as callable over the wire."""
from __future__ import annotations

from typing import Any, Callable, TypeVar, overload

F = TypeVar("F", bound=Callable[..., Any])

EXPOSED_ATTR = "__callwire_exposed__"


@overload
def exposed(func: F) -> F: ...


@overload
def exposed(name: str | None = None) -> Callable[[F], F]: ...


def exposed(func: Any = None) -> Any:
    """
    Mark a member as externally invokable.

        @exposed
        def add(self, a: int, b: int) -> int: ...

        @exposed("add")
        def add_text(self, a: str, b: str) -> str: ...

    Several members exposed under one name are overloads. Works under
    @staticmethod / @classmethod as well as on top of them.
    """
    if func is None or isinstance(func, str):
        name = func

        def decorator(f: F) -> F:
            return _mark(f, name)
        return decorator
    return _mark(func, None)


def _mark(func: Any, name: str | None) -> Any:
    target = func.__func__ if isinstance(func, (staticmethod, classmethod)) else func
    setattr(target, EXPOSED_ATTR, name or target.__name__)
    return func


def exposed_name(member: Any) -> str | None:
    """Wire name of a marked member (unwrapping static/class methods), else None."""
    if isinstance(member, (staticmethod, classmethod)):
        member = member.__func__
    name = getattr(member, EXPOSED_ATTR, None)
    return name if isinstance(name, str) else None
