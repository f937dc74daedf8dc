"""Minimal DI container: call targets and client proxies registered by type, resolved on demand."""
from __future__ import annotations

import inspect
import sys
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _resolve_annotation(ann: str, cls: type[Any]) -> Any:
    """Resolve a string annotation (from __future__ annotations) to the actual class."""
    mod = sys.modules.get(cls.__module__)
    if mod is not None and hasattr(mod, ann):
        return getattr(mod, ann)
    return ann


def _instantiate_with_container(container: Container, cls: type[T]) -> T:
    """Create cls, resolving annotated __init__ parameters from the container; defaulted ones may be skipped."""
    sig = inspect.signature(cls)
    kwargs: dict[str, Any] = {}
    for name, param in sig.parameters.items():
        if param.annotation is inspect.Parameter.empty:
            continue
        ann = param.annotation
        if isinstance(ann, str):
            ann = _resolve_annotation(ann, cls)
        if ann not in container and param.default is not inspect.Parameter.empty:
            continue
        kwargs[name] = container.resolve(ann)
    return cls(**kwargs)


class Container:
    """
    Register by type (or key) and resolve via factory.
    Call targets given as classes are built here, with their dependencies.
    """

    def __init__(self) -> None:
        self._registry: dict[Any, Callable[[], Any]] = {}

    def register(self, key: type[T] | str, factory: Callable[[], T], singleton: bool = True) -> None:
        """Register a factory for a type or string key."""
        if singleton:
            factory = _once(factory)
        self._registry[key] = factory

    def register_instance(self, key: type[T] | str, instance: T) -> None:
        """Register a ready-made instance."""
        self._registry[key] = lambda: instance

    def register_class(self, cls: type[T], singleton: bool = True) -> None:
        """Register a class: on resolve an instance is created with dependencies from the container."""
        self.register(cls, lambda: _instantiate_with_container(self, cls), singleton=singleton)

    def resolve(self, key: type[T] | str) -> T:
        """Resolve an instance by type or key."""
        if key not in self._registry:
            raise KeyError(f"No registration for {key}")
        return self._registry[key]()

    def __contains__(self, key: object) -> bool:
        return key in self._registry


def _once(factory: Callable[[], T]) -> Callable[[], T]:
    instance: list[T] = []

    def get() -> T:
        if not instance:
            instance.append(factory())
        return instance[0]
    return get
