"""
Function Registry: the exposed members of a target, grouped by wire name.
Built once per owner (class of an instance target, or the class/module target itself)
from its static shape, cached and read-only afterwards.
"""
from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass
from functools import lru_cache
from types import ModuleType
from typing import Any, Callable, Iterable, Iterator

from callwire.calls.exposure import exposed_name

logger = logging.getLogger(__name__)

_EMPTY = inspect.Parameter.empty


@dataclass(frozen=True)
class ParameterDescriptor:
    """One bindable parameter: name, 1-based position, declared type, default."""

    name: str
    position: int
    annotation: Any = Any
    default: Any = _EMPTY
    kind: Any = inspect.Parameter.POSITIONAL_OR_KEYWORD

    @property
    def required(self) -> bool:
        return self.default is _EMPTY

    def matches(self, key: str) -> bool:
        return key == self.name or key == str(self.position)


@dataclass(frozen=True)
class ExposedFunction:
    """
    One overload. attribute is looked up on the target at call time so
    instance, static and class methods come back bound the way Python binds them;
    func is used instead for callables registered explicitly.
    """

    name: str
    parameters: tuple[ParameterDescriptor, ...]
    signature: inspect.Signature
    return_type: Any = Any
    attribute: str | None = None
    func: Callable[..., Any] | None = None
    is_coroutine: bool = False

    def parameter_for(self, key: str) -> ParameterDescriptor | None:
        for param in self.parameters:
            if param.matches(key):
                return param
        return None

    def callable_for(self, target: Any) -> Callable[..., Any]:
        if self.func is not None:
            return self.func
        return getattr(target, self.attribute)

    def describe(self) -> str:
        return f"{self.name}{self.signature}"

    @classmethod
    def from_callable(
        cls,
        func: Callable[..., Any],
        *,
        name: str | None = None,
        attribute: str | None = None,
        drop_first: bool = False,
    ) -> ExposedFunction:
        """Describe func; drop_first strips self/cls for methods looked up on a target."""
        signature = inspect.signature(func)
        params = list(signature.parameters.values())
        if drop_first:
            params = params[1:]
        hints = _type_hints(func)
        descriptors = []
        for position, param in enumerate(params, start=1):
            if param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD):
                continue
            descriptors.append(
                ParameterDescriptor(
                    name=param.name,
                    position=position,
                    annotation=_annotation(hints.get(param.name, param.annotation)),
                    default=param.default,
                    kind=param.kind,
                )
            )
        return cls(
            name=name or exposed_name(func) or func.__name__,
            parameters=tuple(descriptors),
            signature=signature.replace(parameters=params),
            return_type=_annotation(hints.get("return", signature.return_annotation)),
            attribute=attribute,
            func=None if attribute is not None else func,
            is_coroutine=inspect.iscoroutinefunction(func),
        )


def _type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except Exception as e:
        logger.warning(f"Cannot resolve annotations of {getattr(func, '__qualname__', func)!r}, decoding as Any: {e}")
        return {}


def _annotation(annotation: Any) -> Any:
    if annotation is _EMPTY or isinstance(annotation, str):
        return Any
    return annotation


class FunctionRegistry:
    """Wire name -> ordered overloads. Order is declaration order; callers must not depend on it."""

    def __init__(self, functions: Iterable[ExposedFunction] = ()) -> None:
        by_name: dict[str, list[ExposedFunction]] = {}
        for function in functions:
            by_name.setdefault(function.name, []).append(function)
        self._by_name = {name: tuple(group) for name, group in by_name.items()}

    def candidates(self, name: str) -> tuple[ExposedFunction, ...]:
        return self._by_name.get(name, ())

    def names(self) -> list[str]:
        return list(self._by_name)

    def __iter__(self) -> Iterator[ExposedFunction]:
        for group in self._by_name.values():
            yield from group

    def __len__(self) -> int:
        return sum(len(group) for group in self._by_name.values())

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    @classmethod
    def from_callables(cls, *funcs: Callable[..., Any] | tuple[str, Callable[..., Any]]) -> FunctionRegistry:
        """
        Explicit registration list: plain callables (wire name from @exposed or __name__)
        or (name, callable) pairs. Nothing is looked up on a target.
        """
        functions = []
        for item in funcs:
            if isinstance(item, tuple):
                name, func = item
                functions.append(ExposedFunction.from_callable(func, name=name))
            else:
                functions.append(ExposedFunction.from_callable(item))
        return cls(functions)

    @classmethod
    def for_target(cls, target: Any) -> FunctionRegistry:
        """Registry of the @exposed members reachable on target (cached per owner)."""
        if isinstance(target, (type, ModuleType)):
            return _registry_for_owner(target, False)
        return cls.for_instances_of(type(target))

    @classmethod
    def for_instances_of(cls, owner: type) -> FunctionRegistry:
        """Registry as seen through an instance of owner: instance, static and class methods."""
        return _registry_for_owner(owner, True)


@lru_cache(maxsize=None)
def _registry_for_owner(owner: type | ModuleType, instance_target: bool) -> FunctionRegistry:
    functions = []
    for attribute, member in _members(owner).items():
        name = exposed_name(member)
        if name is None:
            continue
        if isinstance(member, staticmethod):
            func, drop_first = member.__func__, False
        elif isinstance(member, classmethod):
            func, drop_first = member.__func__, True
        elif inspect.isfunction(member) and isinstance(owner, type):
            if not instance_target:
                logger.debug(f"Skipping instance method {owner.__name__}.{attribute}: target is the class itself")
                continue
            func, drop_first = member, True
        elif callable(member):
            func, drop_first = member, False
        else:
            continue
        functions.append(
            ExposedFunction.from_callable(func, name=name, attribute=attribute, drop_first=drop_first)
        )
    registry = FunctionRegistry(functions)
    logger.debug(f"Built registry for {getattr(owner, '__name__', owner)!r}: {len(registry)} exposed function(s)")
    return registry


def _members(owner: type | ModuleType) -> dict[str, Any]:
    """Raw attributes in declaration order, base classes first; overrides keep the base position."""
    if isinstance(owner, ModuleType):
        return dict(vars(owner))
    members: dict[str, Any] = {}
    for klass in reversed(owner.__mro__):
        if klass is object:
            continue
        for attribute, member in vars(klass).items():
            members[attribute] = member
    return members
