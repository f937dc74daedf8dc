"""
Resolver / argument binder: pick the exposed overload that can take every supplied argument.

A key that matches no parameter, or whose value does not decode to the parameter's
declared type, is dropped; a candidate is rejected unless every supplied argument
was bound. That rejection is what drives overload selection, so a misspelt argument
name surfaces only as NoMatchingFunctionFound.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, Coroutine, Mapping

from callwire.calls.errors import ExecutedFunctionThrowError, NoMatchingFunctionFoundError
from callwire.calls.registry import ExposedFunction, FunctionRegistry
from callwire.codec import Codec, JsonCodec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    """A candidate whose arguments are decoded and shape-checked; invoking it is terminal."""

    function: ExposedFunction
    call: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def invoke(self) -> Any:
        """
        Call the function. A coroutine result is run to completion with asyncio.run,
        on a worker thread when this thread already runs an event loop.
        """
        try:
            result = self.call(*self.args, **self.kwargs)
            if inspect.iscoroutine(result):
                result = _run_to_completion(result)
            return result
        except Exception as e:
            logger.warning(f"Exposed function {self.function.name!r} raised {type(e).__name__}: {e}")
            raise ExecutedFunctionThrowError.from_exception(e) from e

    async def ainvoke(self) -> Any:
        try:
            result = self.call(*self.args, **self.kwargs)
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as e:
            logger.warning(f"Exposed function {self.function.name!r} raised {type(e).__name__}: {e}")
            raise ExecutedFunctionThrowError.from_exception(e) from e


def _run_to_completion(coro: Coroutine[Any, Any, Any]) -> Any:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="callwire-invoke") as pool:
        return pool.submit(asyncio.run, coro).result()


def resolve(
    function_name: str,
    function_args: Mapping[str, Any],
    target: Any,
    *,
    codec: Codec | None = None,
    registry: FunctionRegistry | None = None,
) -> Binding:
    """
    Return the binding of the first overload (declaration order) that consumes
    every supplied argument and leaves only defaulted parameters unbound.
    Raises NoMatchingFunctionFoundError when there is none.
    """
    codec = codec or JsonCodec()
    if registry is None:
        registry = FunctionRegistry.for_target(target)
    candidates = registry.candidates(function_name)
    if not candidates:
        logger.debug(f"No exposed function named {function_name!r}")
    for function in candidates:
        binding = bind_arguments(function, function_args, target, codec)
        if binding is not None:
            return binding
    raise NoMatchingFunctionFoundError()


def bind_arguments(
    function: ExposedFunction,
    function_args: Mapping[str, Any],
    target: Any,
    codec: Codec,
) -> Binding | None:
    """Bind function_args to one candidate; None means the candidate is rejected."""
    bound: dict[str, Any] = {}
    for key, encoded in function_args.items():
        param = function.parameter_for(key)
        if param is None or not isinstance(encoded, str):
            continue
        try:
            bound[param.name] = codec.decode(encoded, param.annotation)
        except Exception:
            continue

    if len(bound) != len(function_args):
        logger.debug(
            f"Rejected {function.describe()}: bound {len(bound)} of {len(function_args)} argument(s)"
        )
        return None

    missing = [p.name for p in function.parameters if p.required and p.name not in bound]
    if missing:
        logger.debug(f"Rejected {function.describe()}: no value for {', '.join(missing)}")
        return None

    args: list[Any] = []
    kwargs: dict[str, Any] = {}
    for param in function.parameters:
        if param.kind is inspect.Parameter.POSITIONAL_ONLY:
            args.append(bound.get(param.name, param.default))
        elif param.name in bound:
            kwargs[param.name] = bound[param.name]

    try:
        function.signature.bind(*args, **kwargs)
    except TypeError as e:
        logger.debug(f"Rejected {function.describe()}: {e}")
        return None

    return Binding(function, function.callable_for(target), tuple(args), kwargs)
