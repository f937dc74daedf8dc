"""
Call Proxy: caller-side object implementing an interface whose every method
becomes a Call Envelope sent through a transport.

    class Calculator(Protocol):
        def add(self, a: int, b: int) -> int: ...

    calculator = get_processor(Calculator, "http://localhost:8000/rpc")
    calculator.add(3, 5)  # -> 8
"""
from __future__ import annotations

import functools
import inspect
import json
import logging
import typing
from functools import lru_cache
from typing import Any, Awaitable, Callable, Mapping, Sequence, TypeVar, Union

from callwire.calls.envelope import CallEnvelope, Failure, ResultEnvelope, parse_result
from callwire.calls.errors import FunctionCallError
from callwire.calls.exposure import exposed_name
from callwire.codec import Codec, JsonCodec
from callwire.rpc.protocol import AsyncTransport, Transport, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Send = Callable[[CallEnvelope], Union[ResultEnvelope, Awaitable[ResultEnvelope]]]


class CallProxy:
    """
    Generic invoke(name, args) -> decoded result, used by the generated interface stubs.
    Positional arguments are keyed "1", "2", ...; keyword arguments by name.
    """

    def __init__(
        self,
        send: Send,
        *,
        codec: Codec | None = None,
        on_close: Callable[[], None] | None = None,
    ) -> None:
        self._send = send
        self._codec = codec or JsonCodec()
        self._on_close = on_close

    def close(self) -> None:
        """Release the transport this proxy opened itself (URL processors); otherwise a no-op."""
        if self._on_close is not None:
            on_close, self._on_close = self._on_close, None
            on_close()

    def build_envelope(
        self,
        function_name: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
    ) -> CallEnvelope:
        function_args = {str(index): self._codec.encode(arg) for index, arg in enumerate(args, start=1)}
        for name, value in (kwargs or {}).items():
            function_args[name] = self._codec.encode(value)
        return CallEnvelope(function_name, function_args)

    def invoke(
        self,
        function_name: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        return_type: Any = Any,
    ) -> Any:
        result = self._send(self.build_envelope(function_name, args, kwargs))
        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            raise TypeError(f"{function_name}: transport is asynchronous, use ainvoke() or an async interface method")
        return self._unwrap(result, return_type)

    async def ainvoke(
        self,
        function_name: str,
        args: Sequence[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        return_type: Any = Any,
    ) -> Any:
        result = self._send(self.build_envelope(function_name, args, kwargs))
        if inspect.isawaitable(result):
            result = await result
        return self._unwrap(result, return_type)

    def _unwrap(self, result: ResultEnvelope, return_type: Any) -> Any:
        if isinstance(result, Failure):
            raise FunctionCallError.from_failure(result)
        if result.value is None or return_type is None or return_type is type(None):
            return None
        return self._codec.decode(result.value, return_type)


def transport_sender(transport: Transport) -> Send:
    """send() over a blocking byte transport."""

    def send(envelope: CallEnvelope) -> ResultEnvelope:
        return read_result(transport.post(envelope.to_json()))
    return send


def async_transport_sender(transport: AsyncTransport) -> Send:
    """send() over an async byte transport."""

    async def send(envelope: CallEnvelope) -> ResultEnvelope:
        return read_result(await transport.post(envelope.to_json()))
    return send


def read_result(payload: bytes) -> ResultEnvelope:
    try:
        return parse_result(json.loads(payload))
    except ValueError as e:
        raise TransportError(f"unreadable response: {e}") from e


def get_processor(interface: type[T], processor: Any, *, codec: Codec | None = None) -> T:
    """
    Implementation of interface that forwards every public method to processor:
    a URL (HTTP POST), a Transport / AsyncTransport, or a send(CallEnvelope) callable.

    A URL opens an HttpTransport owned by the proxy: use the proxy as a context manager
    or call close_processor(proxy) to release it. Transports passed in stay the caller's to close.
    """
    if isinstance(processor, str):
        from callwire.rpc.transports import HttpTransport

        transport = HttpTransport(processor)
        call_proxy = CallProxy(transport_sender(transport), codec=codec, on_close=transport.close)
    else:
        call_proxy = CallProxy(_sender_for(processor), codec=codec)
    return _proxy_class(interface)(call_proxy)


def close_processor(proxy: Any) -> None:
    """Close what get_processor() opened for proxy."""
    proxy._callwire_proxy.close()


def _sender_for(processor: Any) -> Send:
    post = getattr(processor, "post", None)
    if callable(post):
        if inspect.iscoroutinefunction(post):
            return async_transport_sender(processor)
        return transport_sender(processor)
    if callable(processor):
        return processor
    raise TypeError(f"processor must be a URL, a transport or a send callable, got {type(processor).__name__}")


@lru_cache(maxsize=None)
def _proxy_class(interface: type) -> type:
    namespace: dict[str, Any] = {
        "__init__": _proxy_init,
        "__repr__": _proxy_repr,
        "__enter__": _proxy_enter,
        "__exit__": _proxy_exit,
    }
    for attribute, method in _interface_methods(interface).items():
        namespace[attribute] = _make_stub(attribute, method)
    proxy_class = type(f"{interface.__name__}Proxy", (interface,), namespace)
    logger.debug(f"Built call proxy for {interface.__qualname__}: {', '.join(_interface_methods(interface))}")
    return proxy_class


def _proxy_init(self: Any, call_proxy: CallProxy) -> None:
    self._callwire_proxy = call_proxy


def _proxy_repr(self: Any) -> str:
    return f"<{type(self).__name__} call proxy>"


def _proxy_enter(self: Any) -> Any:
    return self


def _proxy_exit(self: Any, *exc_info: Any) -> None:
    self._callwire_proxy.close()


def _interface_methods(interface: type) -> dict[str, Callable[..., Any]]:
    methods: dict[str, Callable[..., Any]] = {}
    for klass in reversed(interface.__mro__):
        if klass in (object, typing.Protocol, typing.Generic):
            continue
        for attribute, member in vars(klass).items():
            if attribute.startswith("_") or not inspect.isfunction(member):
                continue
            methods[attribute] = member
    return methods


def _make_stub(attribute: str, method: Callable[..., Any]) -> Callable[..., Any]:
    signature = inspect.signature(method)
    function_name = exposed_name(method) or attribute
    try:
        return_type = typing.get_type_hints(method).get("return", Any)
    except Exception as e:
        logger.warning(f"Cannot resolve return annotation of {method.__qualname__}, decoding as Any: {e}")
        return_type = Any

    if inspect.iscoroutinefunction(method):
        async def stub(self: Any, *args: Any, **kwargs: Any) -> Any:
            signature.bind(self, *args, **kwargs)
            return await self._callwire_proxy.ainvoke(function_name, args, kwargs, return_type)
    else:
        def stub(self: Any, *args: Any, **kwargs: Any) -> Any:
            signature.bind(self, *args, **kwargs)
            return self._callwire_proxy.invoke(function_name, args, kwargs, return_type)

    functools.update_wrapper(stub, method)
    stub.__isabstractmethod__ = False  # type: ignore[attr-defined]
    return stub
