"""
Dispatcher: request -> resolve -> invoke -> Result Envelope.
process_request* never raise; call_unsafely* raise the FunctionCallError family.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from callwire.calls.envelope import (
    Failure,
    ResultEnvelope,
    Success,
    parse_call_envelope,
    result_to_json,
)
from callwire.calls.errors import ExecutedFunctionThrowError, FunctionCallError
from callwire.calls.registry import FunctionRegistry
from callwire.calls.resolver import Binding, resolve
from callwire.codec import Codec, JsonCodec

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Serves calls against one target object (instance, class or module).
    Holds no per-call state, so one dispatcher can serve concurrent calls.
    """

    def __init__(
        self,
        target: Any,
        *,
        codec: Codec | None = None,
        registry: FunctionRegistry | None = None,
    ) -> None:
        self.target = target
        self.codec = codec or JsonCodec()
        self.registry = registry if registry is not None else FunctionRegistry.for_target(target)

    def _resolve(self, request: Any) -> Binding:
        envelope = parse_call_envelope(request)
        return resolve(
            envelope.function_name,
            envelope.function_args,
            self.target,
            codec=self.codec,
            registry=self.registry,
        )

    def call_unsafely(self, request: Any) -> Any:
        """Return the called function's value; raises FunctionCallError subclasses."""
        return self._resolve(request).invoke()

    async def call_unsafely_async(self, request: Any) -> Any:
        return await self._resolve(request).ainvoke()

    def process_request(self, request: Any) -> ResultEnvelope:
        """Always returns Success or Failure."""
        try:
            return self._success(self.call_unsafely(request))
        except Exception as e:
            return self._failure(e)

    async def process_request_async(self, request: Any) -> ResultEnvelope:
        try:
            return self._success(await self.call_unsafely_async(request))
        except Exception as e:
            return self._failure(e)

    def handle(self, payload: bytes) -> bytes:
        """Byte-level entry point for transports: JSON request in, JSON result out."""
        return result_to_json(self.process_request(_load(payload)))

    async def handle_async(self, payload: bytes) -> bytes:
        return result_to_json(await self.process_request_async(_load(payload)))

    def _success(self, value: Any) -> Success:
        if value is None:
            return Success(None)
        try:
            return Success(self.codec.encode(value))
        except Exception as e:
            raise ExecutedFunctionThrowError(f"return value could not be encoded: {type(e).__name__}: {e}") from e

    def _failure(self, error: Exception) -> Failure:
        if not isinstance(error, FunctionCallError):
            logger.exception("Unexpected error while dispatching call")
            error = ExecutedFunctionThrowError.from_exception(error)
        logger.debug(f"Call failed: {error}")
        return Failure(error.kind, error.message)


def _load(payload: bytes) -> Any:
    try:
        return json.loads(payload) if payload else {}
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return {}
