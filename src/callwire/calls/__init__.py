"""Function-call protocol: exposure, registry, resolution, dispatch and the caller-side proxy."""
from callwire.calls.errors import (
    ErrorKind,
    ExecutedFunctionThrowError,
    FunctionCallError,
    IncorrectFunctionArgsError,
    IncorrectFunctionNameError,
    NoMatchingFunctionFoundError,
    error_for_kind,
)
from callwire.calls.envelope import CallEnvelope, Failure, ResultEnvelope, Success, parse_call_envelope, parse_result
from callwire.calls.exposure import exposed
from callwire.calls.registry import ExposedFunction, FunctionRegistry, ParameterDescriptor
from callwire.calls.resolver import Binding, resolve
from callwire.calls.dispatcher import Dispatcher
from callwire.calls.proxy import (
    CallProxy,
    async_transport_sender,
    close_processor,
    get_processor,
    transport_sender,
)

__all__ = [
    "Binding",
    "CallEnvelope",
    "CallProxy",
    "Dispatcher",
    "ErrorKind",
    "ExecutedFunctionThrowError",
    "ExposedFunction",
    "Failure",
    "FunctionCallError",
    "FunctionRegistry",
    "IncorrectFunctionArgsError",
    "IncorrectFunctionNameError",
    "NoMatchingFunctionFoundError",
    "ParameterDescriptor",
    "ResultEnvelope",
    "Success",
    "async_transport_sender",
    "close_processor",
    "error_for_kind",
    "exposed",
    "get_processor",
    "parse_call_envelope",
    "parse_result",
    "resolve",
    "transport_sender",
]
