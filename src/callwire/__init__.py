"""
Callwire: call exposed Python functions over a JSON envelope.
Receiver: @exposed members + Dispatcher (or RpcModule on an Application).
Caller: get_processor(Interface, url) returns an object implementing Interface.
"""
from callwire.calls import (
    CallEnvelope,
    Dispatcher,
    ErrorKind,
    Failure,
    FunctionCallError,
    Success,
    close_processor,
    exposed,
    get_processor,
)
from callwire.core import Application, Config, Container, Module, ServerConfig
from callwire.rpc import RpcModule, rpc_server

__all__ = [
    "Application",
    "CallEnvelope",
    "Config",
    "Container",
    "Dispatcher",
    "ErrorKind",
    "Failure",
    "FunctionCallError",
    "Module",
    "RpcModule",
    "ServerConfig",
    "Success",
    "close_processor",
    "exposed",
    "get_processor",
    "rpc_server",
]
