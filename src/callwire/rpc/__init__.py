from callwire.rpc.protocol import AsyncTransport, Transport, TransportError
from callwire.rpc.transports import AsyncHttpTransport, AsyncLocalTransport, HttpTransport, LocalTransport
from callwire.rpc.rpc_module import RpcModule, rpc_server

__all__ = [
    "AsyncHttpTransport",
    "AsyncLocalTransport",
    "AsyncTransport",
    "HttpTransport",
    "LocalTransport",
    "RpcModule",
    "Transport",
    "TransportError",
    "rpc_server",
]
