"""
CLI: serve a target's exposed functions over HTTP, call a remote function, list what a target exposes.
Targets are given as module:attribute (an instance, a class to instantiate, or a module).
"""
import importlib
import logging
from typing import Any, List, Optional

import typer

from callwire.calls.envelope import CallEnvelope, Failure
from callwire.calls.proxy import transport_sender
from callwire.calls.registry import FunctionRegistry
from callwire.core.config import ServerConfig
from callwire.rpc.protocol import TransportError
from callwire.rpc.rpc_module import rpc_server
from callwire.rpc.transports import HttpTransport

app = typer.Typer(help="Callwire CLI: serve exposed functions and call them.")


def _load_target(spec: str) -> Any:
    module_name, _, attribute = spec.partition(":")
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"cannot import {module_name!r}: {e}") from e
    for part in filter(None, attribute.split(".")):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise typer.BadParameter(f"{module_name!r} has no attribute {attribute!r}") from e
    return target


def _split_args(args: list[str]) -> dict[str, str]:
    """name=value pairs keep their name; bare values are numbered 1, 2, ... in order."""
    function_args: dict[str, str] = {}
    position = 0
    for arg in args:
        key, sep, value = arg.partition("=")
        if sep and (key.isidentifier() or key.isdigit()):
            function_args[key] = value
        else:
            position += 1
            function_args[str(position)] = arg
    return function_args


@app.command()
def serve(
    target: str = typer.Argument(..., help="module:attribute to serve (instance, class or module)"),
    host: Optional[str] = typer.Option(None, "--host", help="Bind host [env CALLWIRE_HOST]"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port [env CALLWIRE_PORT]"),
    path: Optional[str] = typer.Option(None, "--path", help="Endpoint path [env CALLWIRE_PATH]"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level [env CALLWIRE_LOG_LEVEL]"),
) -> None:
    """Serve the exposed functions of TARGET on one POST endpoint."""
    config = ServerConfig.from_env(host=host, port=port, path=path, log_level=log_level)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    handler = _load_target(target)
    rpc_server(handler, config=config).run()


@app.command()
def call(
    url: str = typer.Argument(..., help="Endpoint URL, e.g. http://localhost:8000/rpc"),
    function: str = typer.Argument(..., help="Function name"),
    args: Optional[List[str]] = typer.Argument(None, help="Encoded arguments: name=value or bare value (positional)"),
    timeout: float = typer.Option(30.0, "--timeout", help="Request timeout in seconds"),
) -> None:
    """Call FUNCTION at URL and print the encoded result."""
    envelope = CallEnvelope(function, _split_args(args or []))
    transport = HttpTransport(url, timeout=timeout)
    try:
        result = transport_sender(transport)(envelope)
    except TransportError as e:
        typer.echo(f"Transport error: {e}", err=True)
        raise typer.Exit(2)
    finally:
        transport.close()
    if isinstance(result, Failure):
        typer.echo(f"{result.kind.value}: {result.message}", err=True)
        raise typer.Exit(1)
    typer.echo("null" if result.value is None else result.value)


@app.command()
def functions(
    target: str = typer.Argument(..., help="module:attribute to inspect"),
) -> None:
    """List the exposed functions of TARGET with their signatures."""
    handler = _load_target(target)
    if isinstance(handler, type):
        registry = FunctionRegistry.for_instances_of(handler)
    else:
        registry = FunctionRegistry.for_target(handler)
    if not len(registry):
        typer.echo("No exposed functions.")
        return
    for function in registry:
        typer.echo(function.describe())


def main() -> None:
    """Entry point for the callwire console command."""
    app()


if __name__ == "__main__":
    main()
