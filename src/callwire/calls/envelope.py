"""
Wire model: Call Envelope (request) and Result Envelope (Success | Failure).
Envelopes are created per call and never shared.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from callwire.calls.errors import (
    ErrorKind,
    IncorrectFunctionArgsError,
    IncorrectFunctionNameError,
)

FUNCTION_NAME = "functionName"
FUNCTION_ARGS = "functionArgs"


@dataclass(frozen=True)
class CallEnvelope:
    """Request: function name + encoded arguments keyed by parameter name or 1-based index."""

    function_name: str
    function_args: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {FUNCTION_NAME: self.function_name, FUNCTION_ARGS: dict(self.function_args)}

    def to_json(self) -> bytes:
        return json.dumps(self.to_dict()).encode()


@dataclass(frozen=True)
class Success:
    """Call succeeded; value is the codec-encoded return value or None."""

    value: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": True, "value": self.value}


@dataclass(frozen=True)
class Failure:
    """Call failed with one of the protocol error kinds."""

    kind: ErrorKind
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": {"kind": ErrorKind(self.kind).value, "message": self.message}}


ResultEnvelope = Union[Success, Failure]


def parse_call_envelope(data: Any) -> CallEnvelope:
    """
    Extract functionName and functionArgs from decoded request data.
    Name is checked first; either both are valid or the first bad one raises.
    """
    function_name = data.get(FUNCTION_NAME) if isinstance(data, Mapping) else None
    if not isinstance(function_name, str):
        raise IncorrectFunctionNameError()
    function_args = data.get(FUNCTION_ARGS)
    if not isinstance(function_args, Mapping):
        raise IncorrectFunctionArgsError()
    return CallEnvelope(function_name, dict(function_args))


def result_to_json(result: ResultEnvelope) -> bytes:
    return json.dumps(result.to_dict()).encode()


def parse_result(data: Any) -> ResultEnvelope:
    """Decoded response data -> Success | Failure. Raises ValueError on anything else."""
    if not isinstance(data, Mapping) or not isinstance(data.get("success"), bool):
        raise ValueError(f"not a result envelope: {data!r}")
    if data["success"]:
        value = data.get("value")
        if value is not None and not isinstance(value, str):
            raise ValueError(f"result value must be an encoded string or null, got {type(value).__name__}")
        return Success(value)
    error = data.get("error")
    if not isinstance(error, Mapping):
        raise ValueError(f"failure envelope without error object: {data!r}")
    try:
        kind = ErrorKind(error.get("kind"))
    except ValueError as e:
        raise ValueError(f"unknown error kind {error.get('kind')!r}") from e
    return Failure(kind, str(error.get("message", "")))
