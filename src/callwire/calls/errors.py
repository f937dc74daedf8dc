"""Error kinds of the call protocol and the exceptions that carry them."""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from callwire.calls.envelope import Failure


class ErrorKind(str, Enum):
    """Closed set of failure kinds carried by a Failure envelope."""

    INCORRECT_FUNCTION_NAME = "IncorrectFunctionName"
    INCORRECT_FUNCTION_ARGS = "IncorrectFunctionArgs"
    NO_MATCHING_FUNCTION_FOUND = "NoMatchingFunctionFound"
    EXECUTED_FUNCTION_THROW = "ExecutedFunctionThrow"


class FunctionCallError(Exception):
    """
    Call failed with one of the ErrorKind values.
    Raised by the dispatcher on the receiver side and by the call proxy
    on the caller side, so code can branch on .kind either way.
    """

    kind: ErrorKind

    def __init__(self, kind: ErrorKind, message: str) -> None:
        self.kind = ErrorKind(kind)
        self.message = message
        super().__init__(f"[{self.kind.value}] {message}")

    @staticmethod
    def from_failure(failure: Failure) -> FunctionCallError:
        """Rebuild the caller-side error for a Failure envelope."""
        return error_for_kind(failure.kind)(failure.message)


class IncorrectFunctionNameError(FunctionCallError):
    """`functionName` missing or not a string."""

    def __init__(self, message: str = "`functionName` key not found or is not a string.") -> None:
        super().__init__(ErrorKind.INCORRECT_FUNCTION_NAME, message)


class IncorrectFunctionArgsError(FunctionCallError):
    """`functionArgs` missing or not an object."""

    def __init__(self, message: str = "`functionArgs` key not found or is not a JSON object.") -> None:
        super().__init__(ErrorKind.INCORRECT_FUNCTION_ARGS, message)


class NoMatchingFunctionFoundError(FunctionCallError):
    """No exposed overload could take every supplied argument."""

    def __init__(self, message: str = "Function with specified params not found. Ensure the function is decorated with @exposed.") -> None:
        super().__init__(ErrorKind.NO_MATCHING_FUNCTION_FOUND, message)


class ExecutedFunctionThrowError(FunctionCallError):
    """The resolved function raised; on the receiver the original exception is __cause__."""

    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.EXECUTED_FUNCTION_THROW, message)

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExecutedFunctionThrowError:
        return cls(f"{type(exc).__name__}: {exc}")


_ERRORS_BY_KIND: dict[ErrorKind, type[FunctionCallError]] = {
    ErrorKind.INCORRECT_FUNCTION_NAME: IncorrectFunctionNameError,
    ErrorKind.INCORRECT_FUNCTION_ARGS: IncorrectFunctionArgsError,
    ErrorKind.NO_MATCHING_FUNCTION_FOUND: NoMatchingFunctionFoundError,
    ErrorKind.EXECUTED_FUNCTION_THROW: ExecutedFunctionThrowError,
}


def error_for_kind(kind: ErrorKind | str) -> type[FunctionCallError]:
    """Exception class for an ErrorKind (or its wire string)."""
    return _ERRORS_BY_KIND[ErrorKind(kind)]
