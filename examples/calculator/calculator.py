"""Calculator contract (shared by client and server) and the server-side implementation."""
from __future__ import annotations

from typing import Optional, Protocol

from callwire import exposed


class Calculator(Protocol):
    def add(self, a: int, b: int) -> int:
        ...

    def subtract(self, a: int, b: int) -> int:
        ...

    def divide_safely(self, a: int, b: int) -> Optional[int]:
        ...


class CalculatorImpl:
    @exposed
    def add(self, a: int, b: int) -> int:
        return a + b

    @exposed("add")
    def concat(self, a: str, b: str) -> str:
        return a + b

    @exposed
    def subtract(self, a: int, b: int) -> int:
        return a - b

    @exposed
    def divide_safely(self, a: int, b: int) -> Optional[int]:
        return None if b == 0 else a // b
