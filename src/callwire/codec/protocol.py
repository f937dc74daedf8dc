"""Codec protocol: one value to/from its string wire form, given the target type."""
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Codec(Protocol):
    """
    Value codec. encode() produces the string placed in functionArgs / value;
    decode() rebuilds a value of the declared type or raises.
    """

    def encode(self, value: Any) -> str:
        ...

    def decode(self, text: str, target_type: Any) -> Any:
        ...
