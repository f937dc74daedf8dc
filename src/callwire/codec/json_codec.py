"""JSON codec backed by pydantic: strict decoding so overloads can be told apart by type."""
from __future__ import annotations

import inspect
from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter
from pydantic_core import to_json


@lru_cache(maxsize=256)
def _adapter(target_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target_type)


class JsonCodec:
    """
    encode(value) -> JSON text; decode(text, type) -> value validated in strict mode.
    Strict mode is what keeps '"3"' from decoding as int and '3' from decoding as str.
    Optional[T] / T | None is the nullable variant of every type.
    """

    def __init__(self, *, strict: bool = True) -> None:
        self._strict = strict

    def encode(self, value: Any) -> str:
        return to_json(value).decode()

    def decode(self, text: str, target_type: Any = Any) -> Any:
        if target_type is inspect.Parameter.empty:
            target_type = Any
        try:
            adapter = _adapter(target_type)
        except TypeError:
            # unhashable type expressions skip the cache
            adapter = TypeAdapter(target_type)
        return adapter.validate_json(text, strict=self._strict)
