"""Turn the shape-variable responses of text-generation backends into text.

Responses are classified into a closed set of shapes first and each shape has
exactly one extraction rule, so callers never inspect fields themselves.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping, Sequence

TEXT_FIELDS = ("generated_text", "summary_text")


class ResponseShape(Enum):
    EMPTY = "empty"
    TEXT = "text"
    OBJECT_WITH_TEXT = "object_with_text"
    ARRAY = "array"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ClassifiedResponse:
    shape: ResponseShape
    value: Any


def _plain_numbers(value: Any) -> Any:
    # JSON.stringify writes 1.0 as 1
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {k: _plain_numbers(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain_numbers(v) for v in value]
    return value


def to_json(value: Any) -> str:
    """Compact JSON, same output as ``JSON.stringify`` for plain values."""
    return json.dumps(
        _plain_numbers(value), separators=(",", ":"), ensure_ascii=False, default=str
    )


def _falsy(value: Any) -> bool:
    """Falsy in the JavaScript sense: empty containers are truthy."""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and (value == 0 or value != value)


def _text_field(obj: Mapping[str, Any]) -> str | None:
    for key in TEXT_FIELDS:
        v = obj.get(key)
        if v:
            return v if isinstance(v, str) else to_json(v)
    return None


def classify(raw: Any) -> ClassifiedResponse:
    if raw is None or (isinstance(raw, str) and raw == ""):
        return ClassifiedResponse(ResponseShape.EMPTY, raw)
    if isinstance(raw, str):
        return ClassifiedResponse(ResponseShape.TEXT, raw)
    if isinstance(raw, Sequence) and not isinstance(raw, (bytes, bytearray)):
        return ClassifiedResponse(ResponseShape.ARRAY, list(raw))
    if isinstance(raw, Mapping) and _text_field(raw) is not None:
        return ClassifiedResponse(ResponseShape.OBJECT_WITH_TEXT, raw)
    return ClassifiedResponse(ResponseShape.UNKNOWN, raw)


def _from_array(items: list[Any]) -> str:
    if not items or _falsy(items[0]):
        return to_json(items)
    first = items[0]
    if isinstance(first, str):
        return first
    if isinstance(first, Mapping):
        text = _text_field(first)
        if text is not None:
            return text
        joined = "\n".join(v for v in first.values() if isinstance(v, str))
        return joined or to_json(first)
    return to_json(first)


_EXTRACTORS: dict[ResponseShape, Callable[[Any], str]] = {
    ResponseShape.EMPTY: lambda _: "",
    ResponseShape.TEXT: lambda v: v,
    ResponseShape.OBJECT_WITH_TEXT: lambda v: _text_field(v) or "",
    ResponseShape.ARRAY: _from_array,
    ResponseShape.UNKNOWN: to_json,
}


def normalize(raw: Any) -> str:
    classified = classify(raw)
    return _EXTRACTORS[classified.shape](classified.value)
