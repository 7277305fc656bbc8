"""JSON serializer collaborator.

Encodes request bodies and decodes response bodies. Encoding produces compact
UTF-8 JSON (no whitespace, non-ASCII characters kept as-is) and refuses
``NaN``/``Infinity``, which have no JSON representation. Pydantic models are
accepted anywhere a plain value is and are dumped in ``json`` mode first.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, TypeAdapter, ValidationError

from reru.exceptions import SerializationError

JSON_CONTENT_TYPE = "application/json"


def _default(value: Any) -> Any:
    """``json.dumps`` fallback for objects nested inside plain containers."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(value: Any) -> bytes:
    """Encode *value* as compact UTF-8 JSON.

    Args:
        value: Any JSON-compatible value or a pydantic model.

    Returns:
        The encoded bytes.

    Raises:
        SerializationError: If *value* (or something nested in it) cannot be
            represented as JSON.
    """
    try:
        if isinstance(value, BaseModel):
            value = value.model_dump(mode="json")
        text = json.dumps(
            value,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
            default=_default,
        )
    except (TypeError, ValueError, RecursionError) as exc:
        raise SerializationError(f"Failed to serialize value as JSON: {exc}") from exc
    return text.encode("utf-8")


def deserialize(data: bytes | str, type_: Optional[Any] = None) -> Any:
    """Decode JSON *data*, optionally validating it into *type_*.

    Args:
        data: Raw JSON document.
        type_: Optional target type (a pydantic model, a ``list[int]``, ...).
            When given, the decoded value is validated with a
            :class:`pydantic.TypeAdapter`.

    Raises:
        SerializationError: If *data* is not valid JSON or does not match
            *type_*.
    """
    try:
        value = json.loads(data)
    except ValueError as exc:
        raise SerializationError(f"Failed to parse JSON: {exc}") from exc

    if type_ is None:
        return value
    try:
        return TypeAdapter(type_).validate_python(value)
    except ValidationError as exc:
        raise SerializationError(f"JSON does not match {type_!r}: {exc}") from exc
