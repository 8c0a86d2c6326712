"""Native-to-wire encoder.

This module provides the encode_value() function that converts a native Python
value to a tagged wire value, and encode_fields() for whole document bodies.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Dict, Union

from pydantic import BaseModel

from ..exceptions import EncodeError
from ..models.wire import ArrayValue, MapValue, WireValue


def encode_value(value: Any) -> WireValue:
    """Encode a native value to a wire value.

    Types are discriminated in a fixed order:

    1. ``None`` -> ``nullValue``
    2. ``str`` -> ``stringValue``
    3. ``bool`` -> ``booleanValue`` (before numbers, since bool is an int)
    4. ``int``/``float`` -> ``integerValue`` when integral, else ``doubleValue``
    5. ``datetime`` -> ``timestampValue`` (UTC, ISO-8601)
    6. ``list``/``tuple`` -> ``arrayValue``
    7. Mapping or Pydantic model -> ``mapValue``

    An integral float such as ``7.0`` is sent as ``integerValue`` and comes
    back as the int ``7``. The two compare equal, but the float type is lost.

    Args:
        value: Native value to encode

    Returns:
        Wire value with exactly one tag set

    Raises:
        EncodeError: If the value (or a nested value) has an unsupported type

    Examples:
        ```python
        from docwire import encode_value

        encode_value(7).to_wire()      # {"integerValue": "7"}
        encode_value(7.5).to_wire()    # {"doubleValue": 7.5}
        encode_value(True).to_wire()   # {"booleanValue": True}
        encode_value(None).to_wire()   # {"nullValue": None}
        ```
    """
    if value is None:
        return WireValue(null_value=None)

    if isinstance(value, str):
        return WireValue(string_value=value)

    if isinstance(value, bool):
        return WireValue(boolean_value=value)

    if isinstance(value, (int, float)):
        return encode_number(value)

    if isinstance(value, datetime):
        return WireValue(timestamp_value=format_timestamp(value))

    if isinstance(value, (list, tuple)):
        return WireValue(array_value=ArrayValue(values=[encode_value(item) for item in value]))

    if isinstance(value, BaseModel):
        return WireValue(map_value=MapValue(fields=encode_fields(value)))

    if isinstance(value, Mapping):
        return WireValue(map_value=MapValue(fields=encode_fields(value)))

    raise EncodeError(f"Cannot encode value of type {type(value).__name__}: {value!r}")


def encode_fields(data: Union[Mapping[str, Any], BaseModel]) -> Dict[str, WireValue]:
    """Encode every entry of a mapping (or Pydantic model) field by field.

    Args:
        data: Field name to native value, or a Pydantic model instance

    Returns:
        Field name to wire value

    Raises:
        EncodeError: If a key is not a string or a value cannot be encoded
    """
    if isinstance(data, BaseModel):
        data = data.model_dump()

    fields: Dict[str, WireValue] = {}
    for key, item in data.items():
        if not isinstance(key, str):
            raise EncodeError(f"Field names must be strings, got {type(key).__name__}: {key!r}")
        try:
            fields[key] = encode_value(item)
        except EncodeError as e:
            raise EncodeError(f"Field {key}: {e}") from e
    return fields


def format_timestamp(value: datetime) -> str:
    """Format a datetime as an ISO-8601 UTC timestamp with a ``Z`` suffix.

    Naive datetimes are taken to be UTC already.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="microseconds").replace("+00:00", "Z")


def encode_number(value: int | float) -> WireValue:
    """Encode a number as ``integerValue`` when integral, else ``doubleValue``."""
    if isinstance(value, int):
        return WireValue(integer_value=str(value))
    if math.isfinite(value) and value.is_integer():
        return WireValue(integer_value=str(int(value)))
    return WireValue(double_value=value)
