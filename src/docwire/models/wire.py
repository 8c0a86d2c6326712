"""Wire-format models for the document-store REST protocol.

These models mirror the JSON the store sends and accepts, field for field.
They are transient: built from a response body right before decoding, or
right before serializing a request body.
"""

from __future__ import annotations

import math
import re
from typing import Dict, List, Optional, Union

from pydantic import field_serializer, field_validator

from .base import WireModel

_INTEGER_TEXT = re.compile(r"^[+-]?\d+$")


class WireValue(WireModel):
    """Tagged union of one store value.

    Exactly one tag should be set. Decoding still resolves deterministically
    if several are (see ``docwire.codec.decoder.TAG_PRECEDENCE``), and an
    instance with no tag set decodes to ``None``.

    Attributes:
        string_value: ``stringValue``
        integer_value: ``integerValue``, decimal text of a signed integer
        double_value: ``doubleValue``, IEEE-754 double
        boolean_value: ``booleanValue``
        null_value: ``nullValue``, always ``None`` when set
        timestamp_value: ``timestampValue``, ISO-8601 text
        array_value: ``arrayValue``
        map_value: ``mapValue``
    """

    string_value: Optional[str] = None
    integer_value: Optional[str] = None
    double_value: Optional[float] = None
    boolean_value: Optional[bool] = None
    null_value: None = None
    timestamp_value: Optional[str] = None
    array_value: Optional[ArrayValue] = None
    map_value: Optional[MapValue] = None

    @field_validator("integer_value")
    @classmethod
    def _check_integer_text(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _INTEGER_TEXT.match(value):
            raise ValueError(f"integerValue must be decimal integer text, got {value!r}")
        return value

    @field_serializer("double_value")
    def _serialize_double(self, value: Optional[float]) -> Optional[Union[float, str]]:
        # JSON has no literal for these; the protocol spells them as strings
        if value is None or math.isfinite(value):
            return value
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"


class ArrayValue(WireModel):
    """Ordered sequence of wire values (``values`` may be absent)."""

    values: Optional[List[WireValue]] = None


class MapValue(WireModel):
    """Mapping of field name to wire value (``fields`` may be absent)."""

    fields: Optional[Dict[str, WireValue]] = None


class WireDocument(WireModel):
    """One stored document.

    Attributes:
        name: Full resource path; the last segment is the short document id
        fields: Field name to wire value (absent for an empty document)
        create_time: Server creation timestamp, if returned
        update_time: Server update timestamp, if returned
    """

    name: str = ""
    fields: Optional[Dict[str, WireValue]] = None
    create_time: Optional[str] = None
    update_time: Optional[str] = None


class ListDocumentsResponse(WireModel):
    """Body of a collection list response."""

    documents: Optional[List[WireDocument]] = None
    next_page_token: Optional[str] = None


class RunQueryResult(WireModel):
    """One envelope of a ``:runQuery`` response.

    Envelopes that only report progress carry ``readTime`` and no document.
    """

    document: Optional[WireDocument] = None
    read_time: Optional[str] = None
    skipped_results: Optional[int] = None


WireValue.model_rebuild()
ArrayValue.model_rebuild()
MapValue.model_rebuild()
