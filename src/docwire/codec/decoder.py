"""Wire-to-native decoder.

This module provides decode_value() that converts one tagged wire value to a
native Python value, and the document-level helpers built on top of it.

Decoding a validated wire model never fails. Malformed JSON payloads are
rejected earlier, when the raw body is validated into a wire model, and are
reported as DecodeError.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..exceptions import DecodeError
from ..models.record import DocumentPage, NativeRecord, NativeValue
from ..models.wire import ListDocumentsResponse, RunQueryResult, WireDocument, WireValue

# Order in which tags are consulted when more than one is set
TAG_PRECEDENCE = (
    "string_value",
    "integer_value",
    "double_value",
    "boolean_value",
    "null_value",
    "timestamp_value",
    "array_value",
    "map_value",
)


def decode_value(wire: WireValue) -> NativeValue:
    """Decode one wire value to a native value.

    Tags are checked in ``TAG_PRECEDENCE`` order and the first one present
    wins. A value with no recognized tag decodes to ``None``.

    Integers are parsed with ``int()``, so the full 64-bit range of the store
    survives without precision loss. Timestamps stay ISO-8601 strings.

    Args:
        wire: Wire value to decode

    Returns:
        Native value (str, int, float, bool, None, list or dict)

    Examples:
        ```python
        from docwire import WireValue, decode_value

        decode_value(WireValue(integer_value="7"))  # 7
        decode_value(WireValue.model_validate({"arrayValue": {}}))  # []
        decode_value(WireValue())  # None
        ```
    """
    present = wire.model_fields_set

    for tag in TAG_PRECEDENCE:
        if tag not in present:
            continue

        if tag == "string_value":
            return wire.string_value
        if tag == "integer_value":
            return int(wire.integer_value) if wire.integer_value is not None else None
        if tag == "double_value":
            return wire.double_value
        if tag == "boolean_value":
            return wire.boolean_value
        if tag == "null_value":
            return None
        if tag == "timestamp_value":
            return wire.timestamp_value
        if tag == "array_value":
            values = wire.array_value.values if wire.array_value is not None else None
            return [decode_value(item) for item in values or []]
        if tag == "map_value":
            fields = wire.map_value.fields if wire.map_value is not None else None
            return decode_fields(fields)

    # No tag set
    return None


def decode_fields(fields: Optional[Dict[str, WireValue]]) -> Dict[str, NativeValue]:
    """Decode a field mapping entry by entry (absent mapping -> ``{}``)."""
    if not fields:
        return {}
    return {name: decode_value(value) for name, value in fields.items()}


def document_id(path: str) -> str:
    """Extract the short document id from a resource path.

    Args:
        path: Slash-delimited resource path

    Returns:
        Last path segment, or ``""`` for an empty path

    Example:
        >>> document_id("projects/p/databases/(default)/documents/quizzes/abc123")
        'abc123'
    """
    return path.split("/")[-1]


def decode_document(doc: WireDocument) -> NativeRecord:
    """Decode a wire document to a native record.

    Args:
        doc: Wire document

    Returns:
        NativeRecord with the short id and decoded fields
    """
    return NativeRecord(id=document_id(doc.name), data=decode_fields(doc.fields))


def parse_value(raw: Any) -> NativeValue:
    """Validate a raw JSON wire value and decode it.

    Raises:
        DecodeError: If the payload is not a valid wire value
    """
    try:
        wire = WireValue.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Malformed wire value: {e}") from e
    return decode_value(wire)


def parse_document(raw: Any) -> NativeRecord:
    """Validate a raw JSON document body and decode it.

    Args:
        raw: Parsed JSON of one document

    Returns:
        Decoded record

    Raises:
        DecodeError: If the payload is not a valid document
    """
    try:
        doc = WireDocument.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Malformed document: {e}") from e
    return decode_document(doc)


def parse_list_response(raw: Any) -> DocumentPage:
    """Decode the body of a collection list response.

    A body without ``documents`` yields an empty page, never ``None``.

    Raises:
        DecodeError: If the payload is not a valid list response
    """
    try:
        response = ListDocumentsResponse.model_validate(raw)
    except ValidationError as e:
        raise DecodeError(f"Malformed list response: {e}") from e

    records = [decode_document(doc) for doc in response.documents or []]
    return DocumentPage(records=records, next_page_token=response.next_page_token or None)


def parse_query_results(raw: Any) -> List[NativeRecord]:
    """Decode the body of a ``:runQuery`` response.

    Envelopes without a document (progress markers carrying only
    ``readTime``) are dropped before decoding.

    Raises:
        DecodeError: If the payload is not a list of result envelopes
    """
    if not isinstance(raw, list):
        raise DecodeError(f"Malformed query response: expected a list, got {type(raw).__name__}")

    records: List[NativeRecord] = []
    for index, item in enumerate(raw):
        try:
            result = RunQueryResult.model_validate(item)
        except ValidationError as e:
            raise DecodeError(f"Malformed query result at index {index}: {e}") from e
        if result.document is not None:
            records.append(decode_document(result.document))
    return records
