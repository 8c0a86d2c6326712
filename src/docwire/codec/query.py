"""Structured query construction.

This module builds ``:runQuery`` request bodies for single-field equality and
inequality filters.
"""

from __future__ import annotations

import logging
from typing import Any

from ..exceptions import EncodeError
from ..models.wire import WireValue
from .encoder import encode_number

logger = logging.getLogger(__name__)

OPERATORS = {
    "==": "EQUAL",
    "!=": "NOT_EQUAL",
}

DEFAULT_OPERATOR = "EQUAL"


def filter_operator(op: str) -> str:
    """Map a comparison symbol to the store's field filter operator.

    Only ``==`` and ``!=`` are recognized. Anything else falls back to
    ``EQUAL``.

    Example:
        >>> filter_operator("!=")
        'NOT_EQUAL'
        >>> filter_operator(">")
        'EQUAL'
    """
    mapped = OPERATORS.get(op)
    if mapped is None:
        logger.debug("Unrecognized filter operator %r, using %s", op, DEFAULT_OPERATOR)
        return DEFAULT_OPERATOR
    return mapped


def encode_filter_value(value: Any) -> WireValue:
    """Encode a filter comparison value.

    Filters only compare scalars: strings, booleans and numbers.

    Raises:
        EncodeError: For None, sequences, mappings and any other type
    """
    if isinstance(value, str):
        return WireValue(string_value=value)
    if isinstance(value, bool):
        return WireValue(boolean_value=value)
    if isinstance(value, (int, float)):
        return encode_number(value)
    raise EncodeError(
        f"Filter values must be str, int, float or bool, got {type(value).__name__}"
    )


def build_structured_query(collection: str, field: str, op: str, value: Any) -> dict[str, Any]:
    """Build a ``:runQuery`` body selecting documents by one field filter.

    Args:
        collection: Collection id to query
        field: Field path to compare
        op: ``==`` or ``!=`` (other symbols fall back to ``==``)
        value: Scalar comparison value

    Returns:
        JSON-ready request body

    Raises:
        EncodeError: If value is not a scalar

    Example:
        ```python
        build_structured_query("users", "role", "==", "teacher")
        # {"structuredQuery": {
        #     "from": [{"collectionId": "users"}],
        #     "where": {"fieldFilter": {
        #         "field": {"fieldPath": "role"},
        #         "op": "EQUAL",
        #         "value": {"stringValue": "teacher"}}}}}
        ```
    """
    return {
        "structuredQuery": {
            "from": [{"collectionId": collection}],
            "where": {
                "fieldFilter": {
                    "field": {"fieldPath": field},
                    "op": filter_operator(op),
                    "value": encode_filter_value(value).to_wire(),
                }
            },
        }
    }
