"""Wire-value codec for docwire.

This module provides encoding and decoding between native Python values and
the tagged wire values of the document-store protocol.
"""

from __future__ import annotations

from .decoder import (
    decode_document,
    decode_fields,
    decode_value,
    document_id,
    parse_document,
    parse_list_response,
    parse_query_results,
    parse_value,
)
from .encoder import encode_fields, encode_value, format_timestamp
from .query import build_structured_query, encode_filter_value, filter_operator

__all__ = [
    "encode_value",
    "encode_fields",
    "format_timestamp",
    "decode_value",
    "decode_fields",
    "decode_document",
    "document_id",
    "parse_value",
    "parse_document",
    "parse_list_response",
    "parse_query_results",
    "build_structured_query",
    "encode_filter_value",
    "filter_operator",
]
