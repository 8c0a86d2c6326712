"""docwire: Document-Store Wire Codec

A Python library for converting between native Python values and the tagged
wire values of a Firestore-style document-store REST protocol, with an async
collection client built on top of it.

Key Features:
- Total decoding of tagged wire values (string, integer, double, boolean,
  null, timestamp, array, map)
- Pydantic-based wire models that serialize to the exact protocol JSON
- Document addressing: short ids extracted from resource paths
- Async collection client (httpx) with typed errors
- In-memory mock store for tests without network access

Quick Start:
    >>> from docwire import encode_value, decode_value
    >>>
    >>> wire = encode_value({"a": [1, "x", {"b": False}]})
    >>> decode_value(wire)
    {'a': [1, 'x', {'b': False}]}
    >>> encode_value(7).to_wire()
    {'integerValue': '7'}
"""

from __future__ import annotations

from .codec import (
    build_structured_query,
    decode_document,
    decode_fields,
    decode_value,
    document_id,
    encode_fields,
    encode_filter_value,
    encode_value,
    parse_document,
    parse_list_response,
    parse_query_results,
)
from .exceptions import (
    DecodeError,
    DocumentNotFound,
    DocwireError,
    EncodeError,
    NotFound,
    StoreError,
    TransportError,
)
from .models import (
    DocumentPage,
    ListDocumentsResponse,
    NativeRecord,
    NativeValue,
    RunQueryResult,
    WireDocument,
    WireValue,
)
from .store import CollectionClient, MockDocumentStore, MockStoreConfig, StoreConfig

__version__ = "0.1.0"

__all__ = [
    # Value codec
    "encode_value",
    "encode_fields",
    "decode_value",
    "decode_fields",
    # Document codec
    "decode_document",
    "document_id",
    "parse_document",
    "parse_list_response",
    "parse_query_results",
    # Queries
    "build_structured_query",
    "encode_filter_value",
    # Models
    "WireValue",
    "WireDocument",
    "ListDocumentsResponse",
    "RunQueryResult",
    "NativeRecord",
    "NativeValue",
    "DocumentPage",
    # Store
    "CollectionClient",
    "StoreConfig",
    "MockDocumentStore",
    "MockStoreConfig",
    # Exceptions
    "DocwireError",
    "EncodeError",
    "DecodeError",
    "StoreError",
    "NotFound",
    "DocumentNotFound",
    "TransportError",
    # Version
    "__version__",
]
