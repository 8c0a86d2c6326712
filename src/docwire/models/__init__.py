"""Wire and native data models for docwire.

This module provides the Pydantic wire-format models of the document-store
protocol and the native record types handed back to callers.
"""

from __future__ import annotations

from .base import WireModel
from .record import DocumentPage, NativeRecord, NativeValue
from .wire import (
    ArrayValue,
    ListDocumentsResponse,
    MapValue,
    RunQueryResult,
    WireDocument,
    WireValue,
)

__all__ = [
    "WireModel",
    "WireValue",
    "ArrayValue",
    "MapValue",
    "WireDocument",
    "ListDocumentsResponse",
    "RunQueryResult",
    "NativeRecord",
    "NativeValue",
    "DocumentPage",
]
