"""Exception hierarchy for docwire.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from DocwireError for easy catching of any docwire-specific error.

``NotFound`` and ``StoreError`` are deliberately separate branches so callers
can tell "the document does not exist" apart from "the request failed".
"""

from __future__ import annotations


class DocwireError(Exception):
    """Base exception for all docwire errors."""

    pass


class EncodeError(DocwireError):
    """Raised when a native value cannot be converted to a wire value.

    Examples:
        - Unsupported native type (sets, bytes, arbitrary objects)
        - Mapping with non-string keys
        - Non-scalar value passed to a query filter
    """

    pass


class DecodeError(DocwireError):
    """Raised when a wire payload is malformed.

    Examples:
        - Response body is not JSON
        - Document payload fails validation (e.g. ``arrayValue`` is a string)
        - Record does not fit the requested model class
    """

    pass


class StoreError(DocwireError):
    """Raised when the document store rejects or fails to service a request.

    Attributes:
        status: Upstream HTTP status code
        details: Raw error body text returned by the store
    """

    def __init__(self, status: int, details: str = "") -> None:
        super().__init__(f"Document store error: {status} - {details}")
        self.status = status
        self.details = details


class NotFound(DocwireError):
    """Raised when a targeted document does not exist."""

    pass


class DocumentNotFound(NotFound):
    """Raised when a point read or update targets a nonexistent document.

    Attributes:
        collection: Collection name
        doc_id: Document identifier
    """

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(f"Document {collection}/{doc_id} not found")
        self.collection = collection
        self.doc_id = doc_id


class TransportError(DocwireError):
    """Raised when the network call itself could not complete.

    Examples:
        - DNS resolution failure
        - Connection refused
        - Request timeout
    """

    pass
