"""Asynchronous collection client for the document-store REST protocol.

Each operation performs exactly one HTTP round trip and returns decoded native
records or raises a typed error:

- StoreError: the store answered with a non-success status
- DocumentNotFound: a point read or update targeted a missing document
- TransportError: the request could not complete at all
- DecodeError: the store answered with a malformed body

Transport failures propagate from every operation, list operations included.
Nothing is retried; create_document in particular is not idempotent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Union
from urllib.parse import quote

import httpx
from pydantic import BaseModel

from ..codec.decoder import parse_document, parse_list_response, parse_query_results
from ..codec.encoder import encode_fields
from ..codec.query import build_structured_query
from ..exceptions import DecodeError, DocumentNotFound, StoreError, TransportError
from ..models.record import DocumentPage, NativeRecord
from .config import StoreConfig

logger = logging.getLogger(__name__)

Fields = Union[Mapping[str, Any], BaseModel]


class CollectionClient:
    """Client for one document-store database.

    The client holds no state between calls beyond the pooled HTTP
    connection, so one instance may serve concurrent tasks.

    Attributes:
        config: Store configuration (project, database, endpoint, credentials)

    Examples:
        ```python
        from docwire import CollectionClient, StoreConfig

        config = StoreConfig(project_id="quiz-app")

        async with CollectionClient(config) as client:
            quizzes = await client.list_all("quizzes")
            teachers = await client.list_filtered("users", "role", "==", "teacher")
            school = await client.create_document("schools", {"name": "Ada"})
            same = await client.get_one("schools", school.id)
        ```

        ```python
        # Tests: route requests to an in-process handler
        import httpx

        client = CollectionClient(config, transport=httpx.MockTransport(handler))
        ```
    """

    def __init__(
        self,
        config: StoreConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the collection client.

        Args:
            config: Store configuration
            http_client: Existing httpx client to use. It is not closed by
                aclose(); its owner manages it.
            transport: Transport for a client created here (ignored when
                http_client is given)
        """
        self.config = config
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def __aenter__(self) -> CollectionClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._http.aclose()

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def list_all(
        self,
        collection: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> List[NativeRecord]:
        """List the documents of a collection in one unpaginated read.

        Args:
            collection: Collection name (may be a nested path such as
                "schools/abc/classes")
            page_size: Optional page-size hint passed to the store
            page_token: Optional continuation token from a previous page

        Returns:
            Decoded records in server order; empty when the collection is empty

        Raises:
            StoreError: If the store answers with a non-success status
            TransportError: If the request cannot complete
            DecodeError: If the response body is malformed
        """
        page = await self.list_page(collection, page_size=page_size, page_token=page_token)
        return page.records

    async def list_page(
        self,
        collection: str,
        page_size: Optional[int] = None,
        page_token: Optional[str] = None,
    ) -> DocumentPage:
        """List one page of a collection, keeping the continuation token.

        Raises:
            ValueError: If page_size is not positive
            StoreError, TransportError, DecodeError: As for list_all()
        """
        params: dict[str, Any] = {}
        if page_size is not None:
            if page_size <= 0:
                raise ValueError(f"page_size must be > 0, got {page_size}")
            params["pageSize"] = page_size
        if page_token:
            params["pageToken"] = page_token

        response = await self._send("GET", self._collection_url(collection), params=params)
        self._raise_for_status(response)
        return parse_list_response(self._json(response))

    async def list_filtered(
        self, collection: str, field: str, op: str, value: Any
    ) -> List[NativeRecord]:
        """List documents whose field compares equal (or not equal) to a value.

        Args:
            collection: Collection id
            field: Field path to compare
            op: "==" or "!="; any other symbol is treated as "=="
            value: Scalar comparison value (str, int, float or bool)

        Returns:
            Decoded records of every result envelope that carries a document

        Raises:
            EncodeError: If value is not a scalar
            StoreError, TransportError, DecodeError: As for list_all()
        """
        body = build_structured_query(collection, field, op, value)
        response = await self._send("POST", f"{self.config.base_url}:runQuery", json=body)
        self._raise_for_status(response)
        return parse_query_results(self._json(response))

    async def get_one(self, collection: str, doc_id: str) -> NativeRecord:
        """Read one document.

        Raises:
            DocumentNotFound: If the document does not exist
            StoreError: For any other non-success status
            TransportError, DecodeError: As for list_all()
        """
        response = await self._send("GET", self._document_url(collection, doc_id))
        if response.status_code == 404:
            raise DocumentNotFound(collection, doc_id)
        self._raise_for_status(response)
        return self._document(response)

    async def create_document(self, collection: str, fields: Fields) -> NativeRecord:
        """Create a document with a server-assigned id.

        Args:
            collection: Collection name
            fields: Native field values (mapping or Pydantic model)

        Returns:
            The created document as returned by the store, including its id

        Raises:
            EncodeError: If a field value cannot be encoded
            StoreError, TransportError, DecodeError: As for list_all()
        """
        body = {"fields": _fields_to_wire(fields)}
        response = await self._send("POST", self._collection_url(collection), json=body)
        self._raise_for_status(response)
        return self._document(response)

    async def update_document(self, collection: str, doc_id: str, fields: Fields) -> NativeRecord:
        """Overwrite the given fields of an existing document.

        Only the fields named in ``fields`` are touched; the store receives
        one ``updateMask.fieldPaths`` parameter per field. The request
        carries an existence precondition, so a missing document is reported
        instead of being created.

        Raises:
            ValueError: If fields is empty
            DocumentNotFound: If the document does not exist
            EncodeError, StoreError, TransportError, DecodeError: As above
        """
        wire_fields = _fields_to_wire(fields)
        if not wire_fields:
            raise ValueError("update_document requires at least one field")

        params = [("updateMask.fieldPaths", name) for name in wire_fields]
        params.append(("currentDocument.exists", "true"))
        response = await self._send(
            "PATCH",
            self._document_url(collection, doc_id),
            params=params,
            json={"fields": wire_fields},
        )
        if response.status_code == 404:
            raise DocumentNotFound(collection, doc_id)
        self._raise_for_status(response)
        return self._document(response)

    async def delete_document(self, collection: str, doc_id: str) -> None:
        """Delete one document.

        Raises:
            StoreError: If the store answers with a non-success status
            TransportError: If the request cannot complete
        """
        response = await self._send("DELETE", self._document_url(collection, doc_id))
        self._raise_for_status(response)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _collection_url(self, collection: str) -> str:
        collection = collection.strip("/")
        if not collection:
            raise ValueError("collection must be non-empty")
        path = "/".join(quote(segment, safe="") for segment in collection.split("/"))
        return f"{self.config.base_url}/{path}"

    def _document_url(self, collection: str, doc_id: str) -> str:
        if not doc_id or "/" in doc_id:
            raise ValueError(f"doc_id must be a non-empty path segment, got {doc_id!r}")
        return f"{self._collection_url(collection)}/{quote(doc_id, safe='')}"

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Perform one request, adding credentials and mapping transport failures."""
        if self.config.api_key:
            params = kwargs.get("params") or []
            if isinstance(params, dict):
                params = list(params.items())
            kwargs["params"] = [*params, ("key", self.config.api_key)]

        if self.config.access_token:
            kwargs["headers"] = {"Authorization": f"Bearer {self.config.access_token}"}

        logger.debug("%s %s", method, url)
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.warning("%s %s could not complete: %s", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        logger.warning(
            "%s %s returned HTTP %s", response.request.method, response.request.url, response.status_code
        )
        raise StoreError(response.status_code, response.text)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(f"Response body is not JSON: {e}") from e

    @classmethod
    def _document(cls, response: httpx.Response) -> NativeRecord:
        raw = cls._json(response)
        if not isinstance(raw, dict) or not raw.get("name"):
            raise DecodeError(f"Response is not a document (no name): {response.text[:200]}")
        return parse_document(raw)


def _fields_to_wire(fields: Fields) -> dict[str, Any]:
    return {name: value.to_wire() for name, value in encode_fields(fields).items()}
