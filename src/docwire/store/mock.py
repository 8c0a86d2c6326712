"""In-memory mock document store for testing without network access.

This module provides MockDocumentStore, a simulated document store that speaks
the same REST protocol as the real one. It is mounted as an httpx transport,
so a CollectionClient (or any other httpx-based collaborator) talks to it
exactly as it would to the real service:

- Collection listing with page-size and page-token paging
- Point reads with 404 for missing documents
- Creation with generated ids and server timestamps
- Structured queries with EQUAL / NOT_EQUAL field filters
- Masked updates with an optional existence precondition
- Deletes
- Failure injection (every request answers with a fixed error status)
"""

from __future__ import annotations

import json
import logging
import random
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

import httpx

from ..codec.decoder import decode_document, parse_value
from ..codec.encoder import encode_fields, format_timestamp
from ..exceptions import DecodeError
from ..models.record import NativeRecord
from ..models.wire import WireDocument
from .config import MockStoreConfig

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits


class MockDocumentStore:
    """Simulated document store for tests and local development.

    Documents are kept as raw wire JSON, keyed by collection path and id, in
    insertion order.

    Attributes:
        config: Mock store configuration
        requests: Every request received, in order (for assertions)

    Examples:
        ```python
        from docwire import CollectionClient
        from docwire.store import MockDocumentStore, MockStoreConfig

        config = MockStoreConfig(project_id="demo")
        store = MockDocumentStore(config)
        store.seed("quizzes", "q1", {"title": "Fractions", "published": True})

        async with CollectionClient(config.store_config(), transport=store.transport()) as client:
            quizzes = await client.list_all("quizzes")
        ```
    """

    def __init__(self, config: MockStoreConfig | None = None) -> None:
        """Initialize an empty mock store.

        Args:
            config: Mock store configuration. If None, uses default config.
        """
        self.config = config if config is not None else MockStoreConfig()
        self.requests: List[httpx.Request] = []
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    @property
    def documents_path(self) -> str:
        """Resource path of the simulated database's document root."""
        return f"projects/{self.config.project_id}/databases/{self.config.database}/documents"

    def transport(self) -> httpx.MockTransport:
        """Create an httpx transport that routes requests to this store."""
        return httpx.MockTransport(self.handle)

    # ------------------------------------------------------------------
    # Direct access
    # ------------------------------------------------------------------

    def seed(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> NativeRecord:
        """Store a document directly, bypassing HTTP.

        Args:
            collection: Collection path
            doc_id: Document id
            fields: Native field values

        Returns:
            The stored document as a record
        """
        wire_fields = {name: value.to_wire() for name, value in encode_fields(fields).items()}
        doc = self._put(collection.strip("/"), doc_id, wire_fields)
        return decode_document(WireDocument.model_validate(doc))

    def documents(self, collection: str) -> List[NativeRecord]:
        """Decode every document of a collection, in insertion order."""
        docs = self._collections.get(collection.strip("/"), {})
        return [decode_document(WireDocument.model_validate(doc)) for doc in docs.values()]

    def clear(self) -> None:
        """Drop all documents and recorded requests."""
        self._collections.clear()
        self.requests.clear()

    # ------------------------------------------------------------------
    # Request handling
    # ------------------------------------------------------------------

    def handle(self, request: httpx.Request) -> httpx.Response:
        """Serve one protocol request."""
        self.requests.append(request)
        logger.debug("[MockStore] %s %s", request.method, request.url)

        if self.config.fail_status is not None:
            return httpx.Response(self.config.fail_status, text=self.config.fail_body)

        prefix = f"/v1/{self.documents_path}"
        path = request.url.path
        if path == f"{prefix}:runQuery":
            if request.method != "POST":
                return _error(405, "METHOD_NOT_ALLOWED", f"{request.method} not allowed on :runQuery")
            return self._run_query(request)

        if not path.startswith(f"{prefix}/"):
            return _error(404, "NOT_FOUND", f"Unknown resource {path}")

        segments = [segment for segment in path[len(prefix) + 1 :].split("/") if segment]
        if not segments:
            return _error(404, "NOT_FOUND", f"Unknown resource {path}")

        # Odd segment count addresses a collection, even count a document
        if len(segments) % 2 == 1:
            collection = "/".join(segments)
            if request.method == "GET":
                return self._list(request, collection)
            if request.method == "POST":
                return self._create(request, collection)
            return _error(405, "METHOD_NOT_ALLOWED", f"{request.method} not allowed on a collection")

        collection = "/".join(segments[:-1])
        doc_id = segments[-1]
        if request.method == "GET":
            return self._get(collection, doc_id)
        if request.method == "PATCH":
            return self._patch(request, collection, doc_id)
        if request.method == "DELETE":
            self._collections.get(collection, {}).pop(doc_id, None)
            return httpx.Response(200, json={})
        return _error(405, "METHOD_NOT_ALLOWED", f"{request.method} not allowed on a document")

    def _list(self, request: httpx.Request, collection: str) -> httpx.Response:
        docs = list(self._collections.get(collection, {}).values())

        try:
            offset = int(request.url.params.get("pageToken") or 0)
            page_size = int(request.url.params.get("pageSize") or 0)
        except ValueError:
            return _error(400, "INVALID_ARGUMENT", "Invalid pageSize or pageToken")

        end = offset + page_size if page_size > 0 else len(docs)
        page = docs[offset:end]

        body: Dict[str, Any] = {}
        if page:
            body["documents"] = page
        if end < len(docs):
            body["nextPageToken"] = str(end)
        return httpx.Response(200, json=body)

    def _get(self, collection: str, doc_id: str) -> httpx.Response:
        doc = self._collections.get(collection, {}).get(doc_id)
        if doc is None:
            return _error(404, "NOT_FOUND", f'Document "{self._name(collection, doc_id)}" not found.')
        return httpx.Response(200, json=doc)

    def _create(self, request: httpx.Request, collection: str) -> httpx.Response:
        body = _read_json(request)
        if not isinstance(body, dict):
            return _error(400, "INVALID_ARGUMENT", "Request body must be a JSON object")

        doc_id = request.url.params.get("documentId") or self._new_id()
        if doc_id in self._collections.get(collection, {}):
            return _error(409, "ALREADY_EXISTS", f"Document already exists: {doc_id}")

        doc = self._put(collection, doc_id, body.get("fields") or {})
        return httpx.Response(200, json=doc)

    def _patch(self, request: httpx.Request, collection: str, doc_id: str) -> httpx.Response:
        body = _read_json(request)
        if not isinstance(body, dict):
            return _error(400, "INVALID_ARGUMENT", "Request body must be a JSON object")

        existing = self._collections.get(collection, {}).get(doc_id)
        must_exist = request.url.params.get("currentDocument.exists") == "true"
        if existing is None and must_exist:
            return _error(404, "NOT_FOUND", f'Document "{self._name(collection, doc_id)}" not found.')

        incoming = body.get("fields") or {}
        mask = request.url.params.get_list("updateMask.fieldPaths")
        if mask:
            fields = dict(existing.get("fields", {})) if existing is not None else {}
            for name in mask:
                if name in incoming:
                    fields[name] = incoming[name]
                else:
                    fields.pop(name, None)
        else:
            fields = dict(incoming)

        created = existing["createTime"] if existing is not None else None
        doc = self._put(collection, doc_id, fields, create_time=created)
        return httpx.Response(200, json=doc)

    def _run_query(self, request: httpx.Request) -> httpx.Response:
        body = _read_json(request)
        query = body.get("structuredQuery") if isinstance(body, dict) else None
        if not isinstance(query, dict) or not query.get("from"):
            return _error(400, "INVALID_ARGUMENT", "structuredQuery.from is required")

        collection = query["from"][0].get("collectionId", "")
        docs = list(self._collections.get(collection, {}).values())

        field_filter = (query.get("where") or {}).get("fieldFilter")
        if field_filter is not None:
            op = field_filter.get("op")
            if op not in ("EQUAL", "NOT_EQUAL"):
                return _error(400, "INVALID_ARGUMENT", f"Unsupported operator {op!r}")
            field_path = field_filter.get("field", {}).get("fieldPath", "")
            try:
                target = parse_value(field_filter.get("value", {}))
                docs = [doc for doc in docs if _matches(doc, field_path, op, target)]
            except DecodeError as e:
                return _error(400, "INVALID_ARGUMENT", str(e))

        read_time = format_timestamp(datetime.now(timezone.utc))
        if not docs:
            # The store reports an empty result as a single progress envelope
            return httpx.Response(200, json=[{"readTime": read_time}])
        return httpx.Response(200, json=[{"document": doc, "readTime": read_time} for doc in docs])

    # ------------------------------------------------------------------
    # Storage helpers
    # ------------------------------------------------------------------

    def _name(self, collection: str, doc_id: str) -> str:
        return f"{self.documents_path}/{collection}/{doc_id}"

    def _new_id(self) -> str:
        return "".join(random.choices(_ID_ALPHABET, k=self.config.id_length))

    def _put(
        self,
        collection: str,
        doc_id: str,
        fields: Dict[str, Any],
        create_time: Optional[str] = None,
    ) -> Dict[str, Any]:
        now = format_timestamp(datetime.now(timezone.utc))
        doc = {
            "name": self._name(collection, doc_id),
            "fields": fields,
            "createTime": create_time or now,
            "updateTime": now,
        }
        self._collections.setdefault(collection, {})[doc_id] = doc
        return doc


def _matches(doc: Dict[str, Any], field_path: str, op: str, target: Any) -> bool:
    fields = doc.get("fields") or {}
    if field_path not in fields:
        # Missing fields match neither EQUAL nor NOT_EQUAL
        return False
    value = parse_value(fields[field_path])
    # Booleans never equal numbers, even though True == 1 in Python
    equal = isinstance(value, bool) == isinstance(target, bool) and value == target
    return equal if op == "EQUAL" else not equal


def _read_json(request: httpx.Request) -> Any:
    try:
        return json.loads(request.content or b"null")
    except ValueError:
        return None


def _error(status: int, code: str, message: str) -> httpx.Response:
    return httpx.Response(
        status, json={"error": {"code": status, "message": message, "status": code}}
    )


