"""Tests for the collection client against scripted HTTP responses."""

from __future__ import annotations

import json
import math
from typing import Callable

import httpx
import pytest

from docwire import (
    CollectionClient,
    DecodeError,
    DocumentNotFound,
    EncodeError,
    NativeRecord,
    NotFound,
    StoreConfig,
    StoreError,
    TransportError,
)
from docwire.store import MockDocumentStore

BASE_PATH = "/v1/projects/quiz-app/databases/(default)/documents"

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Scripted handler that records every request it receives."""

    def __init__(self, response: httpx.Response | Handler) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self.response):
            return self.response(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


def make_client(config: StoreConfig, recorder: Recorder) -> CollectionClient:
    return CollectionClient(config, transport=httpx.MockTransport(recorder))


class TestListAll:
    """Tests for list_all()."""

    @pytest.mark.asyncio
    async def test_empty_body_yields_empty_list(self, store_config: StoreConfig) -> None:
        """Test a body without documents returns [] rather than None."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            records = await client.list_all("quizzes")

        assert records == []
        assert recorder.last.method == "GET"
        assert recorder.last.url.path == f"{BASE_PATH}/quizzes"
        assert recorder.last.url.host == "firestore.googleapis.com"

    @pytest.mark.asyncio
    async def test_decodes_in_server_order(self, store_config: StoreConfig, sample_document: dict) -> None:
        """Test documents are decoded and kept in server order."""
        other = {"name": "projects/quiz-app/databases/(default)/documents/quizzes/a1", "fields": {}}
        recorder = Recorder(httpx.Response(200, json={"documents": [sample_document, other]}))
        async with make_client(store_config, recorder) as client:
            records = await client.list_all("quizzes")

        assert [record.id for record in records] == ["abc123", "a1"]
        assert records[0].data["totalMarks"] == 20

    @pytest.mark.asyncio
    async def test_page_size_and_token(self, store_config: StoreConfig) -> None:
        """Test page-size hint and continuation token are sent."""
        recorder = Recorder(httpx.Response(200, json={"nextPageToken": "next"}))
        async with make_client(store_config, recorder) as client:
            page = await client.list_page("quizAttempts", page_size=50, page_token="tok")

        assert recorder.last.url.params["pageSize"] == "50"
        assert recorder.last.url.params["pageToken"] == "tok"
        assert page.next_page_token == "next"

    @pytest.mark.asyncio
    async def test_invalid_page_size(self, store_config: StoreConfig) -> None:
        """Test non-positive page sizes are rejected before any request."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(ValueError, match="page_size must be > 0"):
                await client.list_all("quizzes", page_size=0)
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_store_error(self, store_config: StoreConfig) -> None:
        """Test non-success status raises StoreError with status and body."""
        recorder = Recorder(httpx.Response(403, text='{"error": "denied"}'))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(StoreError) as exc_info:
                await client.list_all("quizzes")

        assert exc_info.value.status == 403
        assert exc_info.value.details == '{"error": "denied"}'

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, store_config: StoreConfig) -> None:
        """Test list operations do not hide transport failures."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(store_config, Recorder(refuse)) as client:
            with pytest.raises(TransportError, match="connection refused"):
                await client.list_all("quizzes")

    @pytest.mark.asyncio
    async def test_timeout_is_transport_error(self, store_config: StoreConfig) -> None:
        """Test timeouts surface as TransportError."""

        def slow(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(store_config, Recorder(slow)) as client:
            with pytest.raises(TransportError):
                await client.list_all("quizzes")

    @pytest.mark.asyncio
    async def test_non_json_body(self, store_config: StoreConfig) -> None:
        """Test a success status with a non-JSON body raises DecodeError."""
        recorder = Recorder(httpx.Response(200, text="<html>proxy</html>"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(DecodeError, match="not JSON"):
                await client.list_all("quizzes")


class TestListFiltered:
    """Tests for list_filtered()."""

    @pytest.mark.asyncio
    async def test_query_body_and_filtering(self, store_config: StoreConfig, sample_document: dict) -> None:
        """Test the runQuery request and dropping of progress envelopes."""
        recorder = Recorder(
            httpx.Response(
                200,
                json=[
                    {"readTime": "2025-01-15T10:30:00Z"},
                    {"document": sample_document, "readTime": "2025-01-15T10:30:00Z"},
                ],
            )
        )
        async with make_client(store_config, recorder) as client:
            records = await client.list_filtered("quizzes", "subject", "==", "math")

        assert len(records) == 1
        assert records[0].id == "abc123"
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == f"{BASE_PATH}:runQuery"
        assert recorder.last_json() == {
            "structuredQuery": {
                "from": [{"collectionId": "quizzes"}],
                "where": {
                    "fieldFilter": {
                        "field": {"fieldPath": "subject"},
                        "op": "EQUAL",
                        "value": {"stringValue": "math"},
                    }
                },
            }
        }

    @pytest.mark.asyncio
    async def test_unknown_operator_falls_back(self, store_config: StoreConfig) -> None:
        """Test unrecognized operators are sent as EQUAL."""
        recorder = Recorder(httpx.Response(200, json=[]))
        async with make_client(store_config, recorder) as client:
            await client.list_filtered("quizzes", "totalMarks", ">", 10)

        field_filter = recorder.last_json()["structuredQuery"]["where"]["fieldFilter"]
        assert field_filter["op"] == "EQUAL"
        assert field_filter["value"] == {"integerValue": "10"}

    @pytest.mark.asyncio
    async def test_non_scalar_value(self, store_config: StoreConfig) -> None:
        """Test non-scalar filter values fail before any request."""
        recorder = Recorder(httpx.Response(200, json=[]))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(EncodeError):
                await client.list_filtered("quizzes", "tags", "==", ["math"])
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_store_error(self, store_config: StoreConfig) -> None:
        """Test non-success status raises StoreError."""
        recorder = Recorder(httpx.Response(400, text="bad query"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(StoreError) as exc_info:
                await client.list_filtered("quizzes", "subject", "==", "math")
        assert exc_info.value.status == 400


class TestGetOne:
    """Tests for get_one()."""

    @pytest.mark.asyncio
    async def test_found(self, store_config: StoreConfig, sample_document: dict) -> None:
        """Test a point read decodes the document."""
        recorder = Recorder(httpx.Response(200, json=sample_document))
        async with make_client(store_config, recorder) as client:
            record = await client.get_one("quizzes", "abc123")

        assert record.id == "abc123"
        assert record.data["title"] == "Fractions"
        assert recorder.last.url.path == f"{BASE_PATH}/quizzes/abc123"

    @pytest.mark.asyncio
    async def test_not_found(self, store_config: StoreConfig) -> None:
        """Test 404 is NotFound, not StoreError."""
        recorder = Recorder(httpx.Response(404, json={"error": {"code": 404}}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(DocumentNotFound) as exc_info:
                await client.get_one("quizzes", "missing")

        assert isinstance(exc_info.value, NotFound)
        assert not isinstance(exc_info.value, StoreError)
        assert exc_info.value.collection == "quizzes"
        assert exc_info.value.doc_id == "missing"

    @pytest.mark.asyncio
    async def test_server_error(self, store_config: StoreConfig) -> None:
        """Test 5xx is StoreError."""
        recorder = Recorder(httpx.Response(503, text="unavailable"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(StoreError) as exc_info:
                await client.get_one("quizzes", "abc123")
        assert exc_info.value.status == 503

    @pytest.mark.asyncio
    async def test_transport_error(self, store_config: StoreConfig) -> None:
        """Test transport failures propagate."""

        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        async with make_client(store_config, Recorder(refuse)) as client:
            with pytest.raises(TransportError):
                await client.get_one("quizzes", "abc123")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("doc_id", ["", "a/b"])
    async def test_invalid_id(self, store_config: StoreConfig, doc_id: str) -> None:
        """Test ids must be a single non-empty path segment."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(ValueError, match="doc_id"):
                await client.get_one("quizzes", doc_id)


class TestCreateDocument:
    """Tests for create_document()."""

    @pytest.mark.asyncio
    async def test_create(self, store_config: StoreConfig) -> None:
        """Test the creation body and decoding of the server document."""
        created = {
            "name": "projects/quiz-app/databases/(default)/documents/schools/xyz",
            "fields": {"name": {"stringValue": "Ada"}},
        }
        recorder = Recorder(httpx.Response(200, json=created))
        async with make_client(store_config, recorder) as client:
            record = await client.create_document("schools", {"name": "Ada"})

        assert recorder.last.method == "POST"
        assert recorder.last.url.path == f"{BASE_PATH}/schools"
        assert recorder.last_json() == {"fields": {"name": {"stringValue": "Ada"}}}
        assert record == NativeRecord(id="xyz", data={"name": "Ada"})

    @pytest.mark.asyncio
    async def test_create_mixed_fields(self, store_config: StoreConfig) -> None:
        """Test every native type is encoded in the request body."""
        recorder = Recorder(
            httpx.Response(200, json={"name": "projects/quiz-app/databases/(default)/documents/users/u1"})
        )
        async with make_client(store_config, recorder) as client:
            await client.create_document(
                "users",
                {"role": "teacher", "subjects": ["math"], "age": 30, "score": 9.5, "active": True, "phone": None},
            )

        assert recorder.last_json()["fields"] == {
            "role": {"stringValue": "teacher"},
            "subjects": {"arrayValue": {"values": [{"stringValue": "math"}]}},
            "age": {"integerValue": "30"},
            "score": {"doubleValue": 9.5},
            "active": {"booleanValue": True},
            "phone": {"nullValue": None},
        }

    @pytest.mark.asyncio
    async def test_unencodable_field(self, store_config: StoreConfig) -> None:
        """Test encoding failures happen before any request."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(EncodeError):
                await client.create_document("schools", {"logo": b"\x89PNG"})
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_store_error(self, store_config: StoreConfig) -> None:
        """Test rejection surfaces as StoreError."""
        recorder = Recorder(httpx.Response(409, text="exists"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(StoreError) as exc_info:
                await client.create_document("schools", {"name": "Ada"})
        assert exc_info.value.status == 409


class TestUpdateAndDelete:
    """Tests for update_document() and delete_document()."""

    @pytest.mark.asyncio
    async def test_update_mask(self, store_config: StoreConfig) -> None:
        """Test one update mask parameter per field plus the existence precondition."""
        updated = {
            "name": "projects/quiz-app/databases/(default)/documents/users/u1",
            "fields": {"status": {"stringValue": "Inactive"}},
        }
        recorder = Recorder(httpx.Response(200, json=updated))
        async with make_client(store_config, recorder) as client:
            record = await client.update_document(
                "users", "u1", {"status": "Inactive", "updatedAt": "2025-01-15T10:30:00Z"}
            )

        request = recorder.last
        assert request.method == "PATCH"
        assert request.url.path == f"{BASE_PATH}/users/u1"
        assert request.url.params.get_list("updateMask.fieldPaths") == ["status", "updatedAt"]
        assert request.url.params["currentDocument.exists"] == "true"
        assert record.id == "u1"

    @pytest.mark.asyncio
    async def test_update_missing(self, store_config: StoreConfig) -> None:
        """Test updating a missing document raises DocumentNotFound."""
        recorder = Recorder(httpx.Response(404, text="not found"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(DocumentNotFound):
                await client.update_document("users", "ghost", {"status": "Active"})

    @pytest.mark.asyncio
    async def test_update_requires_fields(self, store_config: StoreConfig) -> None:
        """Test an empty update is rejected."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(ValueError, match="at least one field"):
                await client.update_document("users", "u1", {})

    @pytest.mark.asyncio
    async def test_delete(self, store_config: StoreConfig) -> None:
        """Test delete issues a DELETE to the document URL."""
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(store_config, recorder) as client:
            assert await client.delete_document("users", "u1") is None

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.path == f"{BASE_PATH}/users/u1"

    @pytest.mark.asyncio
    async def test_delete_error(self, store_config: StoreConfig) -> None:
        """Test delete failures raise StoreError."""
        recorder = Recorder(httpx.Response(500, text="boom"))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(StoreError):
                await client.delete_document("users", "u1")


class TestCredentialsAndLifecycle:
    """Tests for credentials and client ownership."""

    @pytest.mark.asyncio
    async def test_api_key_and_token(self) -> None:
        """Test API key parameter and bearer token header are sent."""
        config = StoreConfig(project_id="quiz-app", api_key="k123", access_token="t456")
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(config, recorder) as client:
            await client.list_all("quizzes", page_size=5)

        assert recorder.last.url.params["key"] == "k123"
        assert recorder.last.url.params["pageSize"] == "5"
        assert recorder.last.headers["Authorization"] == "Bearer t456"

    @pytest.mark.asyncio
    async def test_custom_host(self) -> None:
        """Test requests go to a configured emulator host."""
        config = StoreConfig(project_id="demo", host="http://localhost:8080/")
        recorder = Recorder(httpx.Response(200, json={}))
        async with make_client(config, recorder) as client:
            await client.list_all("quizzes")

        assert str(recorder.last.url).startswith("http://localhost:8080/v1/projects/demo/")

    @pytest.mark.asyncio
    async def test_borrowed_client_not_closed(self, store_config: StoreConfig) -> None:
        """Test a caller-supplied httpx client stays open."""
        http = httpx.AsyncClient(transport=httpx.MockTransport(Recorder(httpx.Response(200, json={}))))
        async with CollectionClient(store_config, http_client=http) as client:
            await client.list_all("quizzes")

        assert not http.is_closed
        await http.aclose()


class TestAgainstMockStore:
    """Tests for addressing and body edge cases against the mock store."""

    @staticmethod
    def client_for(store: MockDocumentStore) -> CollectionClient:
        return CollectionClient(store.config.store_config(), transport=store.transport())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("doc_id", ["a#b", "a?b", "a%2Fb", "a b"])
    async def test_reserved_characters_in_id(self, mock_store: MockDocumentStore, doc_id: str) -> None:
        """Test ids with URL-reserved characters address exactly that document."""
        mock_store.seed("quizzes", "a", {"title": "wrong"})
        mock_store.seed("quizzes", doc_id, {"title": "right"})

        async with self.client_for(mock_store) as client:
            record = await client.get_one("quizzes", doc_id)
            updated = await client.update_document("quizzes", doc_id, {"title": "changed"})
            await client.delete_document("quizzes", doc_id)

        assert record == NativeRecord(id=doc_id, data={"title": "right"})
        assert updated.id == doc_id
        assert [item.id for item in mock_store.documents("quizzes")] == ["a"]

    @pytest.mark.asyncio
    async def test_reserved_characters_in_collection(self, mock_store: MockDocumentStore) -> None:
        """Test nested collection paths keep their separators and escape each segment."""
        mock_store.seed("schools/s#1/classes", "c1", {"grade": 5})

        async with self.client_for(mock_store) as client:
            records = await client.list_all("schools/s#1/classes")

        assert records == [NativeRecord(id="c1", data={"grade": 5})]

    @pytest.mark.asyncio
    async def test_non_finite_doubles(self, mock_store: MockDocumentStore) -> None:
        """Test NaN and infinities are sent as JSON and read back as floats."""
        async with self.client_for(mock_store) as client:
            created = await client.create_document(
                "measurements", {"x": float("nan"), "hi": float("inf"), "lo": float("-inf")}
            )
            fetched = await client.get_one("measurements", created.id)

        for record in (created, fetched):
            assert math.isnan(record.data["x"])
            assert record.data["hi"] == float("inf")
            assert record.data["lo"] == float("-inf")

    @pytest.mark.asyncio
    async def test_body_without_name_is_rejected(self, store_config: StoreConfig) -> None:
        """Test a success body that is not a document raises DecodeError."""
        recorder = Recorder(httpx.Response(200, json={"documents": []}))
        async with make_client(store_config, recorder) as client:
            with pytest.raises(DecodeError, match="not a document"):
                await client.get_one("quizzes", "q1")
            with pytest.raises(DecodeError, match="not a document"):
                await client.create_document("quizzes", {"title": "x"})
            with pytest.raises(DecodeError, match="not a document"):
                await client.update_document("quizzes", "q1", {"title": "x"})
