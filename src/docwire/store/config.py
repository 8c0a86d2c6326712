"""Configuration for document-store clients and the mock store.

This module provides configuration dataclasses injected at construction time,
so the project, database and endpoint can vary per client instance.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_HOST = "https://firestore.googleapis.com"
DEFAULT_DATABASE = "(default)"
DEFAULT_API_VERSION = "v1"


@dataclass
class StoreConfig:
    """Configuration for a CollectionClient.

    Attributes:
        project_id: Cloud project that owns the database (required).
        database: Database id (default "(default)").
        host: Scheme and host of the REST endpoint. Point this at an emulator
            (e.g. "http://localhost:8080") for local development.
        api_version: REST API version path segment (default "v1").
        timeout: Request timeout in seconds for clients created by
            CollectionClient (default 10.0). None disables the timeout.
        api_key: Optional API key, sent as the ``key`` query parameter.
        access_token: Optional OAuth2 bearer token, sent as an
            ``Authorization`` header.

    Examples:
        ```python
        from docwire import StoreConfig

        config = StoreConfig(project_id="quiz-app")
        config.base_url
        # "https://firestore.googleapis.com/v1/projects/quiz-app/databases/(default)/documents"

        # Local emulator
        config = StoreConfig(project_id="demo", host="http://localhost:8080")
        ```
    """

    project_id: str
    database: str = DEFAULT_DATABASE
    host: str = DEFAULT_HOST
    api_version: str = DEFAULT_API_VERSION
    timeout: Optional[float] = 10.0
    api_key: Optional[str] = None
    access_token: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.project_id or "/" in self.project_id:
            raise ValueError(f"project_id must be a non-empty path segment, got {self.project_id!r}")

        if not self.database or "/" in self.database:
            raise ValueError(f"database must be a non-empty path segment, got {self.database!r}")

        if not self.host.startswith(("http://", "https://")):
            raise ValueError(f"host must start with http:// or https://, got {self.host!r}")

        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must be >= 0, got {self.timeout}")

        self.host = self.host.rstrip("/")

    @property
    def documents_path(self) -> str:
        """Resource path of the database's document root."""
        return f"projects/{self.project_id}/databases/{self.database}/documents"

    @property
    def base_url(self) -> str:
        """Absolute URL of the database's document root."""
        return f"{self.host}/{self.api_version}/{self.documents_path}"

    @classmethod
    def from_env(cls, prefix: str = "DOCWIRE_") -> StoreConfig:
        """Build a configuration from environment variables.

        Reads ``{prefix}PROJECT_ID`` (required), ``DATABASE``, ``HOST``,
        ``TIMEOUT``, ``API_KEY`` and ``ACCESS_TOKEN``.

        Raises:
            ValueError: If the project id is missing or a value is invalid
        """
        env = os.environ
        project_id = env.get(f"{prefix}PROJECT_ID", "")
        if not project_id:
            raise ValueError(f"{prefix}PROJECT_ID is not set")

        timeout: Optional[float] = 10.0
        raw_timeout = env.get(f"{prefix}TIMEOUT")
        if raw_timeout:
            timeout = None if raw_timeout.lower() == "none" else float(raw_timeout)

        return cls(
            project_id=project_id,
            database=env.get(f"{prefix}DATABASE", DEFAULT_DATABASE),
            host=env.get(f"{prefix}HOST", DEFAULT_HOST),
            timeout=timeout,
            api_key=env.get(f"{prefix}API_KEY") or None,
            access_token=env.get(f"{prefix}ACCESS_TOKEN") or None,
        )


@dataclass
class MockStoreConfig:
    """Configuration for the in-memory mock document store.

    Attributes:
        project_id: Project id used in generated document paths.
        database: Database id used in generated document paths.
        id_length: Length of generated document ids (default 20, like the
            real store's auto ids).
        fail_status: If set, every request fails with this HTTP status.
            Use it to exercise error handling in collaborators.
        fail_body: Body returned with ``fail_status``.

    Examples:
        ```python
        from docwire.store import MockDocumentStore, MockStoreConfig

        # Healthy store
        store = MockDocumentStore(MockStoreConfig(project_id="demo"))

        # Store that answers every request with 503
        broken = MockDocumentStore(MockStoreConfig(fail_status=503))
        ```
    """

    project_id: str = "demo-project"
    database: str = DEFAULT_DATABASE
    id_length: int = 20
    fail_status: Optional[int] = None
    fail_body: str = '{"error": {"code": 503, "message": "The service is currently unavailable."}}'

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.project_id:
            raise ValueError("project_id must be non-empty")

        if self.id_length <= 0:
            raise ValueError(f"id_length must be > 0, got {self.id_length}")

        if self.fail_status is not None and not 400 <= self.fail_status <= 599:
            raise ValueError(f"fail_status must be 400-599, got {self.fail_status}")

    def store_config(self, host: str = "http://mockstore") -> StoreConfig:
        """Client configuration addressing this mock store."""
        return StoreConfig(project_id=self.project_id, database=self.database, host=host)
