"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from docwire.store import MockDocumentStore, MockStoreConfig, StoreConfig

DOCUMENTS_PATH = "projects/quiz-app/databases/(default)/documents"


@pytest.fixture
def store_config() -> StoreConfig:
    """Client configuration for a test project."""
    return StoreConfig(project_id="quiz-app")


@pytest.fixture
def mock_config() -> MockStoreConfig:
    """Mock store configuration matching store_config."""
    return MockStoreConfig(project_id="quiz-app")


@pytest.fixture
def mock_store(mock_config: MockStoreConfig) -> MockDocumentStore:
    """Empty in-memory document store."""
    return MockDocumentStore(mock_config)


@pytest.fixture
def sample_document() -> dict:
    """Wire document as the store returns it."""
    return {
        "name": f"{DOCUMENTS_PATH}/quizzes/abc123",
        "fields": {
            "title": {"stringValue": "Fractions"},
            "totalMarks": {"integerValue": "20"},
            "passRatio": {"doubleValue": 0.65},
            "published": {"booleanValue": True},
            "archivedAt": {"nullValue": None},
            "createdAt": {"timestampValue": "2025-01-15T10:30:00.000Z"},
            "tags": {"arrayValue": {"values": [{"stringValue": "math"}, {"stringValue": "grade-5"}]}},
            "settings": {
                "mapValue": {
                    "fields": {
                        "shuffle": {"booleanValue": False},
                        "timeLimit": {"integerValue": "600"},
                    }
                }
            },
        },
        "createTime": "2025-01-15T10:30:00.000000Z",
        "updateTime": "2025-01-15T10:30:00.000000Z",
    }
