"""CLI command implementations."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

from ..codec.decoder import parse_document, parse_list_response, parse_query_results
from ..codec.encoder import encode_fields
from ..models.record import NativeRecord
from ..store.client import CollectionClient
from ..store.config import StoreConfig


def load_json(file_path: Path) -> Any:
    """Read and parse a JSON file.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file does not contain valid JSON
    """
    with file_path.open(encoding="utf-8") as f:
        return json.load(f)


def decode_payload(raw: Any) -> Any:
    """Decode any wire payload the store produces into flattened records.

    Accepts a single document, a collection list response, or a
    ``:runQuery`` response.

    Returns:
        One flattened record (dict) for a document, else a list of them
    """
    if isinstance(raw, list):
        return [record.flatten() for record in parse_query_results(raw)]

    if isinstance(raw, dict) and "name" not in raw and ("documents" in raw or not raw.get("fields")):
        return [record.flatten() for record in parse_list_response(raw).records]

    return parse_document(raw).flatten()


def encode_payload(raw: Any) -> dict[str, Any]:
    """Encode a native JSON object into a create/update request body.

    Raises:
        ValueError: If the payload is not a JSON object
    """
    if not isinstance(raw, dict):
        raise ValueError(f"expected a JSON object, got {type(raw).__name__}")
    return {"fields": {name: value.to_wire() for name, value in encode_fields(raw).items()}}


def list_collection(
    config: StoreConfig, collection: str, page_size: Optional[int] = None
) -> list[dict[str, Any]]:
    """Fetch a collection from the store and flatten its records."""
    records = asyncio.run(_list(config, collection, page_size))
    return [record.flatten() for record in records]


def get_document(config: StoreConfig, collection: str, doc_id: str) -> dict[str, Any]:
    """Fetch one document from the store and flatten it."""
    return asyncio.run(_get(config, collection, doc_id)).flatten()


def dump(payload: Any) -> str:
    """Render a payload as indented JSON."""
    return json.dumps(payload, indent=2, ensure_ascii=False)


async def _list(config: StoreConfig, collection: str, page_size: Optional[int]) -> list[NativeRecord]:
    async with CollectionClient(config) as client:
        return await client.list_all(collection, page_size=page_size)


async def _get(config: StoreConfig, collection: str, doc_id: str) -> NativeRecord:
    async with CollectionClient(config) as client:
        return await client.get_one(collection, doc_id)
