#!/usr/bin/env python3
"""Basic usage example for docwire.

This example demonstrates:
1. Encoding native values to tagged wire values
2. Decoding a wire document back to a flat record
3. Running a collection client against the in-memory mock store
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone

from pydantic import BaseModel

from docwire import CollectionClient, DocumentNotFound, encode_fields, parse_document
from docwire.store import MockDocumentStore, MockStoreConfig


class School(BaseModel):
    """School record as an admin dashboard stores it."""

    name: str
    city: str
    status: str = "Active"
    totalUsers: int = 0


async def run_client() -> None:
    config = MockStoreConfig(project_id="demo")
    store = MockDocumentStore(config)
    store.seed("users", "t1", {"role": "teacher", "name": "Grace"})
    store.seed("users", "s1", {"role": "student", "name": "Alan"})

    async with CollectionClient(config.store_config(), transport=store.transport()) as client:
        print("3. Creating a school...")
        school = await client.create_document("schools", School(name="Ada Lovelace High", city="London"))
        print(f"   Created {school.id}: {school.data}")
        print()

        print("4. Listing teachers...")
        for teacher in await client.list_filtered("users", "role", "==", "teacher"):
            print(f"   {teacher.id}: {teacher.data['name']}")
        print()

        print("5. Updating and deleting...")
        updated = await client.update_document("schools", school.id, {"totalUsers": 2})
        print(f"   totalUsers -> {updated.data['totalUsers']}")
        await client.delete_document("schools", school.id)
        try:
            await client.get_one("schools", school.id)
        except DocumentNotFound as e:
            print(f"   {e}")

    print(f"   Mock store served {len(store.requests)} requests")


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("docwire Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Encoding native fields...")
    fields = encode_fields(
        {
            "title": "Fractions",
            "totalMarks": 20,
            "passRatio": 0.65,
            "createdAt": datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc),
            "tags": ["math", "grade-5"],
        }
    )
    wire = {"fields": {name: value.to_wire() for name, value in fields.items()}}
    print(json.dumps(wire, indent=2))
    print()

    print("2. Decoding a wire document...")
    record = parse_document({"name": "projects/demo/databases/(default)/documents/quizzes/q1", **wire})
    print(f"   {record.flatten()}")
    print()

    asyncio.run(run_client())


if __name__ == "__main__":
    main()
