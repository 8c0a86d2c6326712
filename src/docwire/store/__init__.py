"""Document-store access layer.

This module provides the collection client for the document-store REST
protocol, its configuration, and an in-memory mock store:

- **CollectionClient**: async list / filter / get / create / update / delete
- **StoreConfig**: per-instance project, database, endpoint and credentials
- **MockDocumentStore**: the same protocol served from memory via an httpx
  transport, for tests and local development

## Quick Start

```python
import asyncio

from docwire.store import CollectionClient, MockDocumentStore, MockStoreConfig

config = MockStoreConfig(project_id="demo")
store = MockDocumentStore(config)
store.seed("quizzes", "q1", {"title": "Fractions", "subject": "math"})


async def main() -> None:
    async with CollectionClient(config.store_config(), transport=store.transport()) as client:
        math_quizzes = await client.list_filtered("quizzes", "subject", "==", "math")
        print([quiz.flatten() for quiz in math_quizzes])


asyncio.run(main())
```

Swap ``config.store_config()`` for ``StoreConfig(project_id=...)`` and drop
the transport argument to talk to the real service; nothing else changes.
"""

from docwire.store.client import CollectionClient
from docwire.store.config import MockStoreConfig, StoreConfig
from docwire.store.mock import MockDocumentStore

__all__ = [
    "CollectionClient",
    "StoreConfig",
    "MockDocumentStore",
    "MockStoreConfig",
]
