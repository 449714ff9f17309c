"""In-memory adapters for tests and local runs."""

from iam_admin.infrastructure.memory.read_model_store import (
    InMemoryReadModelRepository,
    InMemoryReadModelStore,
)
from iam_admin.infrastructure.memory.user_dependents import InMemoryUserDependents
from iam_admin.infrastructure.memory.write_store import (
    InMemoryEntityRepository,
    InMemoryWriteStore,
)

__all__ = [
    "InMemoryEntityRepository",
    "InMemoryReadModelRepository",
    "InMemoryReadModelStore",
    "InMemoryUserDependents",
    "InMemoryWriteStore",
]
