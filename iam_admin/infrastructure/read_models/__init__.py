"""Read model backends."""

from iam_admin.infrastructure.read_models.mongo_read_model_store import (
    COLLECTIONS,
    MongoReadModelRepository,
    MongoReadModelStore,
)

__all__ = ["COLLECTIONS", "MongoReadModelRepository", "MongoReadModelStore"]
