"""SQLAlchemy persistence: engine, models, repositories."""

from iam_admin.infrastructure.persistence.base import BaseModel
from iam_admin.infrastructure.persistence.database import Database

__all__ = ["BaseModel", "Database"]
