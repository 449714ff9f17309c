"""UserRepository - SQLAlchemy implementation."""

from typing import Any

from iam_admin.domain.entities.user import User
from iam_admin.domain.enums import AggregateType, UserType
from iam_admin.infrastructure.persistence.models.user import UserModel
from iam_admin.infrastructure.persistence.repositories.entity_repository import (
    SQLAlchemyEntityRepository,
    scope_fields,
)


class UserRepository(SQLAlchemyEntityRepository[User, UserModel]):
    """Maps User entities to the ``users`` table."""

    model = UserModel
    aggregate_type = AggregateType.USER

    def _business_columns(self, entity: User) -> dict[str, Any]:
        return {
            "username": entity.username,
            "email": entity.email,
            "display_name": entity.display_name,
            "user_type": entity.user_type.value,
            "phone": entity.phone,
        }

    def _to_domain(self, model: UserModel) -> User:
        return User(
            **scope_fields(model),
            username=model.username,
            email=model.email,
            display_name=model.display_name,
            user_type=UserType(model.user_type),
            phone=model.phone,
        )
