"""UserDependentsRepository - SQLAlchemy implementation.

Profiles are upserted by user id; relationships are append-only until the
owning user is deleted.
"""

from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from iam_admin.domain.entities.user_dependents import UserProfile, UserRelationship
from iam_admin.domain.enums import RelationshipTargetType, RelationshipType
from iam_admin.infrastructure.errors import database_fault
from iam_admin.infrastructure.persistence.database import Database
from iam_admin.infrastructure.persistence.models.user_dependents import (
    UserProfileModel,
    UserRelationshipModel,
)
from iam_admin.infrastructure.timeouts import with_timeout

T = TypeVar("T")


class SQLAlchemyUserDependents:
    """SQLAlchemy implementation of UserDependentsRepository."""

    def __init__(self, database: Database, *, timeout: float = 5.0) -> None:
        self._database = database
        self._timeout = timeout

    async def _in_session(
        self, operation: str, work: Callable[[AsyncSession], Awaitable[T]]
    ) -> T:
        async def run() -> T:
            async with self._database.get_session() as session:
                return await work(session)

        try:
            return await with_timeout(run(), self._timeout, operation)
        except SQLAlchemyError as e:
            raise database_fault(operation, e) from e

    async def get_profile(self, user_id: str) -> UserProfile | None:
        async def work(session: AsyncSession) -> UserProfile | None:
            model = await session.get(UserProfileModel, user_id)
            return self._profile_to_domain(model) if model is not None else None

        return await self._in_session("user_profile.get", work)

    async def save_profile(self, profile: UserProfile) -> None:
        async def work(session: AsyncSession) -> None:
            await session.merge(
                UserProfileModel(
                    user_id=profile.user_id,
                    tenant_id=profile.tenant_id,
                    first_name=profile.first_name,
                    last_name=profile.last_name,
                    avatar_url=profile.avatar_url,
                    bio=profile.bio,
                    locale=profile.locale,
                    timezone=profile.timezone,
                    updated_at=profile.updated_at,
                )
            )

        await self._in_session("user_profile.save", work)

    async def add_relationship(self, relationship: UserRelationship) -> None:
        async def work(session: AsyncSession) -> None:
            session.add(
                UserRelationshipModel(
                    id=relationship.id,
                    user_id=relationship.user_id,
                    tenant_id=relationship.tenant_id,
                    target_id=relationship.target_id,
                    target_type=relationship.target_type.value,
                    relationship_type=relationship.relationship_type.value,
                    created_by=relationship.created_by,
                    created_at=relationship.created_at,
                )
            )

        await self._in_session("user_relationship.add", work)

    async def find_relationships(self, user_id: str) -> list[UserRelationship]:
        async def work(session: AsyncSession) -> list[UserRelationship]:
            result = await session.execute(
                select(UserRelationshipModel)
                .where(UserRelationshipModel.user_id == user_id)
                .order_by(UserRelationshipModel.created_at)
            )
            return [self._relationship_to_domain(row) for row in result.scalars()]

        return await self._in_session("user_relationship.find", work)

    async def delete_for_user(self, user_id: str) -> int:
        async def work(session: AsyncSession) -> int:
            relationships = await session.execute(
                delete(UserRelationshipModel).where(UserRelationshipModel.user_id == user_id)
            )
            profiles = await session.execute(
                delete(UserProfileModel).where(UserProfileModel.user_id == user_id)
            )
            return relationships.rowcount + profiles.rowcount

        return await self._in_session("user_dependents.delete_for_user", work)

    def _profile_to_domain(self, model: UserProfileModel) -> UserProfile:
        return UserProfile(
            user_id=model.user_id,
            tenant_id=model.tenant_id,
            updated_at=model.updated_at,
            first_name=model.first_name,
            last_name=model.last_name,
            avatar_url=model.avatar_url,
            bio=model.bio,
            locale=model.locale,
            timezone=model.timezone,
        )

    def _relationship_to_domain(self, model: UserRelationshipModel) -> UserRelationship:
        return UserRelationship(
            id=model.id,
            user_id=model.user_id,
            tenant_id=model.tenant_id,
            target_id=model.target_id,
            target_type=RelationshipTargetType(model.target_type),
            relationship_type=RelationshipType(model.relationship_type),
            created_by=model.created_by,
            created_at=model.created_at,
        )
