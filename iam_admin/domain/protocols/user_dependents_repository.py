"""Repository protocol for user-owned dependent records.

Profiles and relationships belong to a user and have no events of their own;
they are removed with the user.
"""

from typing import Protocol

from iam_admin.domain.entities.user_dependents import UserProfile, UserRelationship


class UserDependentsRepository(Protocol):
    """Persistence port for UserProfile and UserRelationship records."""

    async def get_profile(self, user_id: str) -> UserProfile | None:
        ...

    async def save_profile(self, profile: UserProfile) -> None:
        """Insert or replace the profile keyed by ``profile.user_id``."""
        ...

    async def add_relationship(self, relationship: UserRelationship) -> None:
        ...

    async def find_relationships(self, user_id: str) -> list[UserRelationship]:
        ...

    async def delete_for_user(self, user_id: str) -> int:
        """Hard-delete the user's profile and relationships.

        Returns:
            Number of records removed.
        """
        ...
