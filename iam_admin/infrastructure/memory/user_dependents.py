"""In-memory storage for user profiles and relationships."""

import copy

from iam_admin.domain.entities.user_dependents import UserProfile, UserRelationship


class InMemoryUserDependents:
    """UserDependentsRepository backed by dictionaries."""

    def __init__(self) -> None:
        self._profiles: dict[str, UserProfile] = {}
        self._relationships: dict[str, list[UserRelationship]] = {}

    async def get_profile(self, user_id: str) -> UserProfile | None:
        profile = self._profiles.get(user_id)
        return copy.copy(profile) if profile is not None else None

    async def save_profile(self, profile: UserProfile) -> None:
        self._profiles[profile.user_id] = copy.copy(profile)

    async def add_relationship(self, relationship: UserRelationship) -> None:
        self._relationships.setdefault(relationship.user_id, []).append(
            copy.copy(relationship)
        )

    async def find_relationships(self, user_id: str) -> list[UserRelationship]:
        return [copy.copy(r) for r in self._relationships.get(user_id, [])]

    async def delete_for_user(self, user_id: str) -> int:
        removed = len(self._relationships.pop(user_id, []))
        if self._profiles.pop(user_id, None) is not None:
            removed += 1
        return removed
