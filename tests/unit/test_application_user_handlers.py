"""Unit tests for user command handlers.

Tests cover:
- CreateUser: isolation from memberships, username/email uniqueness per tenant
- Membership references (organization in tenant, departments in organization)
- UpdateUser email normalization and uniqueness
- AssignUserToOrganization re-scoping and its no-op case
- Profiles and relationships (dependent records, no events)
- DeleteUser removes only the deleted user's dependents

Architecture:
- Handlers resolved from a Container on the in-memory stores
"""

import pytest

from iam_admin.application.commands import (
    AddUserRelationship,
    AssignUserToOrganization,
    CreateUser,
    DeleteUser,
    UpdateUser,
    UpdateUserProfile,
)
from iam_admin.core.enums import ErrorCode
from iam_admin.core.result import Failure, Success
from iam_admin.domain.enums import (
    IsolationLevel,
    PrivacyLevel,
    RelationshipTargetType,
    RelationshipType,
)
from iam_admin.domain.events import UserAssignedToOrganizationEvent
from tests.utils.builders import ACTOR
from tests.utils.seed import (
    seed_department,
    seed_organization,
    seed_tenant,
    seed_user,
)


@pytest.fixture
async def tenant(container):
    return await seed_tenant(container)


def create(tenant_id, username="jdoe", **overrides) -> CreateUser:
    fields = {
        "tenant_id": tenant_id,
        "username": username,
        "email": f"{username}@Example.com",
        "display_name": "Jane Doe",
        "actor": ACTOR,
    }
    fields.update(overrides)
    return CreateUser(**fields)


@pytest.mark.unit
class TestCreateUser:
    """Test CreateUserHandler."""

    @pytest.mark.asyncio
    async def test_tenant_level_user(self, container, tenant):
        """Test a user without memberships is TENANT level and owns itself."""
        result = await container.create_user.handle(create(tenant.id))

        assert isinstance(result, Success)
        user = result.value
        assert user.isolation_level is IsolationLevel.TENANT
        assert user.privacy_level is PrivacyLevel.CONFIDENTIAL
        assert user.scope.user_id == user.id
        assert user.email == "jdoe@example.com"

    @pytest.mark.asyncio
    async def test_department_membership_sets_department_level(self, container, tenant):
        """Test department memberships imply DEPARTMENT isolation."""
        organization = await seed_organization(container, tenant.id)
        department = await seed_department(container, tenant.id, organization.id)

        result = await container.create_user.handle(
            create(
                tenant.id,
                organization_id=organization.id,
                department_ids=(department.id,),
            )
        )

        user = result.value
        assert user.isolation_level is IsolationLevel.DEPARTMENT
        assert user.department_ids == (department.id,)

    @pytest.mark.asyncio
    async def test_email_unique_case_insensitively(self, container, tenant):
        """Test an email differing only in case is a duplicate."""
        await seed_user(container, tenant.id, username="first", email="Same@Example.com")

        result = await container.create_user.handle(
            create(tenant.id, username="second", email="same@example.COM")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_username_unique_in_tenant(self, container, tenant):
        """Test usernames clash inside a tenant."""
        await seed_user(container, tenant.id, username="jdoe")

        result = await container.create_user.handle(
            create(tenant.id, username="jdoe", email="other@example.com")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.DUPLICATE_USERNAME

    @pytest.mark.asyncio
    async def test_department_of_other_organization_rejected(self, container, tenant):
        """Test departments must belong to the chosen organization."""
        engineering = await seed_organization(container, tenant.id, code="ENG")
        sales = await seed_organization(container, tenant.id, code="SALES")
        sales_department = await seed_department(container, tenant.id, sales.id)

        result = await container.create_user.handle(
            create(
                tenant.id,
                organization_id=engineering.id,
                department_ids=(sales_department.id,),
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.REFERENCE_SCOPE_MISMATCH
        assert result.error.field == "department_ids"

    @pytest.mark.asyncio
    async def test_departments_without_organization_invalid(self, container, tenant):
        """Test department_ids require organization_id."""
        result = await container.create_user.handle(
            create(tenant.id, department_ids=("D1",))
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.VALIDATION_FAILED
        assert result.error.violations[0].code == ErrorCode.FIELD_REQUIRED

    @pytest.mark.asyncio
    async def test_invalid_shape_reports_every_field(self, container, tenant):
        """Test short username, bad email and bad phone are all reported."""
        result = await container.create_user.handle(
            create(tenant.id, username="ab", email="not-an-email", phone="12ab")
        )

        assert isinstance(result, Failure)
        fields = {violation.field for violation in result.error.violations}
        assert fields == {"username", "email", "phone"}


@pytest.mark.unit
class TestUpdateUser:
    """Test UpdateUserHandler."""

    @pytest.mark.asyncio
    async def test_email_lowercased(self, container, tenant):
        """Test the new email is stored lowercase."""
        user = await seed_user(container, tenant.id)

        result = await container.update_user.handle(
            UpdateUser(user_id=user.id, actor=ACTOR, email="New@Example.com")
        )

        assert result.value.email == "new@example.com"
        assert result.value.version == 2

    @pytest.mark.asyncio
    async def test_email_taken_by_other_user(self, container, tenant):
        """Test a second user's email cannot be reused."""
        user = await seed_user(container, tenant.id, username="one")
        await seed_user(container, tenant.id, username="two")

        result = await container.update_user.handle(
            UpdateUser(user_id=user.id, actor=ACTOR, email="TWO@example.com")
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.DUPLICATE_EMAIL

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_noop(self, container, tenant):
        """Test the user's own email does not clash with itself."""
        user = await seed_user(container, tenant.id)

        result = await container.update_user.handle(
            UpdateUser(user_id=user.id, actor=ACTOR, email=user.email)
        )

        assert isinstance(result, Success)
        assert result.value.version == 1


@pytest.mark.unit
class TestAssignUserToOrganization:
    """Test AssignUserToOrganizationHandler."""

    @pytest.mark.asyncio
    async def test_assignment_rescopes_user(self, container, tenant):
        """Test the user moves to ORGANIZATION level with one event."""
        user = await seed_user(container, tenant.id)
        organization = await seed_organization(container, tenant.id)
        department = await seed_department(container, tenant.id, organization.id)

        result = await container.assign_user_to_organization.handle(
            AssignUserToOrganization(
                user_id=user.id,
                organization_id=organization.id,
                department_ids=(department.id,),
                actor=ACTOR,
            )
        )

        assert isinstance(result, Success)
        assigned = result.value
        assert assigned.organization_id == organization.id
        assert assigned.department_ids == (department.id,)
        assert assigned.isolation_level is IsolationLevel.ORGANIZATION
        last = container.memory_write_store.outbox_records()[-1]
        assert last.event_type == UserAssignedToOrganizationEvent.event_type
        assert last.version == 2

    @pytest.mark.asyncio
    async def test_repeated_assignment_is_noop(self, container, tenant):
        """Test assigning the same organization again records nothing."""
        organization = await seed_organization(container, tenant.id)
        user = await seed_user(container, tenant.id)
        command = AssignUserToOrganization(
            user_id=user.id, organization_id=organization.id, actor=ACTOR
        )
        await container.assign_user_to_organization.handle(command)
        records_before = len(container.memory_write_store.outbox_records())

        result = await container.assign_user_to_organization.handle(command)

        assert result.value.version == 2
        assert len(container.memory_write_store.outbox_records()) == records_before

    @pytest.mark.asyncio
    async def test_organization_of_other_tenant_rejected(self, container, tenant):
        """Test re-scoping cannot cross tenants."""
        user = await seed_user(container, tenant.id)
        other = await seed_tenant(container, code="OTHER")
        foreign = await seed_organization(container, other.id)

        result = await container.assign_user_to_organization.handle(
            AssignUserToOrganization(
                user_id=user.id, organization_id=foreign.id, actor=ACTOR
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.REFERENCE_SCOPE_MISMATCH


@pytest.mark.unit
class TestUserDependents:
    """Test profile, relationship and delete handlers."""

    @pytest.mark.asyncio
    async def test_profile_merges_supplied_fields(self, container, tenant):
        """Test a second profile update keeps earlier fields."""
        user = await seed_user(container, tenant.id)
        await container.update_user_profile.handle(
            UpdateUserProfile(user_id=user.id, actor=ACTOR, first_name="Jane")
        )

        result = await container.update_user_profile.handle(
            UpdateUserProfile(user_id=user.id, actor=ACTOR, locale="en-GB")
        )

        profile = result.value
        assert profile.first_name == "Jane"
        assert profile.locale == "en-GB"
        assert profile.tenant_id == tenant.id

    @pytest.mark.asyncio
    async def test_profile_writes_no_events(self, container, tenant):
        """Test profiles are not projected."""
        user = await seed_user(container, tenant.id)
        records_before = len(container.memory_write_store.outbox_records())

        await container.update_user_profile.handle(
            UpdateUserProfile(user_id=user.id, actor=ACTOR, bio="Hello")
        )

        assert len(container.memory_write_store.outbox_records()) == records_before

    @pytest.mark.asyncio
    async def test_relationship_target_must_be_in_tenant(self, container, tenant):
        """Test relationships cannot point into another tenant."""
        user = await seed_user(container, tenant.id)
        other = await seed_tenant(container, code="OTHER")

        result = await container.add_user_relationship.handle(
            AddUserRelationship(
                user_id=user.id,
                target_id=other.id,
                target_type=RelationshipTargetType.TENANT,
                relationship_type=RelationshipType.MEMBER,
                actor=ACTOR,
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.REFERENCE_SCOPE_MISMATCH

    @pytest.mark.asyncio
    async def test_delete_removes_only_own_dependents(self, container, tenant):
        """Test deleting one user leaves another user's records alone."""
        alice = await seed_user(container, tenant.id, username="alice")
        bob = await seed_user(container, tenant.id, username="bob")
        organization = await seed_organization(container, tenant.id)
        for user in (alice, bob):
            await container.update_user_profile.handle(
                UpdateUserProfile(user_id=user.id, actor=ACTOR, first_name=user.username)
            )
            added = await container.add_user_relationship.handle(
                AddUserRelationship(
                    user_id=user.id,
                    target_id=organization.id,
                    target_type=RelationshipTargetType.ORGANIZATION,
                    relationship_type=RelationshipType.MEMBER,
                    actor=ACTOR,
                )
            )
            assert isinstance(added, Success)

        result = await container.delete_user.handle(
            DeleteUser(user_id=alice.id, actor=ACTOR)
        )

        assert isinstance(result, Success)
        dependents = container.user_dependents
        assert await dependents.get_profile(alice.id) is None
        assert await dependents.find_relationships(alice.id) == []
        assert (await dependents.get_profile(bob.id)).first_name == "bob"
        assert len(await dependents.find_relationships(bob.id)) == 1
