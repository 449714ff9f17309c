"""Integration tests for the command -> outbox -> projector -> query flow.

Tests cover:
- Create, project and query a department end to end
- Invalid input persists nothing and emits nothing
- Idempotent status changes emit no events
- Hierarchy rule rejections leave the entity unchanged
- Out-of-order and duplicate delivery converge on the same document
- Optimistic concurrency between two writers
- Background dispatch (outbox drained by the dispatcher, not the command)
- Failing projector: retries with backoff, then dead-letter
- Deleting a department with children, deleting a user with dependents
- Rendering a template from the read model

Architecture:
- Real Container on the in-memory backends
- No mocks except the logger
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from iam_admin.application.commands import (
    AddUserRelationship,
    ChangeStatus,
    CreateDepartment,
    DeleteDepartment,
    DeleteUser,
    UpdateDepartment,
    UpdateNotificationTemplate,
    UpdateUserProfile,
)
from iam_admin.application.projections import ProjectionDeferred
from iam_admin.application.queries import (
    FindByNaturalKey,
    GetEntity,
    ListEntities,
    RenderNotificationTemplate,
)
from iam_admin.core.container import Container
from iam_admin.core.enums import ErrorCode
from iam_admin.core.errors import BusinessRuleViolation, ValidationError
from iam_admin.core.result import Failure, Success
from iam_admin.domain.enums import (
    AggregateType,
    DepartmentType,
    LifecycleStatus,
    RelationshipTargetType,
    RelationshipType,
)
from iam_admin.domain.events.codec import decode_event
from iam_admin.domain.protocols import OutboxStatus
from iam_admin.domain.value_objects import Criteria, PageRequest
from tests.utils.builders import ACTOR
from tests.utils.seed import (
    seed_department,
    seed_organization,
    seed_template,
    seed_tenant,
    seed_user,
)

DEPARTMENT = AggregateType.DEPARTMENT


@pytest.fixture
async def org(container):
    tenant = await seed_tenant(container)
    organization = await seed_organization(container, tenant.id)
    return tenant, organization


def outbox_events(container: Container) -> list:
    return [decode_event(r.payload).value for r in container.memory_write_store.outbox_records()]


@pytest.mark.integration
class TestDepartmentLifecycle:
    """Department commands through to the read model."""

    async def test_create_then_query(self, container, org):
        """Test a created department is projected with the same fields."""
        # Arrange
        tenant, organization = org
        before = len(container.memory_write_store.outbox_records())

        # Act
        result = await container.create_department.handle(
            CreateDepartment(
                tenant_id=tenant.id,
                organization_id=organization.id,
                name="Tech",
                code="TECH",
                department_type=DepartmentType.TECHNICAL,
                actor=ACTOR,
            )
        )

        # Assert
        assert isinstance(result, Success)
        department = result.value
        assert department.status is LifecycleStatus.INITIALIZING
        new_events = outbox_events(container)[before:]
        assert [e.event_type for e in new_events] == ["department.created"]
        assert new_events[0].aggregate_id == department.id

        found = await container.get_entity.handle(
            GetEntity(aggregate_type=DEPARTMENT, entity_id=department.id)
        )
        assert isinstance(found, Success)
        assert found.value.data["name"] == "Tech"
        assert found.value.data["code"] == "TECH"
        assert found.value.status is LifecycleStatus.INITIALIZING

    async def test_invalid_code_persists_nothing(self, container, org):
        """Test validation failure writes no row and no event."""
        tenant, organization = org
        rows_before = len(container.memory_write_store.rows(DEPARTMENT))
        events_before = len(container.memory_write_store.outbox_records())

        result = await container.create_department.handle(
            CreateDepartment(
                tenant_id=tenant.id,
                organization_id=organization.id,
                name="Tech",
                code="bad code!",
                actor=ACTOR,
            )
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, ValidationError)
        assert len(container.memory_write_store.rows(DEPARTMENT)) == rows_before
        assert len(container.memory_write_store.outbox_records()) == events_before

    async def test_activate_twice_emits_one_event(self, container, org):
        """Test a repeated transition to the current status is a silent no-op."""
        # Arrange
        tenant, organization = org
        department = await seed_department(container, tenant.id, organization.id)
        activate = ChangeStatus(
            aggregate_type=DEPARTMENT,
            aggregate_id=department.id,
            target_status=LifecycleStatus.ACTIVE,
            actor=ACTOR,
        )

        # Act
        first = await container.change_status.handle(activate)
        after_first = len(container.memory_write_store.outbox_records())
        second = await container.change_status.handle(activate)

        # Assert
        assert isinstance(first, Success)
        assert isinstance(second, Success)
        assert second.value.version == 2
        assert len(container.memory_write_store.outbox_records()) == after_first

    async def test_self_parent_leaves_entity_unchanged(self, container, org):
        """Test a rejected hierarchy change changes nothing."""
        tenant, organization = org
        department = await seed_department(container, tenant.id, organization.id)

        result = await container.update_department.handle(
            UpdateDepartment(
                department_id=department.id,
                actor=ACTOR,
                parent_department_id=department.id,
            )
        )

        assert isinstance(result, Failure)
        assert isinstance(result.error, BusinessRuleViolation)
        stored = container.memory_write_store.rows(DEPARTMENT)[department.id]
        assert stored.version == 1
        assert stored.parent_department_id is None

    async def test_concurrent_writers_one_wins(self, container, org):
        """Test the second writer holding a stale version is rejected."""
        tenant, organization = org
        department = await seed_department(container, tenant.id, organization.id)

        first = await container.update_department.handle(
            UpdateDepartment(
                department_id=department.id, actor=ACTOR, name="First", expected_version=1
            )
        )
        second = await container.update_department.handle(
            UpdateDepartment(
                department_id=department.id, actor=ACTOR, name="Second", expected_version=1
            )
        )

        assert isinstance(first, Success)
        assert isinstance(second, Failure)
        assert second.error.code == ErrorCode.CONCURRENCY_CONFLICT
        found = await container.get_entity.handle(
            GetEntity(aggregate_type=DEPARTMENT, entity_id=department.id)
        )
        assert found.value.data["name"] == "First"

    async def test_delete_with_children_rejected_then_allowed(self, container, org):
        """Test a parent can be deleted only after its children."""
        # Arrange
        tenant, organization = org
        parent = await seed_department(container, tenant.id, organization.id, code="P")
        child = await seed_department(
            container, tenant.id, organization.id, code="C", parent_department_id=parent.id
        )

        # Act
        blocked = await container.delete_department.handle(
            DeleteDepartment(department_id=parent.id, actor=ACTOR)
        )
        await container.delete_department.handle(
            DeleteDepartment(department_id=child.id, actor=ACTOR)
        )
        allowed = await container.delete_department.handle(
            DeleteDepartment(department_id=parent.id, actor=ACTOR)
        )

        # Assert
        assert blocked.error.code == ErrorCode.HAS_CHILDREN
        assert isinstance(allowed, Success)
        listed = await container.list_entities.handle(
            ListEntities(
                aggregate_type=DEPARTMENT,
                criteria=Criteria(organization_id=organization.id),
                page=PageRequest(),
            )
        )
        assert listed.value.total == 0

    async def test_deleted_code_can_be_reused(self, container, org):
        """Test natural keys are released by soft deletion."""
        tenant, organization = org
        department = await seed_department(container, tenant.id, organization.id)
        await container.delete_department.handle(
            DeleteDepartment(department_id=department.id, actor=ACTOR)
        )

        replacement = await seed_department(container, tenant.id, organization.id)

        found = await container.find_by_natural_key.handle(
            FindByNaturalKey(
                aggregate_type=DEPARTMENT, field="code", value="TECH", tenant_id=tenant.id
            )
        )
        assert found.value.id == replacement.id


@pytest.mark.integration
class TestDeliveryOrdering:
    """Projection under reordered and repeated delivery."""

    async def test_reverse_order_converges(self, memory_settings, mock_logger):
        """Test v2 waits for v1 and the final document matches in-order delivery."""
        # Arrange
        container = Container(
            memory_settings.model_copy(update={"dispatch_inline": False}), logger=mock_logger
        )
        tenant = await seed_tenant(container)
        organization = await seed_organization(container, tenant.id)
        department = await seed_department(container, tenant.id, organization.id)
        await container.update_department.handle(
            UpdateDepartment(department_id=department.id, actor=ACTOR, name="X")
        )
        created, updated = [e for e in outbox_events(container) if e.aggregate_id == department.id]
        projector = container.projector

        # Act
        with pytest.raises(ProjectionDeferred):
            await projector.handle(updated)
        assert await container.read_model_store.get(DEPARTMENT, department.id) is None
        await projector.handle(created)

        # Assert
        document = await container.read_model_store.get(DEPARTMENT, department.id)
        assert document.data["name"] == "X"
        assert document.last_applied_version == 2
        assert projector.parked_versions(department.id) == []

    async def test_redelivery_is_idempotent(self, container, org):
        """Test delivering every event again changes nothing."""
        tenant, organization = org
        department = await seed_department(container, tenant.id, organization.id)
        await container.update_department.handle(
            UpdateDepartment(department_id=department.id, actor=ACTOR, name="Renamed")
        )
        before = await container.read_model_store.get(DEPARTMENT, department.id)

        for event in outbox_events(container):
            await container.projector.handle(event)

        after = await container.read_model_store.get(DEPARTMENT, department.id)
        assert after == before


@pytest.mark.integration
class TestBackgroundDispatch:
    """Dispatcher draining the outbox outside the command."""

    @pytest.fixture
    def background(self, memory_settings, mock_logger) -> Container:
        settings = memory_settings.model_copy(
            update={"dispatch_inline": False, "projection_max_attempts": 2}
        )
        return Container(settings, logger=mock_logger)

    async def test_read_model_lags_until_dispatch(self, background):
        """Test the command commits to the outbox and the dispatcher projects it."""
        tenant = await seed_tenant(background)

        before = await background.get_entity.handle(
            GetEntity(aggregate_type=AggregateType.TENANT, entity_id=tenant.id)
        )
        report = await background.dispatcher.dispatch_pending()
        after = await background.get_entity.handle(
            GetEntity(aggregate_type=AggregateType.TENANT, entity_id=tenant.id)
        )

        assert isinstance(before, Failure)
        assert report.dispatched == 1
        assert isinstance(after, Success)

    async def test_failing_projector_dead_letters(self, background, monkeypatch):
        """Test repeated projector failures end in a DEAD outbox record."""
        # Arrange
        await seed_tenant(background)
        monkeypatch.setattr(
            background.memory_read_store,
            "upsert",
            AsyncMock(side_effect=RuntimeError("read store down")),
        )

        # Act
        first = await background.dispatcher.dispatch_pending()
        await asyncio.sleep(0.05)
        second = await background.dispatcher.dispatch_pending()

        # Assert
        assert first.retried == 1
        assert second.dead == 1
        counts = await background.outbox.count_by_status()
        assert counts[OutboxStatus.DEAD] == 1
        assert counts[OutboxStatus.PENDING] == 0

    async def test_run_loop_projects_published_events(self, background):
        """Test the background loop picks up committed events."""
        stop = asyncio.Event()
        task = asyncio.create_task(background.dispatcher.run(stop))
        tenant = await seed_tenant(background)

        for _ in range(100):
            if await background.read_model_store.get(AggregateType.TENANT, tenant.id):
                break
            await asyncio.sleep(0.01)
        stop.set()
        await asyncio.wait_for(task, timeout=2.0)

        assert await background.read_model_store.get(AggregateType.TENANT, tenant.id)


@pytest.mark.integration
class TestUsersAndTemplates:
    """User dependents and template rendering."""

    async def test_delete_user_removes_dependents(self, container, org):
        """Test profiles and relationships go with their user only."""
        # Arrange
        tenant, organization = org
        alice = await seed_user(container, tenant.id, username="alice")
        bob = await seed_user(container, tenant.id, username="bob")
        for user in (alice, bob):
            await container.update_user_profile.handle(
                UpdateUserProfile(user_id=user.id, actor=ACTOR, first_name=user.username)
            )
            await container.add_user_relationship.handle(
                AddUserRelationship(
                    user_id=user.id,
                    actor=ACTOR,
                    target_id=organization.id,
                    target_type=RelationshipTargetType.ORGANIZATION,
                    relationship_type=RelationshipType.MEMBER,
                )
            )

        # Act
        result = await container.delete_user.handle(DeleteUser(user_id=alice.id, actor=ACTOR))

        # Assert
        assert isinstance(result, Success)
        assert await container.user_dependents.get_profile(alice.id) is None
        assert await container.user_dependents.find_relationships(alice.id) == []
        assert (await container.user_dependents.get_profile(bob.id)).first_name == "bob"
        assert len(await container.user_dependents.find_relationships(bob.id)) == 1

    async def test_render_after_update(self, container, org):
        """Test rendering uses the latest projected template content."""
        tenant, _ = org
        template = await seed_template(container, tenant.id)
        await container.update_notification_template.handle(
            UpdateNotificationTemplate(
                template_id=template.id,
                actor=ACTOR,
                content="Hi {{ name }} ({{ code }})",
            )
        )

        result = await container.render_notification_template.handle(
            RenderNotificationTemplate(
                template_id=template.id, values={"name": "Ann", "code": "A1"}
            )
        )

        assert isinstance(result, Success)
        assert result.value.content == "Hi Ann (A1)"
        assert result.value.subject == "Welcome Ann"

