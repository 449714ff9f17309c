"""Unit tests for organization command handlers.

Tests cover:
- CreateOrganization requires an existing tenant
- Name and code unique per tenant
- UpdateOrganization with optimistic version check
- DeleteOrganization rejected while departments remain

Architecture:
- Handlers resolved from a Container on the in-memory write store
"""

import pytest

from iam_admin.application.commands import (
    CreateOrganization,
    DeleteOrganization,
    UpdateOrganization,
)
from iam_admin.core.enums import ErrorCode
from iam_admin.core.result import Failure, Success
from iam_admin.domain.enums import IsolationLevel, OrganizationType
from tests.utils.builders import ACTOR
from tests.utils.seed import seed_department, seed_organization, seed_tenant


@pytest.mark.unit
class TestOrganizationHandlers:
    """Test organization create, update and delete."""

    @pytest.mark.asyncio
    async def test_create_in_existing_tenant(self, container):
        """Test the organization is ORGANIZATION level and scoped to itself."""
        tenant = await seed_tenant(container)

        result = await container.create_organization.handle(
            CreateOrganization(
                tenant_id=tenant.id,
                name="Engineering",
                code="ENG",
                organization_type=OrganizationType.BUSINESS,
                actor=ACTOR,
            )
        )

        assert isinstance(result, Success)
        organization = result.value
        assert organization.isolation_level is IsolationLevel.ORGANIZATION
        assert organization.organization_id == organization.id
        assert organization.tenant_id == tenant.id

    @pytest.mark.asyncio
    async def test_create_in_missing_tenant(self, container):
        """Test REFERENCE_NOT_FOUND for an unknown tenant."""
        result = await container.create_organization.handle(
            CreateOrganization(
                tenant_id="no-such-tenant",
                name="Engineering",
                code="ENG",
                organization_type=OrganizationType.BUSINESS,
                actor=ACTOR,
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.REFERENCE_NOT_FOUND
        assert result.error.field == "tenant_id"

    @pytest.mark.asyncio
    async def test_duplicate_name_in_tenant(self, container):
        """Test the name is unique within the tenant."""
        tenant = await seed_tenant(container)
        await seed_organization(container, tenant.id, code="ENG", name="Engineering")

        result = await container.create_organization.handle(
            CreateOrganization(
                tenant_id=tenant.id,
                name="Engineering",
                code="ENG2",
                organization_type=OrganizationType.PROJECT,
                actor=ACTOR,
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.DUPLICATE_NAME

    @pytest.mark.asyncio
    async def test_update_with_current_version(self, container):
        """Test an update at the current version applies."""
        tenant = await seed_tenant(container)
        organization = await seed_organization(container, tenant.id)

        result = await container.update_organization.handle(
            UpdateOrganization(
                organization_id=organization.id,
                actor="editor",
                organization_type=OrganizationType.MATRIX,
                expected_version=1,
            )
        )

        assert isinstance(result, Success)
        assert result.value.organization_type is OrganizationType.MATRIX
        assert result.value.updated_by == "editor"
        assert result.value.version == 2

    @pytest.mark.asyncio
    async def test_second_writer_with_stale_version_conflicts(self, container):
        """Test the second of two writers on the same version loses."""
        tenant = await seed_tenant(container)
        organization = await seed_organization(container, tenant.id)
        await container.update_organization.handle(
            UpdateOrganization(
                organization_id=organization.id,
                actor="first",
                description="first",
                expected_version=1,
            )
        )

        result = await container.update_organization.handle(
            UpdateOrganization(
                organization_id=organization.id,
                actor="second",
                description="second",
                expected_version=1,
            )
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.CONCURRENCY_CONFLICT
        assert result.error.actual_version == 2

    @pytest.mark.asyncio
    async def test_delete_with_departments_rejected(self, container):
        """Test HAS_CHILDREN while departments exist."""
        tenant = await seed_tenant(container)
        organization = await seed_organization(container, tenant.id)
        await seed_department(container, tenant.id, organization.id)

        result = await container.delete_organization.handle(
            DeleteOrganization(organization_id=organization.id, actor=ACTOR)
        )

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.HAS_CHILDREN

    @pytest.mark.asyncio
    async def test_delete_empty_organization(self, container):
        """Test an empty organization is soft-deleted."""
        tenant = await seed_tenant(container)
        organization = await seed_organization(container, tenant.id)

        result = await container.delete_organization.handle(
            DeleteOrganization(organization_id=organization.id, actor=ACTOR)
        )

        assert isinstance(result, Success)
        repository = container.repositories[organization.AGGREGATE_TYPE]
        assert await repository.find_by_id(organization.id) is None
