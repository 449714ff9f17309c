"""Composition root.

``Container(settings)`` builds every component once, on first access, and
hands them out explicitly. There are no module-level singletons: tests build
their own container (usually with the in-memory backends) and production
builds one in ``iam_admin.main``.

Backend selection:
    - write_store: ``sqlalchemy`` (PostgreSQL via asyncpg) or ``memory``
    - read_store: ``mongodb`` (Motor) or ``memory``

Event wiring is registry-driven: the projector subscribes to every projected
event class and the logging handler to every class that requires logging.

Usage:
    container = Container(get_settings())
    result = await container.create_department.handle(CreateDepartment(...))
    await container.dispatcher.dispatch_pending()
"""

from functools import cached_property
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient

from iam_admin.application.commands.handlers import (
    AddUserRelationshipHandler,
    AssignUserToOrganizationHandler,
    ChangeStatusHandler,
    CreateDepartmentHandler,
    CreateNotificationTemplateHandler,
    CreateOrganizationHandler,
    CreateTenantHandler,
    CreateUserHandler,
    DeleteDepartmentHandler,
    DeleteNotificationTemplateHandler,
    DeleteOrganizationHandler,
    DeleteTenantHandler,
    DeleteUserHandler,
    UpdateDepartmentHandler,
    UpdateNotificationTemplateHandler,
    UpdateOrganizationHandler,
    UpdateTenantHandler,
    UpdateUserHandler,
    UpdateUserProfileHandler,
)
from iam_admin.application.projections import ReadModelProjector
from iam_admin.application.queries.handlers import (
    CountEntitiesHandler,
    FindByNaturalKeyHandler,
    GetEntityHandler,
    ListEntitiesHandler,
    RenderNotificationTemplateHandler,
)
from iam_admin.core.config import Settings
from iam_admin.domain.enums import AggregateType
from iam_admin.domain.events import UnrecognizedEvent
from iam_admin.domain.events.registry import EVENT_REGISTRY, get_events_requiring_logging
from iam_admin.domain.protocols import (
    EntityRepository,
    LoggerProtocol,
    OutboxProtocol,
    ReadModelRepository,
    ReadModelStore,
    UserDependentsRepository,
)
from iam_admin.infrastructure.events import InMemoryEventBus, OutboxDispatcher
from iam_admin.infrastructure.events.handlers import LoggingEventHandler
from iam_admin.infrastructure.logging import ConsoleAdapter
from iam_admin.infrastructure.memory import (
    InMemoryReadModelRepository,
    InMemoryReadModelStore,
    InMemoryUserDependents,
    InMemoryWriteStore,
)
from iam_admin.infrastructure.persistence import Database
from iam_admin.infrastructure.persistence.repositories import (
    DepartmentRepository,
    NotificationTemplateRepository,
    OrganizationRepository,
    SQLAlchemyOutbox,
    SQLAlchemyUserDependents,
    TenantRepository,
    UserRepository,
)
from iam_admin.infrastructure.read_models import MongoReadModelRepository, MongoReadModelStore

SQL_REPOSITORIES = {
    AggregateType.TENANT: TenantRepository,
    AggregateType.ORGANIZATION: OrganizationRepository,
    AggregateType.DEPARTMENT: DepartmentRepository,
    AggregateType.USER: UserRepository,
    AggregateType.NOTIFICATION_TEMPLATE: NotificationTemplateRepository,
}


class Container:
    """Builds and owns the application's components.

    Attributes:
        settings: Settings the container was built from.
    """

    def __init__(self, settings: Settings, *, logger: LoggerProtocol | None = None) -> None:
        """Initialize container.

        Args:
            settings: Application settings.
            logger: Logger override (tests); defaults to a ConsoleAdapter
                configured from settings.
        """
        self.settings = settings
        if logger is not None:
            self.__dict__["logger"] = logger

    # =========================================================================
    # Infrastructure
    # =========================================================================

    @cached_property
    def logger(self) -> LoggerProtocol:
        return ConsoleAdapter(
            use_json=self.settings.use_json_logs,
            level="DEBUG" if self.settings.debug else self.settings.log_level,
        )

    @cached_property
    def database(self) -> Database:
        return Database(
            self.settings.database_url,
            echo=self.settings.db_echo,
            pool_size=self.settings.db_pool_size,
            max_overflow=self.settings.db_max_overflow,
        )

    @cached_property
    def memory_write_store(self) -> InMemoryWriteStore:
        return InMemoryWriteStore()

    @cached_property
    def memory_read_store(self) -> InMemoryReadModelStore:
        return InMemoryReadModelStore()

    @cached_property
    def mongo_client(self) -> AsyncIOMotorClient:
        return AsyncIOMotorClient(self.settings.mongodb_url, tz_aware=True)

    @property
    def uses_sql(self) -> bool:
        return self.settings.write_store == "sqlalchemy"

    @property
    def uses_mongo(self) -> bool:
        return self.settings.read_store == "mongodb"

    @cached_property
    def repositories(self) -> dict[AggregateType, EntityRepository[Any]]:
        """Write repositories by aggregate kind."""
        if self.uses_sql:
            return {
                kind: repository(self.database, timeout=self.settings.store_timeout_seconds)
                for kind, repository in SQL_REPOSITORIES.items()
            }
        return {kind: self.memory_write_store.repository(kind) for kind in AggregateType}

    @cached_property
    def outbox(self) -> OutboxProtocol:
        if self.uses_sql:
            return SQLAlchemyOutbox(self.database, timeout=self.settings.store_timeout_seconds)
        return self.memory_write_store

    @cached_property
    def user_dependents(self) -> UserDependentsRepository:
        if self.uses_sql:
            return SQLAlchemyUserDependents(
                self.database, timeout=self.settings.store_timeout_seconds
            )
        return InMemoryUserDependents()

    @cached_property
    def read_model_store(self) -> ReadModelStore:
        if self.uses_mongo:
            return MongoReadModelStore(
                self.mongo_client[self.settings.mongodb_database],
                timeout=self.settings.store_timeout_seconds,
            )
        return self.memory_read_store

    @cached_property
    def read_models(self) -> ReadModelRepository:
        if self.uses_mongo:
            return MongoReadModelRepository(
                self.mongo_client[self.settings.mongodb_database],
                timeout=self.settings.store_timeout_seconds,
            )
        return InMemoryReadModelRepository(self.memory_read_store)

    # =========================================================================
    # Events
    # =========================================================================

    @cached_property
    def projector(self) -> ReadModelProjector:
        return ReadModelProjector(
            store=self.read_model_store,
            logger=self.logger,
            park_limit=self.settings.projection_park_limit,
        )

    @cached_property
    def event_bus(self) -> InMemoryEventBus:
        """Event bus with registry-driven subscriptions."""
        bus = InMemoryEventBus(
            logger=self.logger,
            handler_timeout=self.settings.dispatch_timeout_seconds,
        )
        for meta in EVENT_REGISTRY:
            if meta.projected:
                bus.subscribe(meta.event_class, self.projector)
        bus.subscribe(UnrecognizedEvent, self.projector)

        logging_handler = LoggingEventHandler(logger=self.logger)
        for event_class in get_events_requiring_logging():
            bus.subscribe(event_class, logging_handler.handle)
        return bus

    @cached_property
    def dispatcher(self) -> OutboxDispatcher:
        return OutboxDispatcher(
            outbox=self.outbox,
            bus=self.event_bus,
            logger=self.logger,
            batch_size=self.settings.outbox_batch_size,
            poll_interval=self.settings.outbox_poll_interval_seconds,
            max_attempts=self.settings.projection_max_attempts,
            backoff_base=self.settings.projection_backoff_base_seconds,
            backoff_max=self.settings.projection_backoff_max_seconds,
            dispatch_timeout=self.settings.dispatch_timeout_seconds,
            store_timeout=self.settings.store_timeout_seconds,
            dispatch_inline=self.settings.dispatch_inline,
        )

    # =========================================================================
    # Command handlers
    # =========================================================================

    def _command_deps(self) -> dict[str, Any]:
        return {"dispatcher": self.dispatcher, "logger": self.logger}

    def _repo(self, kind: AggregateType) -> EntityRepository[Any]:
        return self.repositories[kind]

    @cached_property
    def create_tenant(self) -> CreateTenantHandler:
        return CreateTenantHandler(
            tenants=self._repo(AggregateType.TENANT), **self._command_deps()
        )

    @cached_property
    def update_tenant(self) -> UpdateTenantHandler:
        return UpdateTenantHandler(
            tenants=self._repo(AggregateType.TENANT), **self._command_deps()
        )

    @cached_property
    def delete_tenant(self) -> DeleteTenantHandler:
        return DeleteTenantHandler(
            tenants=self._repo(AggregateType.TENANT),
            organizations=self._repo(AggregateType.ORGANIZATION),
            **self._command_deps(),
        )

    @cached_property
    def create_organization(self) -> CreateOrganizationHandler:
        return CreateOrganizationHandler(
            tenants=self._repo(AggregateType.TENANT),
            organizations=self._repo(AggregateType.ORGANIZATION),
            **self._command_deps(),
        )

    @cached_property
    def update_organization(self) -> UpdateOrganizationHandler:
        return UpdateOrganizationHandler(
            organizations=self._repo(AggregateType.ORGANIZATION), **self._command_deps()
        )

    @cached_property
    def delete_organization(self) -> DeleteOrganizationHandler:
        return DeleteOrganizationHandler(
            organizations=self._repo(AggregateType.ORGANIZATION),
            departments=self._repo(AggregateType.DEPARTMENT),
            **self._command_deps(),
        )

    @cached_property
    def create_department(self) -> CreateDepartmentHandler:
        return CreateDepartmentHandler(
            organizations=self._repo(AggregateType.ORGANIZATION),
            departments=self._repo(AggregateType.DEPARTMENT),
            users=self._repo(AggregateType.USER),
            max_depth=self.settings.department_max_depth,
            **self._command_deps(),
        )

    @cached_property
    def update_department(self) -> UpdateDepartmentHandler:
        return UpdateDepartmentHandler(
            departments=self._repo(AggregateType.DEPARTMENT),
            users=self._repo(AggregateType.USER),
            max_depth=self.settings.department_max_depth,
            **self._command_deps(),
        )

    @cached_property
    def delete_department(self) -> DeleteDepartmentHandler:
        return DeleteDepartmentHandler(
            departments=self._repo(AggregateType.DEPARTMENT), **self._command_deps()
        )

    @cached_property
    def create_user(self) -> CreateUserHandler:
        return CreateUserHandler(
            users=self._repo(AggregateType.USER),
            organizations=self._repo(AggregateType.ORGANIZATION),
            departments=self._repo(AggregateType.DEPARTMENT),
            **self._command_deps(),
        )

    @cached_property
    def update_user(self) -> UpdateUserHandler:
        return UpdateUserHandler(users=self._repo(AggregateType.USER), **self._command_deps())

    @cached_property
    def assign_user_to_organization(self) -> AssignUserToOrganizationHandler:
        return AssignUserToOrganizationHandler(
            users=self._repo(AggregateType.USER),
            organizations=self._repo(AggregateType.ORGANIZATION),
            departments=self._repo(AggregateType.DEPARTMENT),
            **self._command_deps(),
        )

    @cached_property
    def update_user_profile(self) -> UpdateUserProfileHandler:
        return UpdateUserProfileHandler(
            users=self._repo(AggregateType.USER),
            dependents=self.user_dependents,
            **self._command_deps(),
        )

    @cached_property
    def add_user_relationship(self) -> AddUserRelationshipHandler:
        return AddUserRelationshipHandler(
            users=self._repo(AggregateType.USER),
            tenants=self._repo(AggregateType.TENANT),
            organizations=self._repo(AggregateType.ORGANIZATION),
            departments=self._repo(AggregateType.DEPARTMENT),
            dependents=self.user_dependents,
            **self._command_deps(),
        )

    @cached_property
    def delete_user(self) -> DeleteUserHandler:
        return DeleteUserHandler(
            users=self._repo(AggregateType.USER),
            dependents=self.user_dependents,
            **self._command_deps(),
        )

    @cached_property
    def create_notification_template(self) -> CreateNotificationTemplateHandler:
        return CreateNotificationTemplateHandler(
            templates=self._repo(AggregateType.NOTIFICATION_TEMPLATE),
            organizations=self._repo(AggregateType.ORGANIZATION),
            platform_tenant_id=self.settings.platform_tenant_id,
            **self._command_deps(),
        )

    @cached_property
    def update_notification_template(self) -> UpdateNotificationTemplateHandler:
        return UpdateNotificationTemplateHandler(
            templates=self._repo(AggregateType.NOTIFICATION_TEMPLATE),
            **self._command_deps(),
        )

    @cached_property
    def delete_notification_template(self) -> DeleteNotificationTemplateHandler:
        return DeleteNotificationTemplateHandler(
            templates=self._repo(AggregateType.NOTIFICATION_TEMPLATE),
            **self._command_deps(),
        )

    @cached_property
    def change_status(self) -> ChangeStatusHandler:
        return ChangeStatusHandler(repositories=self.repositories, **self._command_deps())

    # =========================================================================
    # Query handlers
    # =========================================================================

    @cached_property
    def get_entity(self) -> GetEntityHandler:
        return GetEntityHandler(read_models=self.read_models, logger=self.logger)

    @cached_property
    def find_by_natural_key(self) -> FindByNaturalKeyHandler:
        return FindByNaturalKeyHandler(read_models=self.read_models, logger=self.logger)

    @cached_property
    def list_entities(self) -> ListEntitiesHandler:
        return ListEntitiesHandler(
            read_models=self.read_models,
            logger=self.logger,
            max_page_size=self.settings.max_page_size,
            default_page_size=self.settings.default_page_size,
        )

    @cached_property
    def count_entities(self) -> CountEntitiesHandler:
        return CountEntitiesHandler(read_models=self.read_models, logger=self.logger)

    @cached_property
    def render_notification_template(self) -> RenderNotificationTemplateHandler:
        return RenderNotificationTemplateHandler(
            read_models=self.read_models, logger=self.logger
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def startup(self) -> None:
        """Prepare backing stores (read model indexes)."""
        store = self.read_model_store
        if isinstance(store, MongoReadModelStore):
            await store.ensure_indexes()
        self.logger.info(
            "container_started",
            write_store=self.settings.write_store,
            read_store=self.settings.read_store,
            environment=self.settings.environment.value,
        )

    async def shutdown(self) -> None:
        """Release connections opened by the container."""
        if "database" in self.__dict__:
            await self.database.close()
        if "mongo_client" in self.__dict__:
            self.mongo_client.close()
        self.logger.info("container_stopped")
