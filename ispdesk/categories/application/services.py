"""
Category Application Services
=============================

The category registry: the source of SLA hours for every ticket.

Following SOLID principles:
- Single Responsibility: registry rules live here, storage in repositories
- Dependency Inversion: depends on repository and provider interfaces
"""

import dataclasses
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence
from uuid import uuid4

from ispdesk.audit.application import AuditTrail
from ispdesk.categories.domain import (
    CategoryCode,
    CategoryTemplate,
    DEFAULT_CATEGORIES,
    TicketCategoryConfig,
)
from ispdesk.config import AuditAction, Permission
from ispdesk.core import (
    Actor,
    IAuthorizer,
    ResourceNotFoundException,
    SYSTEM_ACTOR,
    ValidationException,
)
from ispdesk.shared.infrastructure.logging import get_logger
from ispdesk.shared.time import Clock, utc_now

logger = get_logger(__name__)

AUDIT_ENTITY = "TicketCategory"
EDITABLE_FIELDS = ("name", "code", "sla_hours", "description")


# ========== Repository Interfaces (Dependency Inversion) ==========

class ICategoryRepository(ABC):
    """Interface for category data access."""

    @abstractmethod
    async def get_by_id(self, category_id: str) -> Optional[TicketCategoryConfig]:
        """Get category by ID."""

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[TicketCategoryConfig]:
        """Get category by its code."""

    @abstractmethod
    async def list(self) -> List[TicketCategoryConfig]:
        """All categories ordered by name."""

    @abstractmethod
    async def add(self, category: TicketCategoryConfig) -> TicketCategoryConfig:
        """Persist a new category."""

    @abstractmethod
    async def update(self, category: TicketCategoryConfig) -> TicketCategoryConfig:
        """Persist changes to an existing category."""

    @abstractmethod
    async def delete(self, category_id: str) -> None:
        """Remove a category."""

    @abstractmethod
    async def count(self) -> int:
        """Number of registered categories."""


class ICategoryDefaultsProvider(ABC):
    """Interface for the starter category set."""

    @abstractmethod
    def get_defaults(self) -> Sequence[CategoryTemplate]:
        """Categories inserted into an empty registry."""


# ========== Application Services ==========

class CategoryRegistryService:
    """
    Create, edit, delete and seed ticket categories.

    Mutations require the `manage_settings` capability. Tickets refer to
    categories by code only, so deleting a category never touches them.
    """

    def __init__(
        self,
        repository: ICategoryRepository,
        authorizer: IAuthorizer,
        defaults_provider: Optional[ICategoryDefaultsProvider] = None,
        audit_trail: Optional[AuditTrail] = None,
        clock: Optional[Clock] = None
    ):
        self._repo = repository
        self._authorizer = authorizer
        self._defaults = defaults_provider
        self._audit = audit_trail
        self._clock = clock or utc_now

    # ---------- Queries ----------

    async def list(self) -> List[TicketCategoryConfig]:
        return await self._repo.list()

    async def get(self, category_id: str) -> TicketCategoryConfig:
        category = await self._repo.get_by_id(category_id)
        if category is None:
            raise ResourceNotFoundException("TicketCategory", category_id)
        return category

    async def get_by_code(self, code: str) -> TicketCategoryConfig:
        category = await self._repo.get_by_code(code)
        if category is None:
            raise ResourceNotFoundException("TicketCategory", code)
        return category

    async def resolve_code(self, code: str) -> TicketCategoryConfig:
        """
        Look up a category reference coming from outside.

        Raises:
            ValidationException: code is not a well-formed slug
            ResourceNotFoundException: no category is registered under it
        """
        return await self.get_by_code(CategoryCode(code).value)

    # ---------- Commands ----------

    async def create(
        self,
        name: str,
        code: str,
        sla_hours: int,
        description: str = "",
        actor: Actor = SYSTEM_ACTOR
    ) -> TicketCategoryConfig:
        self._authorizer.require(actor, Permission.MANAGE_SETTINGS)

        category = TicketCategoryConfig(
            id=str(uuid4()),
            code=code,
            name=name,
            sla_hours=sla_hours,
            description=description or "",
            created_at=self._clock(),
        )

        if await self._repo.get_by_code(category.code) is not None:
            raise ValidationException(
                f"Category code '{category.code}' already exists",
                {"code": category.code}
            )

        await self._repo.add(category)
        await self._record(AuditAction.CREATE, category, actor, f"Created category: {category.name}")

        logger.info(
            "Category created",
            extra={"category_id": category.id, "code": category.code, "sla_hours": category.sla_hours}
        )
        return category

    async def update(
        self,
        category_id: str,
        changes: Dict[str, Any],
        actor: Actor = SYSTEM_ACTOR
    ) -> TicketCategoryConfig:
        """
        Apply a partial edit.

        Keys outside name/code/sla_hours/description are ignored. A `code`
        key is accepted only when it equals the stored code.
        """
        self._authorizer.require(actor, Permission.MANAGE_SETTINGS)
        current = await self.get(category_id)

        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        if "code" in changes and changes["code"] != current.code:
            raise ValidationException(
                "Category code cannot be changed",
                {"code": current.code, "requested": changes["code"]}
            )

        # replace() re-runs __post_init__ validation
        updated = dataclasses.replace(current, **changes)
        await self._repo.update(updated)
        await self._record(AuditAction.UPDATE, updated, actor, f"Updated category: {updated.name}")

        logger.info("Category updated", extra={"category_id": category_id, "fields": sorted(changes)})
        return updated

    async def delete(self, category_id: str, actor: Actor = SYSTEM_ACTOR) -> None:
        self._authorizer.require(actor, Permission.MANAGE_SETTINGS)
        category = await self.get(category_id)

        await self._repo.delete(category_id)
        await self._record(AuditAction.DELETE, category, actor, f"Deleted category: {category.name}")

        logger.info("Category deleted", extra={"category_id": category_id, "code": category.code})

    async def seed_defaults(self, actor: Actor = SYSTEM_ACTOR) -> List[TicketCategoryConfig]:
        """
        Insert the starter set into an empty registry.

        Does nothing when any category exists, so repeated calls are safe.
        """
        self._authorizer.require(actor, Permission.MANAGE_SETTINGS)

        if await self._repo.count() > 0:
            logger.debug("Category registry not empty, skipping seed")
            return []

        templates = self._defaults.get_defaults() if self._defaults else DEFAULT_CATEGORIES

        created = []
        for template in templates:
            category = TicketCategoryConfig(
                id=str(uuid4()),
                code=template.code,
                name=template.name,
                sla_hours=template.sla_hours,
                description=template.description,
                created_at=self._clock(),
            )
            await self._repo.add(category)
            created.append(category)

        if self._audit:
            await self._audit.record(
                AuditAction.SYSTEM,
                AUDIT_ENTITY,
                actor.name,
                details=f"Seeded {len(created)} default categories"
            )

        logger.info("Category registry seeded", extra={"created_count": len(created)})
        return created

    async def _record(
        self,
        action: AuditAction,
        category: TicketCategoryConfig,
        actor: Actor,
        details: str
    ) -> None:
        if self._audit:
            await self._audit.record(action, AUDIT_ENTITY, actor.name, entity_id=category.id, details=details)
