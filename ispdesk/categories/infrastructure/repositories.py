"""
Category Infrastructure Repositories
====================================

Concrete implementations of the registry's collaborator interfaces:
- SQLAlchemyCategoryRepository: categories in the relational store
- YAMLCategoryDefaultsProvider: starter set read from a YAML file
"""

from pathlib import Path
from typing import List, Optional, Sequence, Union
from uuid import UUID

import yaml
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.categories.application import ICategoryDefaultsProvider, ICategoryRepository
from ispdesk.categories.domain import CategoryTemplate, DEFAULT_CATEGORIES, TicketCategoryConfig
from ispdesk.categories.infrastructure.models import CategoryModel
from ispdesk.core import ConfigurationException, RepositoryException
from ispdesk.infrastructure.database import translate_db_errors
from ispdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


def _to_domain(model: CategoryModel) -> TicketCategoryConfig:
    return TicketCategoryConfig(
        id=str(model.id),
        code=model.code,
        name=model.name,
        sla_hours=model.sla_hours,
        description=model.description or "",
        created_at=model.created_at,
    )


def _parse_id(category_id: str) -> Optional[UUID]:
    try:
        return UUID(category_id)
    except (TypeError, ValueError):
        return None


class SQLAlchemyCategoryRepository(ICategoryRepository):
    """
    SQLAlchemy implementation of the category repository.

    Writes are flushed, not committed; the session owner commits.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, category_id: str) -> Optional[CategoryModel]:
        category_uuid = _parse_id(category_id)
        if category_uuid is None:
            return None

        stmt = select(CategoryModel).where(CategoryModel.id == category_uuid)
        with translate_db_errors("load category"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, category_id: str) -> Optional[TicketCategoryConfig]:
        model = await self._get_model(category_id)
        return _to_domain(model) if model else None

    async def get_by_code(self, code: str) -> Optional[TicketCategoryConfig]:
        stmt = select(CategoryModel).where(CategoryModel.code == code)
        with translate_db_errors("load category"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _to_domain(model) if model else None

    async def list(self) -> List[TicketCategoryConfig]:
        stmt = select(CategoryModel).order_by(CategoryModel.name.asc(), CategoryModel.code.asc())
        with translate_db_errors("list categories"):
            result = await self._session.execute(stmt)
        return [_to_domain(m) for m in result.scalars().all()]

    async def add(self, category: TicketCategoryConfig) -> TicketCategoryConfig:
        model = CategoryModel(
            id=UUID(category.id),
            code=category.code,
            name=category.name,
            sla_hours=category.sla_hours,
            description=category.description,
            created_at=category.created_at,
        )
        with translate_db_errors("save category"):
            self._session.add(model)
            await self._session.flush()
        return category

    async def update(self, category: TicketCategoryConfig) -> TicketCategoryConfig:
        model = await self._get_model(category.id)
        if model is None:
            raise RepositoryException(f"Category {category.id} not found")

        # code is immutable
        model.name = category.name
        model.sla_hours = category.sla_hours
        model.description = category.description

        with translate_db_errors("update category"):
            await self._session.flush()
        return category

    async def delete(self, category_id: str) -> None:
        category_uuid = _parse_id(category_id)
        if category_uuid is None:
            return

        with translate_db_errors("delete category"):
            await self._session.execute(delete(CategoryModel).where(CategoryModel.id == category_uuid))
            await self._session.flush()

    async def count(self) -> int:
        with translate_db_errors("count categories"):
            result = await self._session.execute(select(func.count()).select_from(CategoryModel))
        return result.scalar_one()


class YAMLCategoryDefaultsProvider(ICategoryDefaultsProvider):
    """
    Starter categories loaded from YAML.

    Expected layout:

        categories:
          - name: Internet Issue
            code: internet_issue
            sla_hours: 4
            description: Connectivity problems, slow speeds, packet loss.

    A missing file yields the built-in set.
    """

    def __init__(self, config_path: Union[str, Path]):
        self._config_path = Path(config_path)
        self._defaults: Sequence[CategoryTemplate] = DEFAULT_CATEGORIES
        self._load()

    def _load(self) -> None:
        if not self._config_path.exists():
            self._defaults = DEFAULT_CATEGORIES
            return

        try:
            with open(self._config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            entries = data.get("categories", [])
            self._defaults = tuple(
                CategoryTemplate(
                    name=entry["name"],
                    code=entry["code"],
                    sla_hours=entry["sla_hours"],
                    description=entry.get("description", ""),
                )
                for entry in entries
            )
        except (yaml.YAMLError, AttributeError, KeyError, TypeError) as e:
            raise ConfigurationException(
                f"Invalid category defaults file: {self._config_path}",
                {"error": str(e)}
            ) from e

        logger.info(
            "Category defaults loaded",
            extra={"path": str(self._config_path), "count": len(self._defaults)}
        )

    def get_defaults(self) -> Sequence[CategoryTemplate]:
        return self._defaults

    def reload(self) -> None:
        """Re-read the file."""
        self._load()
