"""
Audit Infrastructure Repositories
=================================

SQLAlchemy implementation of the audit log repository.
"""

from typing import List
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.audit.application import IAuditLogRepository
from ispdesk.audit.domain import AuditLog
from ispdesk.audit.infrastructure.models import AuditLogModel
from ispdesk.config import AuditAction
from ispdesk.infrastructure.database import translate_db_errors


def _to_domain(model: AuditLogModel) -> AuditLog:
    return AuditLog(
        id=str(model.id),
        action=AuditAction(model.action),
        entity=model.entity,
        performed_by=model.performed_by,
        created_at=model.created_at,
        entity_id=model.entity_id,
        details=model.details,
    )


class SQLAlchemyAuditLogRepository(IAuditLogRepository):
    """Append-only store for audit entries."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, entry: AuditLog) -> AuditLog:
        model = AuditLogModel(
            id=UUID(entry.id),
            action=entry.action.value,
            entity=entry.entity,
            entity_id=entry.entity_id,
            details=entry.details,
            performed_by=entry.performed_by,
            created_at=entry.created_at,
        )

        with translate_db_errors("record audit entry"):
            self._session.add(model)
            await self._session.flush()

        return entry

    async def list_recent(self, limit: int) -> List[AuditLog]:
        stmt = (
            select(AuditLogModel)
            .order_by(AuditLogModel.created_at.desc())
            .limit(limit)
        )

        with translate_db_errors("list audit entries"):
            result = await self._session.execute(stmt)

        return [_to_domain(m) for m in result.scalars().all()]

    async def list_by_entity(self, entity: str, entity_id: str) -> List[AuditLog]:
        stmt = (
            select(AuditLogModel)
            .where(AuditLogModel.entity == entity, AuditLogModel.entity_id == entity_id)
            .order_by(AuditLogModel.created_at.desc())
        )

        with translate_db_errors("list audit entries"):
            result = await self._session.execute(stmt)

        return [_to_domain(m) for m in result.scalars().all()]
