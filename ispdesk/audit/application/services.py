"""
Audit Application Services
==========================

Records and reads the action audit trail.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import uuid4

from ispdesk.audit.domain import AuditLog
from ispdesk.config import AuditAction
from ispdesk.shared.infrastructure.logging import get_logger
from ispdesk.shared.time import Clock, utc_now

logger = get_logger(__name__)

RECENT_LIMIT = 100


# ========== Repository Interfaces (Dependency Inversion) ==========

class IAuditLogRepository(ABC):
    """Interface for audit log data access."""

    @abstractmethod
    async def add(self, entry: AuditLog) -> AuditLog:
        """Persist a new entry."""

    @abstractmethod
    async def list_recent(self, limit: int) -> List[AuditLog]:
        """Newest entries first."""

    @abstractmethod
    async def list_by_entity(self, entity: str, entity_id: str) -> List[AuditLog]:
        """Entries for one record, newest first."""


# ========== Application Services ==========

class AuditTrail:
    """
    Writes audit entries for create/update/delete actions.

    Entries are written in the caller's unit of work, so a failed write
    fails the action it describes.
    """

    def __init__(self, repository: IAuditLogRepository, clock: Optional[Clock] = None):
        self._repo = repository
        self._clock = clock or utc_now

    async def record(
        self,
        action: AuditAction,
        entity: str,
        performed_by: str,
        entity_id: Optional[str] = None,
        details: Optional[str] = None
    ) -> AuditLog:
        entry = AuditLog(
            id=str(uuid4()),
            action=action,
            entity=entity,
            performed_by=performed_by,
            created_at=self._clock(),
            entity_id=entity_id,
            details=details,
        )
        await self._repo.add(entry)

        logger.debug(
            "Audit entry recorded",
            extra={"action": action.value, "entity": entity, "entity_id": entity_id}
        )
        return entry

    async def recent(self, limit: int = RECENT_LIMIT) -> List[AuditLog]:
        return await self._repo.list_recent(min(limit, RECENT_LIMIT))

    async def for_entity(self, entity: str, entity_id: str) -> List[AuditLog]:
        return await self._repo.list_by_entity(entity, entity_id)
