"""
Audit Controllers (API Routes)
==============================

Read-only access to the action audit trail.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.audit.application import AuditLogResponse, AuditTrail, RECENT_LIMIT
from ispdesk.audit.infrastructure import SQLAlchemyAuditLogRepository
from ispdesk.infrastructure.database import get_session

router = APIRouter(prefix="/audit-logs", tags=["Audit"])


async def get_audit_trail(session: AsyncSession = Depends(get_session)) -> AuditTrail:
    return AuditTrail(SQLAlchemyAuditLogRepository(session))


@router.get(
    "",
    response_model=List[AuditLogResponse],
    summary="List audit entries",
    description="""
    Newest entries first, at most 100.

    Pass both `entity` (e.g. `Ticket`) and `entity_id` to see the full
    history of one record instead.
    """
)
async def list_audit_logs(
    entity: Optional[str] = Query(None, description="Entity type, e.g. Ticket"),
    entity_id: Optional[str] = Query(None, description="Identifier of the record"),
    limit: int = Query(RECENT_LIMIT, ge=1, le=RECENT_LIMIT),
    trail: AuditTrail = Depends(get_audit_trail)
):
    if entity and entity_id:
        entries = await trail.for_entity(entity, entity_id)
    else:
        entries = await trail.recent(limit)
    return [AuditLogResponse.from_domain(e) for e in entries]
