"""
Audit Application DTOs
======================
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from ispdesk.audit.domain import AuditLog

AuditActionStr = Literal["create", "update", "delete", "login", "system"]


class AuditLogResponse(BaseModel):
    """Response model for an audit entry."""
    id: str
    action: AuditActionStr
    entity: str = Field(..., description="Entity type, e.g. Ticket")
    entity_id: Optional[str] = None
    details: Optional[str] = None
    performed_by: str
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: AuditLog) -> "AuditLogResponse":
        return cls(
            id=entry.id,
            action=entry.action.value,
            entity=entry.entity,
            entity_id=entry.entity_id,
            details=entry.details,
            performed_by=entry.performed_by,
            created_at=entry.created_at,
        )
