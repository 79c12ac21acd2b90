"""
Audit Domain Entities
=====================
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ispdesk.config import AuditAction


@dataclass(frozen=True)
class AuditLog:
    """One recorded action. Entries are never edited."""

    id: str
    action: AuditAction
    entity: str  # e.g. 'Ticket', 'TicketCategory'
    performed_by: str
    created_at: datetime
    entity_id: Optional[str] = None
    details: Optional[str] = None
