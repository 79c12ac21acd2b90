"""
Audit Application Layer
=======================
"""

from ispdesk.audit.application.dto import AuditLogResponse
from ispdesk.audit.application.services import (
    AuditTrail,
    IAuditLogRepository,
    RECENT_LIMIT,
)

__all__ = [
    "AuditLogResponse",
    "AuditTrail",
    "IAuditLogRepository",
    "RECENT_LIMIT",
]
