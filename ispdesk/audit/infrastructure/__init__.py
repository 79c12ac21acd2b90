"""
Audit Infrastructure Layer
==========================
"""

from ispdesk.audit.infrastructure.models import AuditLogModel
from ispdesk.audit.infrastructure.repositories import SQLAlchemyAuditLogRepository

__all__ = ["AuditLogModel", "SQLAlchemyAuditLogRepository"]
