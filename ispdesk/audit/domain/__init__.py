"""
Audit Domain Layer
==================
"""

from ispdesk.audit.domain.entities import AuditLog

__all__ = ["AuditLog"]
