"""
Audit Interfaces Layer
======================
"""

from ispdesk.audit.interfaces.controllers import router as audit_router

__all__ = ["audit_router"]
