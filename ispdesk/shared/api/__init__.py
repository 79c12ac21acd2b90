"""
Shared API Layer
================

Middleware, exception handlers and dependencies common to all routers.
"""

from ispdesk.shared.api.dependencies import get_actor, get_authorizer

__all__ = ["get_actor", "get_authorizer"]
