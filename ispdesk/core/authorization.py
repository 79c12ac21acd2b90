"""
Authorization Guard
===================

Capability checks evaluated inside the command surface.

Authentication happens upstream (the gateway stamps the acting user on each
request); this module only answers "may this actor do that?" so that the
enforcement point sits next to the operation instead of in a UI flag.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from ispdesk.config import EmployeeRole, Permission, ROLE_PERMISSIONS
from ispdesk.core.exceptions import PermissionDeniedException


@dataclass(frozen=True)
class Actor:
    """The user on whose behalf a command runs."""
    name: str
    role: EmployeeRole


# Used for seeding and other internal calls that run without a user.
SYSTEM_ACTOR = Actor(name="System", role=EmployeeRole.ADMIN)


class IAuthorizer(ABC):
    """Interface for the authorization collaborator."""

    @abstractmethod
    def has_permission(self, actor: Actor, permission: Permission) -> bool:
        """Check whether the actor holds a capability."""

    def require(self, actor: Actor, permission: Permission) -> None:
        """Raise PermissionDeniedException unless the actor holds the capability."""
        if not self.has_permission(actor, permission):
            raise PermissionDeniedException(actor.name, permission.value)


class RoleBasedAuthorizer(IAuthorizer):
    """
    Maps roles to capabilities.

    The default table is `ROLE_PERMISSIONS` from the configuration module;
    callers may pass their own mapping.
    """

    def __init__(self, role_permissions: Optional[Dict[EmployeeRole, FrozenSet[Permission]]] = None):
        self._role_permissions = role_permissions or ROLE_PERMISSIONS

    def has_permission(self, actor: Actor, permission: Permission) -> bool:
        return permission in self._role_permissions.get(actor.role, frozenset())
