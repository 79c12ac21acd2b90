"""
Shared API Dependencies
=======================

FastAPI dependencies used by every bounded context.
"""

from fastapi import Header

from ispdesk.config import EmployeeRole, VALID_ROLES
from ispdesk.core import Actor, IAuthorizer, RoleBasedAuthorizer, ValidationException

ANONYMOUS_NAME = "Anonymous"


def get_actor(
    x_actor_name: str = Header(ANONYMOUS_NAME, description="Acting user, stamped by the gateway"),
    x_actor_role: str = Header(EmployeeRole.CUSTOMER.value, description="Role of the acting user")
) -> Actor:
    """
    Build the acting user from gateway headers.

    Requests without headers act as an anonymous customer, which holds no
    capabilities.
    """
    role = x_actor_role.strip().lower()
    if role not in VALID_ROLES:
        raise ValidationException(
            f"Unknown actor role '{x_actor_role}'",
            {"allowed": VALID_ROLES}
        )
    return Actor(name=x_actor_name.strip() or ANONYMOUS_NAME, role=EmployeeRole(role))


def get_authorizer() -> IAuthorizer:
    return RoleBasedAuthorizer()
