"""
Tests for the capability guard

Tests:
- Default role to capability table
- Custom tables
- require() raising PermissionDeniedError
"""
import pytest

from ispdesk.config import EmployeeRole, Permission
from ispdesk.core import Actor, PermissionDeniedError, RoleBasedAuthorizer, SYSTEM_ACTOR

from conftest import ADMIN, CUSTOMER, MANAGER, SUPPORT, TECHNICIAN


@pytest.fixture
def authorizer():
    return RoleBasedAuthorizer()


class TestDefaultRoles:
    """Test the built-in role table"""

    def test_admin_has_everything(self, authorizer):
        assert all(authorizer.has_permission(ADMIN, p) for p in Permission)

    def test_system_actor_is_admin(self, authorizer):
        assert authorizer.has_permission(SYSTEM_ACTOR, Permission.MANAGE_SETTINGS)

    def test_customer_has_nothing(self, authorizer):
        assert not any(authorizer.has_permission(CUSTOMER, p) for p in Permission)

    @pytest.mark.parametrize(
        "actor, permission, allowed",
        [
            (MANAGER, Permission.ASSIGN_TICKETS, True),
            (MANAGER, Permission.ESCALATE_TICKETS, True),
            (MANAGER, Permission.DELETE_RECORDS, True),
            (MANAGER, Permission.MANAGE_SETTINGS, False),
            (SUPPORT, Permission.ASSIGN_TICKETS, True),
            (SUPPORT, Permission.ESCALATE_TICKETS, True),
            (SUPPORT, Permission.DELETE_RECORDS, False),
            (TECHNICIAN, Permission.ESCALATE_TICKETS, True),
            (TECHNICIAN, Permission.ASSIGN_TICKETS, False),
            (TECHNICIAN, Permission.MANAGE_SETTINGS, False),
        ],
    )
    def test_role_table(self, authorizer, actor, permission, allowed):
        assert authorizer.has_permission(actor, permission) is allowed


class TestRequire:
    """Test IAuthorizer.require"""

    def test_allowed(self, authorizer):
        authorizer.require(SUPPORT, Permission.ESCALATE_TICKETS)

    def test_denied(self, authorizer):
        with pytest.raises(PermissionDeniedError):
            authorizer.require(TECHNICIAN, Permission.ASSIGN_TICKETS)

    def test_custom_table(self):
        authorizer = RoleBasedAuthorizer({EmployeeRole.TECHNICIAN: frozenset({Permission.ASSIGN_TICKETS})})
        tech = Actor(name="Jane Tech", role=EmployeeRole.TECHNICIAN)

        authorizer.require(tech, Permission.ASSIGN_TICKETS)
        with pytest.raises(PermissionDeniedError):
            authorizer.require(ADMIN, Permission.ASSIGN_TICKETS)
