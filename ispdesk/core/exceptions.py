"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

These exceptions define domain-specific errors that can be caught and handled
appropriately at the application boundaries. Every failure is reported to the
caller synchronously; nothing here implies a retry.
"""

from typing import Optional


class ApplicationException(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class RepositoryException(ApplicationException):
    """Raised when the storage collaborator fails (network or database)."""


class ValidationException(ApplicationException):
    """A required field is missing or malformed for the attempted operation."""


class InvalidTransitionException(DomainException):
    """An operation was attempted from a status where it is not defined."""

    def __init__(
        self,
        action: str,
        current_status: str,
        details: Optional[dict] = None
    ):
        self.action = action
        self.current_status = current_status
        super().__init__(
            f"Cannot {action} a ticket in status '{current_status}'",
            details or {"action": action, "current_status": current_status}
        )


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class PermissionDeniedException(ApplicationException):
    """The acting user lacks the capability required by the command."""

    def __init__(
        self,
        actor: str,
        permission: str,
        details: Optional[dict] = None
    ):
        self.actor = actor
        self.permission = permission
        super().__init__(
            f"{actor} is not allowed to {permission.replace('_', ' ')}",
            details or {"actor": actor, "permission": permission}
        )


class ConfigurationException(ApplicationException):
    """Exception for configuration errors."""


class ExternalServiceException(ApplicationException):
    """Base exception for external service failures."""

    def __init__(
        self,
        service_name: str,
        message: str,
        details: Optional[dict] = None
    ):
        self.service_name = service_name
        super().__init__(f"{service_name}: {message}", details)


# Names used by the console's error taxonomy.
ValidationError = ValidationException
InvalidTransitionError = InvalidTransitionException
NotFoundError = ResourceNotFoundException
PersistenceError = RepositoryException
PermissionDeniedError = PermissionDeniedException
