"""
Core Module
============

Shared core utilities and abstractions used across the application.

This module contains framework-agnostic code that defines the fundamental
building blocks of the system: the exception hierarchy and the
authorization guard evaluated by every privileged command.
"""

from ispdesk.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    InvalidTransitionException,
    ResourceNotFoundException,
    PermissionDeniedException,
    ConfigurationException,
    ExternalServiceException,
    ValidationError,
    InvalidTransitionError,
    NotFoundError,
    PersistenceError,
    PermissionDeniedError,
)
from ispdesk.core.authorization import (
    Actor,
    IAuthorizer,
    RoleBasedAuthorizer,
    SYSTEM_ACTOR,
)

__all__ = [
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "InvalidTransitionException",
    "ResourceNotFoundException",
    "PermissionDeniedException",
    "ConfigurationException",
    "ExternalServiceException",
    "ValidationError",
    "InvalidTransitionError",
    "NotFoundError",
    "PersistenceError",
    "PermissionDeniedError",
    "Actor",
    "IAuthorizer",
    "RoleBasedAuthorizer",
    "SYSTEM_ACTOR",
]
