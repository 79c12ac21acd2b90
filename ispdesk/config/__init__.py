"""
Configuration Module
====================

Application settings and domain constants for the ISP operations console.

Settings are loaded from environment variables (and an optional `.env` file)
using Pydantic. Constants describe the closed vocabularies of the ticket
lifecycle: statuses, priorities, employee roles and permissions.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="isp-ops-console", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/ispdesk",
        description="Async SQLAlchemy connection URL (postgresql+asyncpg or sqlite+aiosqlite)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== Ticket Lifecycle ==========
    category_defaults_path: Path = Field(
        default=Path("category_defaults.yaml"),
        description="YAML file with the starter ticket categories"
    )
    seed_categories_on_startup: bool = Field(
        default=True,
        description="Seed the starter categories at startup when the registry is empty"
    )
    escalation_author: str = Field(
        default="System",
        description="Author name stamped on escalation audit comments"
    )
    default_comment_author: str = Field(
        default="Support Agent",
        description="Author used when a comment is posted without one"
    )
    validate_assignees: bool = Field(
        default=False,
        description="Require assign/escalation targets to exist in the employees table"
    )

    # ========== Notifications ==========
    notification_webhook_url: Optional[str] = Field(
        default=None,
        description="Webhook receiving ticket events for the external notifier"
    )
    notification_timeout_seconds: float = Field(
        default=5.0,
        description="Timeout for notification webhook calls",
        ge=0.1,
        le=30
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class TicketStatus(str, Enum):
    """Ticket lifecycle statuses."""
    OPEN = "open"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    VERIFIED = "verified"
    CLOSED = "closed"


class TicketPriority(str, Enum):
    """Ticket priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EmployeeRole(str, Enum):
    """Roles of console users."""
    ADMIN = "admin"
    MANAGER = "manager"
    SUPPORT = "support"
    TECHNICIAN = "technician"
    CUSTOMER = "customer"


class Permission(str, Enum):
    """Capabilities checked by the command surface."""
    MANAGE_TEAM = "manage_team"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_NETWORK = "manage_network"
    DELETE_RECORDS = "delete_records"
    VIEW_BILLING = "view_billing"
    ASSIGN_TICKETS = "assign_tickets"
    ESCALATE_TICKETS = "escalate_tickets"


class AuditAction(str, Enum):
    """Kinds of entries in the action audit trail."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    LOGIN = "login"
    SYSTEM = "system"


# Category management lives under the settings capability.
ROLE_PERMISSIONS: Dict[EmployeeRole, FrozenSet[Permission]] = {
    EmployeeRole.ADMIN: frozenset(Permission),
    EmployeeRole.MANAGER: frozenset({
        Permission.MANAGE_TEAM, Permission.DELETE_RECORDS, Permission.VIEW_BILLING,
        Permission.ASSIGN_TICKETS, Permission.ESCALATE_TICKETS,
    }),
    EmployeeRole.SUPPORT: frozenset({
        Permission.VIEW_BILLING, Permission.ASSIGN_TICKETS, Permission.ESCALATE_TICKETS,
    }),
    EmployeeRole.TECHNICIAN: frozenset({
        Permission.MANAGE_NETWORK, Permission.ESCALATE_TICKETS,
    }),
    EmployeeRole.CUSTOMER: frozenset(),
}


# ========== Lists for validation ==========

VALID_STATUSES = [s.value for s in TicketStatus]
VALID_PRIORITIES = [p.value for p in TicketPriority]
VALID_ROLES = [r.value for r in EmployeeRole]
