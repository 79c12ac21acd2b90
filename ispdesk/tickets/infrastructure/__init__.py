"""
Ticket Infrastructure Layer
===========================

Infrastructure implementations for the ticket lifecycle:
- Models: SQLAlchemy ORM models
- Repositories: tickets, comments and the read-only directories
- External: notification publishers
"""

from ispdesk.tickets.infrastructure.external import (
    CircuitBreaker,
    CircuitState,
    LoggingEventPublisher,
    WebhookEventPublisher,
)
from ispdesk.tickets.infrastructure.models import (
    CommentModel,
    CustomerModel,
    EmployeeModel,
    TicketModel,
)
from ispdesk.tickets.infrastructure.repositories import (
    SQLAlchemyCommentRepository,
    SQLAlchemyCustomerDirectory,
    SQLAlchemyEmployeeDirectory,
    SQLAlchemyTicketRepository,
)

__all__ = [
    "CircuitBreaker",
    "CircuitState",
    "LoggingEventPublisher",
    "WebhookEventPublisher",
    "CommentModel",
    "CustomerModel",
    "EmployeeModel",
    "TicketModel",
    "SQLAlchemyCommentRepository",
    "SQLAlchemyCustomerDirectory",
    "SQLAlchemyEmployeeDirectory",
    "SQLAlchemyTicketRepository",
]
