"""
Ticket Domain Entities
======================

Pure Python domain entities for the ticket lifecycle.

Entities are immutable: every lifecycle operation returns a new Ticket, so
a rejected operation cannot leave a half-updated ticket behind.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ispdesk.config import TicketPriority, TicketStatus


@dataclass(frozen=True)
class Ticket:
    """
    A customer support ticket.

    `category` is the category code as plain text. It is checked against
    the registry when it is set, and stays readable after the category is
    deleted.
    """

    id: str
    title: str
    status: TicketStatus
    priority: TicketPriority
    category: str
    created_at: datetime
    description: str = ""
    customer_id: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    is_escalated: bool = False
    resolution_notes: Optional[str] = None
    root_cause: Optional[str] = None

    @property
    def is_closed(self) -> bool:
        return self.status == TicketStatus.CLOSED

    def is_overdue(self, now: datetime) -> bool:
        """Past due and not closed. Tickets without a due date are never overdue."""
        return self.due_date is not None and self.due_date < now and not self.is_closed


@dataclass(frozen=True)
class TicketComment:
    """One immutable entry of a ticket's comment log."""

    id: str
    ticket_id: str
    content: str
    author_name: str
    created_at: datetime


@dataclass(frozen=True)
class TicketDraft:
    """
    A ticket being filled in before it is saved.

    While a draft, the due date follows the chosen category's SLA. Once the
    ticket exists the due date belongs to the operator.
    """

    title: str = ""
    description: str = ""
    priority: TicketPriority = TicketPriority.MEDIUM
    category: str = "internet_issue"
    customer_id: Optional[str] = None
    due_date: Optional[datetime] = None


class TicketEventType(str, Enum):
    """What happened to a ticket."""
    CREATED = "created"
    ASSIGNED = "assigned"
    STARTED = "started"
    RESOLVED = "resolved"
    VERIFIED = "verified"
    REOPENED = "reopened"
    CLOSED = "closed"
    ESCALATED = "escalated"


@dataclass(frozen=True)
class TicketEvent:
    """
    Notification payload handed to the event publisher.

    Carries enough for an external notifier to reach the customer; the
    console itself never sends email, SMS or WhatsApp.
    """

    ticket_id: str
    event_type: TicketEventType
    new_status: TicketStatus
    priority: TicketPriority
    is_escalated: bool
    occurred_at: datetime
    title: str = ""
    previous_status: Optional[TicketStatus] = None
    assigned_to: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None

    def to_payload(self) -> dict:
        return {
            "ticket_id": self.ticket_id,
            "event_type": self.event_type.value,
            "title": self.title,
            "previous_status": self.previous_status.value if self.previous_status else None,
            "new_status": self.new_status.value,
            "priority": self.priority.value,
            "is_escalated": self.is_escalated,
            "assigned_to": self.assigned_to,
            "customer": {
                "id": self.customer_id,
                "name": self.customer_name,
                "email": self.customer_email,
                "phone": self.customer_phone,
            },
            "occurred_at": self.occurred_at.isoformat(),
        }
