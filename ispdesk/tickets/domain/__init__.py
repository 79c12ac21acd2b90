"""
Ticket Domain Layer
===================

Contains:
- Entities: Ticket, TicketComment, TicketDraft, TicketEvent
- Value Objects: SLACalculator, escalation note format
- Lifecycle: the state machine operations
- Escalation: EscalationHandler

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from ispdesk.tickets.domain import lifecycle
from ispdesk.tickets.domain.entities import (
    Ticket,
    TicketComment,
    TicketDraft,
    TicketEvent,
    TicketEventType,
)
from ispdesk.tickets.domain.escalation import EscalationHandler, EscalationOutcome
from ispdesk.tickets.domain.lifecycle import TicketAction, allowed_actions
from ispdesk.tickets.domain.value_objects import (
    ESCALATION_HEADER,
    SLACalculator,
    format_escalation_note,
)

__all__ = [
    "lifecycle",
    "Ticket",
    "TicketComment",
    "TicketDraft",
    "TicketEvent",
    "TicketEventType",
    "EscalationHandler",
    "EscalationOutcome",
    "TicketAction",
    "allowed_actions",
    "ESCALATION_HEADER",
    "SLACalculator",
    "format_escalation_note",
]
