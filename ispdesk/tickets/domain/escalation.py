"""
Escalation Handler
==================

Out-of-band override: flags the ticket, forces HIGH priority, optionally
hands it to a new assignee, and produces the audit comment explaining why.
"""

import dataclasses
from dataclasses import dataclass
from typing import Optional
from uuid import uuid4

from ispdesk.config import TicketPriority, TicketStatus
from ispdesk.core.exceptions import ValidationException
from ispdesk.shared.time import Clock, utc_now
from ispdesk.tickets.domain.entities import Ticket, TicketComment
from ispdesk.tickets.domain.lifecycle import TicketAction, ensure_allowed
from ispdesk.tickets.domain.value_objects import format_escalation_note


@dataclass(frozen=True)
class EscalationOutcome:
    """The escalated ticket and the comment to append before saving it."""
    ticket: Ticket
    comment: TicketComment


class EscalationHandler:
    """
    Computes escalations.

    Repeated escalation is allowed; each call re-asserts HIGH priority and
    yields another comment.
    """

    def __init__(self, author: str = "System", clock: Optional[Clock] = None):
        self._author = author
        self._clock = clock or utc_now

    def escalate(
        self,
        ticket: Ticket,
        reason: Optional[str],
        assignee: Optional[str] = None
    ) -> EscalationOutcome:
        ensure_allowed(ticket, TicketAction.ESCALATE)

        if reason is None or not reason.strip():
            raise ValidationException("Escalation reason is required", {"field": "reason"})
        reason = reason.strip()
        assignee = assignee.strip() if assignee and assignee.strip() else None

        changes = {"is_escalated": True, "priority": TicketPriority.HIGH}
        if assignee:
            changes.update(assigned_to=assignee, status=TicketStatus.ASSIGNED)

        comment = TicketComment(
            id=str(uuid4()),
            ticket_id=ticket.id,
            content=format_escalation_note(reason, assignee),
            author_name=self._author,
            created_at=self._clock(),
        )
        return EscalationOutcome(ticket=dataclasses.replace(ticket, **changes), comment=comment)
