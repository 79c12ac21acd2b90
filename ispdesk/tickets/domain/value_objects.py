"""
Ticket Value Objects
====================

SLA arithmetic and the escalation note format.
"""

from datetime import datetime, timedelta
from typing import Optional

from ispdesk.categories.domain import validate_sla_hours
from ispdesk.config import TicketStatus

ESCALATION_HEADER = "🚨 **TICKET ESCALATED**"


class SLACalculator:
    """
    Pure functions for SLA calculations.

    Hours are wall-clock hours, not business hours.
    """

    @staticmethod
    def compute_due_date(reference_time: datetime, sla_hours: int) -> datetime:
        """
        Calculate the due date of a ticket.

        Args:
            reference_time: Creation time, or "now" for a draft
            sla_hours: SLA of the ticket's category

        Returns:
            reference_time + sla_hours
        """
        return reference_time + timedelta(hours=validate_sla_hours(sla_hours))

    @staticmethod
    def is_overdue(
        due_date: Optional[datetime],
        status: TicketStatus,
        current_time: datetime
    ) -> bool:
        return due_date is not None and due_date < current_time and status != TicketStatus.CLOSED


def format_escalation_note(reason: str, assignee: Optional[str] = None) -> str:
    """Render the comment recorded when a ticket is escalated."""
    lines = [ESCALATION_HEADER, "", f"**Reason:** {reason}"]
    if assignee:
        lines.append(f"**Reassigned to:** {assignee}")
    return "\n".join(lines)
