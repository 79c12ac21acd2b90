"""
Unit tests for the escalation handler

Tests:
- Priority and flag ratchet
- Reassignment moves the ticket to ASSIGNED
- Audit comment format
- Rejection of closed tickets and blank reasons
"""
import pytest

from ispdesk.config import TicketPriority, TicketStatus
from ispdesk.core import InvalidTransitionError, ValidationError
from ispdesk.tickets.domain import EscalationHandler

from conftest import FixedClock, START, make_ticket


@pytest.fixture
def handler():
    """Fixture for EscalationHandler with a frozen clock"""
    return EscalationHandler(author="System", clock=FixedClock())


class TestEscalationEffect:
    """Test ticket changes made by escalation"""

    @pytest.mark.parametrize("priority", list(TicketPriority))
    def test_forces_high_priority(self, handler, priority):
        outcome = handler.escalate(make_ticket(priority=priority), "Customer is a hospital")

        assert outcome.ticket.priority == TicketPriority.HIGH
        assert outcome.ticket.is_escalated is True

    def test_with_assignee_reassigns_and_moves_to_assigned(self, handler):
        ticket = make_ticket(status=TicketStatus.IN_PROGRESS, assigned_to="Bob")

        outcome = handler.escalate(ticket, "SLA breach imminent", "Jane Tech")

        assert outcome.ticket.status == TicketStatus.ASSIGNED
        assert outcome.ticket.assigned_to == "Jane Tech"

    @pytest.mark.parametrize("assignee", [None, "", "   "])
    def test_without_assignee_keeps_status_and_owner(self, handler, assignee):
        ticket = make_ticket(status=TicketStatus.IN_PROGRESS, assigned_to="Bob")

        outcome = handler.escalate(ticket, "Repeat outage", assignee)

        assert outcome.ticket.status == TicketStatus.IN_PROGRESS
        assert outcome.ticket.assigned_to == "Bob"

    def test_repeated_escalation_is_allowed(self, handler):
        first = handler.escalate(make_ticket(), "First reason")
        second = handler.escalate(first.ticket, "Second reason")

        assert second.ticket.is_escalated is True
        assert second.ticket.priority == TicketPriority.HIGH
        assert second.comment.id != first.comment.id

    @pytest.mark.parametrize("status", [s for s in TicketStatus if s != TicketStatus.CLOSED])
    def test_allowed_from_every_open_status(self, handler, status):
        assert handler.escalate(make_ticket(status=status), "reason").ticket.is_escalated


class TestEscalationComment:
    """Test the audit comment produced by escalation"""

    def test_format_with_assignee(self, handler):
        outcome = handler.escalate(make_ticket(), "SLA breach imminent", "Jane Tech")

        assert outcome.comment.content == (
            "🚨 **TICKET ESCALATED**\n"
            "\n"
            "**Reason:** SLA breach imminent\n"
            "**Reassigned to:** Jane Tech"
        )

    def test_format_without_assignee(self, handler):
        outcome = handler.escalate(make_ticket(), "Repeat outage")

        assert outcome.comment.content == "🚨 **TICKET ESCALATED**\n\n**Reason:** Repeat outage"
        assert "Reassigned" not in outcome.comment.content

    def test_comment_metadata(self, handler):
        outcome = handler.escalate(make_ticket(id="t-42"), "reason")

        assert outcome.comment.author_name == "System"
        assert outcome.comment.ticket_id == "t-42"
        assert outcome.comment.created_at == START


class TestEscalationRejections:
    """Test escalation preconditions"""

    def test_closed_ticket_cannot_be_escalated(self, handler):
        with pytest.raises(InvalidTransitionError):
            handler.escalate(make_ticket(status=TicketStatus.CLOSED), "too late")

    def test_state_is_checked_before_reason(self, handler):
        with pytest.raises(InvalidTransitionError):
            handler.escalate(make_ticket(status=TicketStatus.CLOSED), "")

    @pytest.mark.parametrize("reason", ["", "   ", None])
    def test_reason_required(self, handler, reason):
        ticket = make_ticket()

        with pytest.raises(ValidationError):
            handler.escalate(ticket, reason)

        assert ticket.priority == TicketPriority.MEDIUM
        assert ticket.is_escalated is False
