"""
Unit tests for SLA arithmetic

Tests:
- Due date derivation from SLA hours
- SLA hours validation
- Overdue evaluation
"""
from datetime import datetime, timedelta, timezone

import pytest

from ispdesk.config import TicketStatus
from ispdesk.core import ValidationError
from ispdesk.tickets.domain import SLACalculator

from conftest import START, make_ticket


class TestComputeDueDate:
    """Test SLACalculator.compute_due_date"""

    def test_adds_wall_clock_hours(self):
        """4h SLA from midnight is due at 04:00"""
        due = SLACalculator.compute_due_date(START, 4)
        assert due == datetime(2024, 1, 1, 4, 0, tzinfo=timezone.utc)

    def test_crosses_days(self):
        """72h SLA lands three calendar days later, weekends included"""
        due = SLACalculator.compute_due_date(datetime(2024, 1, 5, 18, tzinfo=timezone.utc), 72)
        assert due == datetime(2024, 1, 8, 18, tzinfo=timezone.utc)

    def test_is_deterministic(self):
        assert SLACalculator.compute_due_date(START, 24) == SLACalculator.compute_due_date(START, 24)

    @pytest.mark.parametrize("hours", [0, -4, True, 2.5, "4", None])
    def test_rejects_invalid_hours(self, hours):
        """SLA hours must be a positive integer"""
        with pytest.raises(ValidationError):
            SLACalculator.compute_due_date(START, hours)


class TestOverdue:
    """Test overdue evaluation"""

    def test_past_due_open_ticket_is_overdue(self):
        ticket = make_ticket(due_date=START)
        assert ticket.is_overdue(START + timedelta(minutes=1))

    def test_closed_ticket_is_never_overdue(self):
        """Closing clears overdue even though the due date stays in the past"""
        ticket = make_ticket(due_date=START, status=TicketStatus.CLOSED)
        assert not ticket.is_overdue(START + timedelta(days=30))

    def test_due_date_equal_to_now_is_not_overdue(self):
        ticket = make_ticket(due_date=START)
        assert not ticket.is_overdue(START)

    def test_ticket_without_due_date_is_never_overdue(self):
        ticket = make_ticket(due_date=None)
        assert not ticket.is_overdue(START + timedelta(days=365))

    @pytest.mark.parametrize("status", [s for s in TicketStatus if s != TicketStatus.CLOSED])
    def test_every_unclosed_status_can_be_overdue(self, status):
        assert SLACalculator.is_overdue(START, status, START + timedelta(hours=1))
