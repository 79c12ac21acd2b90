"""
Tests for outbound ticket notifications

Tests:
- WebhookEventPublisher delivery over a mocked transport
- Failures are logged, never raised
- CircuitBreaker state changes
"""
import json

import httpx
import pytest

from ispdesk.config import TicketPriority, TicketStatus
from ispdesk.tickets.domain import TicketEvent, TicketEventType
from ispdesk.tickets.infrastructure import (
    CircuitBreaker,
    CircuitState,
    LoggingEventPublisher,
    WebhookEventPublisher,
)

from conftest import START

WEBHOOK_URL = "http://notifier.test/hooks/tickets"


@pytest.fixture
def event():
    """Fixture for an escalation event"""
    return TicketEvent(
        ticket_id="0c1f9a52-5d7e-4c1e-8b8a-2f6b7f0c9e11",
        event_type=TicketEventType.ESCALATED,
        new_status=TicketStatus.ASSIGNED,
        priority=TicketPriority.HIGH,
        is_escalated=True,
        occurred_at=START,
        title="No internet",
        previous_status=TicketStatus.OPEN,
        assigned_to="Jane Tech",
        customer_id="c-1",
        customer_name="Rina Park",
        customer_email="rina@example.net",
    )


def publisher_for(handler, breaker=None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WebhookEventPublisher(WEBHOOK_URL, circuit_breaker=breaker, client=client)


class TestWebhookEventPublisher:
    """Test WebhookEventPublisher"""

    @pytest.mark.asyncio
    async def test_posts_event_payload(self, event):
        received = []

        def handler(request: httpx.Request) -> httpx.Response:
            received.append((request.method, str(request.url), json.loads(request.content)))
            return httpx.Response(202)

        publisher = publisher_for(handler)
        await publisher.publish(event)
        await publisher.close()

        assert len(received) == 1
        method, url, body = received[0]
        assert (method, url) == ("POST", WEBHOOK_URL)
        assert body["event_type"] == "escalated"
        assert body["new_status"] == "assigned"
        assert body["previous_status"] == "open"
        assert body["customer"]["email"] == "rina@example.net"
        assert body["occurred_at"] == "2024-01-01T00:00:00+00:00"

    @pytest.mark.asyncio
    async def test_server_error_is_not_raised(self, event):
        breaker = CircuitBreaker(failure_threshold=5)
        publisher = publisher_for(lambda request: httpx.Response(500), breaker)

        await publisher.publish(event)

        assert breaker.state == CircuitState.CLOSED

    @pytest.mark.asyncio
    async def test_connection_error_is_not_raised(self, event):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        await publisher_for(handler).publish(event)

    @pytest.mark.asyncio
    async def test_single_attempt_per_event(self, event):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(503)

        await publisher_for(handler).publish(event)

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_open_breaker_skips_delivery(self, event):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60)
        publisher = publisher_for(handler, breaker)

        for _ in range(4):
            await publisher.publish(event)

        assert len(calls) == 2
        assert breaker.state == CircuitState.OPEN


class TestLoggingEventPublisher:
    """Test LoggingEventPublisher"""

    @pytest.mark.asyncio
    async def test_logs_event(self, event, caplog):
        caplog.set_level("INFO", logger="ispdesk")

        await LoggingEventPublisher().publish(event)

        record = next(r for r in caplog.records if r.getMessage() == "Ticket event")
        assert record.ticket_id == event.ticket_id
        assert record.event_type == "escalated"


class TestCircuitBreaker:
    """Test CircuitBreaker"""

    def test_opens_after_threshold(self):
        breaker = CircuitBreaker(failure_threshold=3)

        breaker.record_failure()
        breaker.record_failure()
        assert breaker.allow_request() is True

        breaker.record_failure()
        assert breaker.state == CircuitState.OPEN
        assert breaker.allow_request() is False

    def test_half_open_after_timeout(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0)

        breaker.record_failure()

        assert breaker.state == CircuitState.HALF_OPEN
        assert breaker.allow_request() is True

    def test_success_closes(self):
        breaker = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        breaker.record_failure()

        breaker.record_success()

        assert breaker.state == CircuitState.CLOSED

    def test_failure_while_half_open_reopens(self):
        breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=0)
        for _ in range(5):
            breaker.record_failure()
        assert breaker.state == CircuitState.HALF_OPEN

        breaker.recovery_timeout = 60
        breaker.record_failure()

        assert breaker.state == CircuitState.OPEN
