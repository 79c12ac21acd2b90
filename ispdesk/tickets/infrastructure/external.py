"""
Ticket External Service Integrations
====================================

Outbound ticket events for the external notifier:
- WebhookEventPublisher: POSTs events as JSON, guarded by a circuit breaker
- LoggingEventPublisher: writes events to the log when no webhook is set

Delivery is a single attempt. A failed notification is logged and never
fails the ticket command that produced it.
"""

import time
from typing import Optional

import httpx

from ispdesk.config import settings
from ispdesk.shared.infrastructure.logging import get_logger
from ispdesk.tickets.application import IEventPublisher
from ispdesk.tickets.domain import TicketEvent

logger = get_logger(__name__)


class CircuitState:
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Circuit breaker for a flaky notifier.

    States:
    - CLOSED: Normal operation, requests pass through
    - OPEN: After N failures, skip requests for M seconds
    - HALF_OPEN: After timeout, allow one test request
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time: Optional[float] = None

    @property
    def state(self) -> str:
        """Get current circuit state."""
        if self._state == CircuitState.OPEN and self._last_failure_time is not None:
            if time.monotonic() - self._last_failure_time >= self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
        return self._state

    def allow_request(self) -> bool:
        return self.state in (CircuitState.CLOSED, CircuitState.HALF_OPEN)

    def record_success(self) -> None:
        self._failure_count = 0
        self._state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_time = time.monotonic()

        if self._state == CircuitState.HALF_OPEN or self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Circuit breaker opened",
                extra={
                    "failure_count": self._failure_count,
                    "recovery_timeout": self.recovery_timeout
                }
            )


class WebhookEventPublisher(IEventPublisher):
    """
    Sends ticket events to an HTTP webhook.

    The receiving service owns email, SMS and WhatsApp delivery.
    """

    def __init__(
        self,
        url: str,
        timeout_seconds: Optional[float] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        client: Optional[httpx.AsyncClient] = None
    ):
        self._url = url
        self._timeout = timeout_seconds or settings.notification_timeout_seconds
        self._circuit_breaker = circuit_breaker or CircuitBreaker()
        self._http_client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def publish(self, event: TicketEvent) -> None:
        if not self._circuit_breaker.allow_request():
            logger.warning(
                "Circuit breaker open, skipping ticket notification",
                extra={"ticket_id": event.ticket_id, "event_type": event.event_type.value}
            )
            return

        try:
            client = await self._get_client()
            response = await client.post(self._url, json=event.to_payload())
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._circuit_breaker.record_failure()
            logger.error(
                "Ticket notification failed",
                extra={
                    "ticket_id": event.ticket_id,
                    "event_type": event.event_type.value,
                    "error": str(e)
                }
            )
            return

        self._circuit_breaker.record_success()
        logger.info(
            "Ticket notification sent",
            extra={"ticket_id": event.ticket_id, "event_type": event.event_type.value}
        )

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None


class LoggingEventPublisher(IEventPublisher):
    """Publishes events to the application log."""

    async def publish(self, event: TicketEvent) -> None:
        logger.info("Ticket event", extra=event.to_payload())
