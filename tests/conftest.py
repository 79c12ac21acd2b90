"""
pytest configuration and shared fixtures

Services run against a throwaway SQLite file per test (aiosqlite), with a
fixed clock so due dates are predictable.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import List

import pytest
import pytest_asyncio

from ispdesk.audit.application import AuditTrail
from ispdesk.audit.infrastructure import SQLAlchemyAuditLogRepository
from ispdesk.categories.application import CategoryRegistryService
from ispdesk.categories.infrastructure import SQLAlchemyCategoryRepository
from ispdesk.config import EmployeeRole, TicketPriority, TicketStatus
from ispdesk.core import Actor, RoleBasedAuthorizer
from ispdesk.infrastructure.database import build_engine, build_session_maker, create_tables
from ispdesk.shared.infrastructure.logging import setup_logging
from ispdesk.tickets.application import (
    CommentLogService,
    IEventPublisher,
    TicketLifecycleService,
)
from ispdesk.tickets.domain import Ticket, TicketEvent
from ispdesk.tickets.infrastructure import (
    SQLAlchemyCommentRepository,
    SQLAlchemyCustomerDirectory,
    SQLAlchemyTicketRepository,
)

START = datetime(2024, 1, 1, tzinfo=timezone.utc)

ADMIN = Actor(name="Ada Admin", role=EmployeeRole.ADMIN)
MANAGER = Actor(name="Max Manager", role=EmployeeRole.MANAGER)
SUPPORT = Actor(name="Sam Support", role=EmployeeRole.SUPPORT)
TECHNICIAN = Actor(name="Jane Tech", role=EmployeeRole.TECHNICIAN)
CUSTOMER = Actor(name="Carl Customer", role=EmployeeRole.CUSTOMER)


class FixedClock:
    """Clock that only moves when told to."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now = self.now + timedelta(**delta)


class RecordingPublisher(IEventPublisher):
    """Collects published events."""

    def __init__(self):
        self.events: List[TicketEvent] = []

    async def publish(self, event: TicketEvent) -> None:
        self.events.append(event)


def make_ticket(**overrides) -> Ticket:
    """Plain ticket for domain tests."""
    fields = dict(
        id="t-1",
        title="No internet",
        status=TicketStatus.OPEN,
        priority=TicketPriority.MEDIUM,
        category="internet_issue",
        created_at=START,
        due_date=START + timedelta(hours=4),
    )
    fields.update(overrides)
    return Ticket(**fields)


@pytest.fixture
def clock():
    """Fixture for a clock frozen at 2024-01-01T00:00:00Z"""
    return FixedClock()


@pytest.fixture
def publisher():
    """Fixture for an in-memory event publisher"""
    return RecordingPublisher()


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Fixture for a SQLite engine with all tables created"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ispdesk.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker):
    """Fixture for one database session"""
    async with session_maker() as session:
        yield session


@pytest.fixture
def audit_trail(session, clock):
    return AuditTrail(SQLAlchemyAuditLogRepository(session), clock=clock)


@pytest.fixture
def category_service(session, audit_trail, clock):
    """Fixture for the category registry backed by SQLite"""
    return CategoryRegistryService(
        SQLAlchemyCategoryRepository(session),
        RoleBasedAuthorizer(),
        audit_trail=audit_trail,
        clock=clock,
    )


@pytest_asyncio.fixture
async def seeded(category_service):
    """Registry holding the starter categories"""
    return await category_service.seed_defaults()


@pytest.fixture
def ticket_service(session, category_service, audit_trail, publisher, clock):
    """Fixture for the ticket lifecycle service backed by SQLite"""
    return TicketLifecycleService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyCommentRepository(session),
        category_service,
        RoleBasedAuthorizer(),
        customers=SQLAlchemyCustomerDirectory(session),
        publisher=publisher,
        audit_trail=audit_trail,
        clock=clock,
    )


@pytest.fixture
def comment_service(session, clock):
    """Fixture for the comment log backed by SQLite"""
    return CommentLogService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyCommentRepository(session),
        clock=clock,
    )


@pytest.fixture
def json_logging():
    """Startup logging (JSON at INFO), root logger restored afterwards"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    setup_logging("INFO", "development")
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
