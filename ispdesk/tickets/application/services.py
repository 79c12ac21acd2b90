"""
Ticket Application Services
===========================

Application services orchestrate the ticket domain and coordinate
repositories, the category registry, authorization, the audit trail and
the event publisher.

Following SOLID principles:
- Single Responsibility: lifecycle rules stay in the domain, I/O stays here
- Dependency Inversion: depend on abstractions, not concrete implementations
"""

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from uuid import uuid4

from ispdesk.audit.application import AuditTrail
from ispdesk.categories.application import CategoryRegistryService
from ispdesk.config import AuditAction, Permission, TicketPriority, TicketStatus, settings
from ispdesk.core import (
    Actor,
    IAuthorizer,
    ResourceNotFoundException,
    SYSTEM_ACTOR,
    ValidationException,
)
from ispdesk.shared.infrastructure.logging import get_logger
from ispdesk.shared.time import Clock, ensure_utc, utc_now
from ispdesk.tickets.domain import (
    EscalationHandler,
    EscalationOutcome,
    SLACalculator,
    Ticket,
    TicketAction,
    TicketComment,
    TicketDraft,
    TicketEvent,
    TicketEventType,
    lifecycle,
)

logger = get_logger(__name__)

AUDIT_ENTITY = "Ticket"
DETAIL_FIELDS = ("title", "description", "customer_id", "due_date", "priority")

_PRIORITY_RANK = {TicketPriority.LOW: 0, TicketPriority.MEDIUM: 1, TicketPriority.HIGH: 2}


# ========== Query Objects ==========

@dataclass(frozen=True)
class TicketFilter:
    """Listing filters; `overdue_at` selects tickets overdue at that instant."""
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    category: Optional[str] = None
    assigned_to: Optional[str] = None
    customer_id: Optional[str] = None
    is_escalated: Optional[bool] = None
    overdue_at: Optional[datetime] = None


@dataclass(frozen=True)
class TicketStats:
    """Dashboard counters."""
    total: int
    open: int
    overdue: int
    unassigned: int
    high_priority: int
    escalated: int


@dataclass(frozen=True)
class EmployeeRef:
    """Reference data for an assignable employee."""
    name: str
    role: str
    email: Optional[str] = None


@dataclass(frozen=True)
class CustomerContact:
    """Contact fields an external notifier needs."""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        """Get ticket by ID."""

    @abstractmethod
    async def save(self, ticket: Ticket) -> Ticket:
        """Insert or overwrite a ticket (last write wins)."""

    @abstractmethod
    async def list(
        self,
        filters: TicketFilter,
        limit: Optional[int] = 100,
        offset: int = 0
    ) -> List[Ticket]:
        """List tickets newest first."""

    @abstractmethod
    async def delete(self, ticket_id: str) -> None:
        """Remove a ticket."""


class ICommentRepository(ABC):
    """Interface for the append-only comment log."""

    @abstractmethod
    async def append(self, comment: TicketComment) -> TicketComment:
        """Store a comment after every existing one of its ticket."""

    @abstractmethod
    async def list_by_ticket(self, ticket_id: str) -> List[TicketComment]:
        """Comments of a ticket, oldest first."""

    @abstractmethod
    async def delete_by_ticket(self, ticket_id: str) -> int:
        """Remove all comments of a ticket; only used when the ticket goes."""


class IEmployeeDirectory(ABC):
    """Read-only view of the employee directory."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[EmployeeRef]:
        """Find an employee by display name."""


class ICustomerDirectory(ABC):
    """Read-only view of the customer directory."""

    @abstractmethod
    async def get_contact(self, customer_id: str) -> Optional[CustomerContact]:
        """Contact fields of a customer."""


class IEventPublisher(ABC):
    """Outbound ticket notifications."""

    @abstractmethod
    async def publish(self, event: TicketEvent) -> None:
        """Hand an event to the notifier. Must not raise on delivery failure."""


# ========== Application Services ==========

class CommentLogService:
    """
    Append-only comment log of a ticket.

    There is deliberately no edit or delete: the log is the only record of
    escalation rationale.
    """

    def __init__(
        self,
        tickets: ITicketRepository,
        comments: ICommentRepository,
        default_author: Optional[str] = None,
        clock: Optional[Clock] = None
    ):
        self._tickets = tickets
        self._comments = comments
        self._default_author = default_author or settings.default_comment_author
        self._clock = clock or utc_now

    async def _ensure_ticket(self, ticket_id: str) -> None:
        if await self._tickets.get_by_id(ticket_id) is None:
            raise ResourceNotFoundException("Ticket", ticket_id)

    async def append(
        self,
        ticket_id: str,
        content: Optional[str],
        author_name: Optional[str] = None
    ) -> TicketComment:
        await self._ensure_ticket(ticket_id)

        if content is None or not content.strip():
            raise ValidationException("Comment content is required", {"field": "content"})

        author = author_name.strip() if author_name and author_name.strip() else self._default_author
        comment = TicketComment(
            id=str(uuid4()),
            ticket_id=ticket_id,
            content=content,
            author_name=author,
            created_at=self._clock(),
        )
        await self._comments.append(comment)

        logger.info("Comment added", extra={"ticket_id": ticket_id, "comment_id": comment.id, "author": author})
        return comment

    async def list(self, ticket_id: str) -> List[TicketComment]:
        await self._ensure_ticket(ticket_id)
        return await self._comments.list_by_ticket(ticket_id)


class TicketLifecycleService:
    """
    Command surface of the ticket lifecycle.

    Every command loads the ticket, applies a pure domain operation, saves
    the result, then records an audit entry and publishes a TicketEvent.
    Capability checks run here, before anything is loaded:
    - assign: `assign_tickets`
    - escalate: `escalate_tickets`
    - delete: `delete_records`
    """

    def __init__(
        self,
        tickets: ITicketRepository,
        comments: ICommentRepository,
        categories: CategoryRegistryService,
        authorizer: IAuthorizer,
        employees: Optional[IEmployeeDirectory] = None,
        customers: Optional[ICustomerDirectory] = None,
        publisher: Optional[IEventPublisher] = None,
        audit_trail: Optional[AuditTrail] = None,
        escalation_author: Optional[str] = None,
        clock: Optional[Clock] = None
    ):
        self._tickets = tickets
        self._comments = comments
        self._categories = categories
        self._authorizer = authorizer
        self._employees = employees
        self._customers = customers
        self._publisher = publisher
        self._audit = audit_trail
        self._clock = clock or utc_now
        self._escalation = EscalationHandler(
            author=escalation_author or settings.escalation_author,
            clock=self._clock,
        )

    # ---------- Queries ----------

    async def get(self, ticket_id: str) -> Ticket:
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        return ticket

    async def list(
        self,
        filters: Optional[TicketFilter] = None,
        limit: Optional[int] = 100,
        offset: int = 0
    ) -> List[Ticket]:
        return await self._tickets.list(filters or TicketFilter(), limit=limit, offset=offset)

    async def list_overdue(self, now: Optional[datetime] = None) -> List[Ticket]:
        return await self._tickets.list(TicketFilter(overdue_at=now or self._clock()), limit=None)

    def is_overdue(self, ticket: Ticket, now: Optional[datetime] = None) -> bool:
        """Computed on read; no stored or scheduled state."""
        return SLACalculator.is_overdue(ticket.due_date, ticket.status, now or self._clock())

    async def stats(self) -> TicketStats:
        now = self._clock()
        tickets = await self._tickets.list(TicketFilter(), limit=None)
        return TicketStats(
            total=len(tickets),
            open=sum(1 for t in tickets if not t.is_closed),
            overdue=sum(1 for t in tickets if t.is_overdue(now)),
            unassigned=sum(1 for t in tickets if t.status == TicketStatus.OPEN and not t.assigned_to),
            high_priority=sum(1 for t in tickets if t.priority == TicketPriority.HIGH),
            escalated=sum(1 for t in tickets if t.is_escalated),
        )

    # ---------- Creation & edits ----------

    async def create_ticket(self, draft: TicketDraft, actor: Actor = SYSTEM_ACTOR) -> Ticket:
        """
        Save a draft as a new OPEN ticket.

        Without an explicit due date the ticket is due `sla_hours` after its
        creation time.
        """
        title = self._require_title(draft.title)
        category = await self._categories.resolve_code(draft.category)

        created_at = self._clock()
        due_date = ensure_utc(draft.due_date) or SLACalculator.compute_due_date(created_at, category.sla_hours)

        ticket = Ticket(
            id=str(uuid4()),
            title=title,
            description=draft.description or "",
            status=lifecycle.initial_status(),
            priority=_coerce_priority(draft.priority),
            category=category.code,
            created_at=created_at,
            customer_id=draft.customer_id or None,
            due_date=due_date,
        )
        await self._tickets.save(ticket)

        logger.info(
            "Ticket created",
            extra={
                "ticket_id": ticket.id,
                "category": ticket.category,
                "priority": ticket.priority.value,
                "due_date": due_date.isoformat()
            }
        )
        await self._record(AuditAction.CREATE, ticket, actor, f"Created ticket: {ticket.title}")
        await self._publish(ticket, TicketEventType.CREATED, previous_status=None)
        return ticket

    async def update_details(
        self,
        ticket_id: str,
        changes: Dict[str, Any],
        actor: Actor = SYSTEM_ACTOR
    ) -> Ticket:
        """
        Edit operator-owned fields: title, description, customer, due date
        and priority.

        Status, assignee, category and escalation have their own commands.
        An escalated ticket cannot have its priority lowered.
        """
        ticket = await self.get(ticket_id)
        changes = {k: v for k, v in changes.items() if k in DETAIL_FIELDS}

        if "title" in changes:
            changes["title"] = self._require_title(changes["title"])
        if "description" in changes:
            changes["description"] = changes["description"] or ""
        if "due_date" in changes:
            changes["due_date"] = ensure_utc(changes["due_date"])
        if "customer_id" in changes:
            changes["customer_id"] = changes["customer_id"] or None
        if "priority" in changes:
            priority = _coerce_priority(changes["priority"])
            if ticket.is_escalated and _PRIORITY_RANK[priority] < _PRIORITY_RANK[ticket.priority]:
                raise ValidationException(
                    "Priority of an escalated ticket cannot be lowered",
                    {"priority": ticket.priority.value, "requested": priority.value}
                )
            changes["priority"] = priority

        updated = dataclasses.replace(ticket, **changes)
        await self._tickets.save(updated)

        logger.info("Ticket details updated", extra={"ticket_id": ticket_id, "fields": sorted(changes)})
        await self._record(AuditAction.UPDATE, updated, actor, f"Updated ticket: {', '.join(sorted(changes))}")
        return updated

    async def delete(self, ticket_id: str, actor: Actor = SYSTEM_ACTOR) -> None:
        """Delete a ticket together with its comments."""
        self._authorizer.require(actor, Permission.DELETE_RECORDS)
        ticket = await self.get(ticket_id)

        removed = await self._comments.delete_by_ticket(ticket_id)
        await self._tickets.delete(ticket_id)

        logger.info("Ticket deleted", extra={"ticket_id": ticket_id, "comments_removed": removed})
        await self._record(AuditAction.DELETE, ticket, actor, f"Deleted ticket: {ticket.title}")

    async def change_category(
        self,
        target: Union[str, TicketDraft],
        category_code: str,
        actor: Actor = SYSTEM_ACTOR
    ) -> Union[Ticket, TicketDraft]:
        """
        Point a ticket or a draft at another category.

        A draft gets a fresh due date from the new SLA, counted from now. A
        saved ticket keeps its due date.
        """
        category = await self._categories.resolve_code(category_code)

        if isinstance(target, TicketDraft):
            due_date = SLACalculator.compute_due_date(self._clock(), category.sla_hours)
            return dataclasses.replace(target, category=category.code, due_date=due_date)

        ticket = await self.get(target)
        updated = dataclasses.replace(ticket, category=category.code)
        await self._tickets.save(updated)

        logger.info(
            "Ticket category changed",
            extra={"ticket_id": ticket.id, "from_category": ticket.category, "to_category": category.code}
        )
        await self._record(AuditAction.UPDATE, updated, actor, f"Changed category to {category.code}")
        return updated

    # ---------- Lifecycle commands ----------

    async def assign(self, ticket_id: str, agent: Optional[str], actor: Actor = SYSTEM_ACTOR) -> Ticket:
        self._authorizer.require(actor, Permission.ASSIGN_TICKETS)
        ticket = await self.get(ticket_id)

        updated = lifecycle.assign(ticket, agent)
        await self._ensure_employee(updated.assigned_to)

        await self._apply(ticket, updated, TicketAction.ASSIGN, actor, f"Assigned to {updated.assigned_to}")
        await self._publish(updated, TicketEventType.ASSIGNED, previous_status=ticket.status)
        return updated

    async def start(self, ticket_id: str, actor: Actor = SYSTEM_ACTOR) -> Ticket:
        return await self._transition(ticket_id, TicketAction.START, TicketEventType.STARTED, actor, lifecycle.start)

    async def resolve(
        self,
        ticket_id: str,
        notes: Optional[str],
        root_cause: Optional[str] = None,
        actor: Actor = SYSTEM_ACTOR
    ) -> Ticket:
        return await self._transition(
            ticket_id, TicketAction.RESOLVE, TicketEventType.RESOLVED, actor,
            lambda t: lifecycle.resolve(t, notes, root_cause)
        )

    async def verify(self, ticket_id: str, actor: Actor = SYSTEM_ACTOR) -> Ticket:
        return await self._transition(ticket_id, TicketAction.VERIFY, TicketEventType.VERIFIED, actor, lifecycle.verify)

    async def reopen(self, ticket_id: str, actor: Actor = SYSTEM_ACTOR) -> Ticket:
        return await self._transition(ticket_id, TicketAction.REOPEN, TicketEventType.REOPENED, actor, lifecycle.reopen)

    async def close(self, ticket_id: str, actor: Actor = SYSTEM_ACTOR) -> Ticket:
        return await self._transition(ticket_id, TicketAction.CLOSE, TicketEventType.CLOSED, actor, lifecycle.close)

    async def escalate(
        self,
        ticket_id: str,
        reason: Optional[str],
        assignee: Optional[str] = None,
        actor: Actor = SYSTEM_ACTOR
    ) -> EscalationOutcome:
        """
        Escalate a ticket.

        The audit comment is appended before the ticket is saved, so the
        reason is on record even if the ticket write fails.
        """
        self._authorizer.require(actor, Permission.ESCALATE_TICKETS)
        ticket = await self.get(ticket_id)

        outcome = self._escalation.escalate(ticket, reason, assignee)
        if outcome.ticket.assigned_to != ticket.assigned_to:
            await self._ensure_employee(outcome.ticket.assigned_to)

        await self._comments.append(outcome.comment)
        await self._apply(ticket, outcome.ticket, TicketAction.ESCALATE, actor, f"Escalated: {reason.strip()}")
        await self._publish(outcome.ticket, TicketEventType.ESCALATED, previous_status=ticket.status)
        return outcome

    # ---------- Helpers ----------

    async def _transition(self, ticket_id, action, event_type, actor, operation) -> Ticket:
        ticket = await self.get(ticket_id)
        updated = operation(ticket)
        await self._apply(ticket, updated, action, actor, f"Changed status to {updated.status.name}")
        await self._publish(updated, event_type, previous_status=ticket.status)
        return updated

    async def _apply(
        self,
        before: Ticket,
        after: Ticket,
        action: TicketAction,
        actor: Actor,
        details: str
    ) -> None:
        await self._tickets.save(after)

        logger.info(
            "Ticket state changed",
            extra={
                "ticket_id": after.id,
                "action": action.value,
                "from_status": before.status.value,
                "to_status": after.status.value,
                "actor": actor.name
            }
        )
        await self._record(AuditAction.UPDATE, after, actor, details)

    async def _record(self, action: AuditAction, ticket: Ticket, actor: Actor, details: str) -> None:
        if self._audit:
            await self._audit.record(action, AUDIT_ENTITY, actor.name, entity_id=ticket.id, details=details)

    async def _publish(
        self,
        ticket: Ticket,
        event_type: TicketEventType,
        previous_status: Optional[TicketStatus]
    ) -> None:
        if self._publisher is None:
            return

        contact = None
        if ticket.customer_id and self._customers:
            contact = await self._customers.get_contact(ticket.customer_id)

        event = TicketEvent(
            ticket_id=ticket.id,
            event_type=event_type,
            new_status=ticket.status,
            priority=ticket.priority,
            is_escalated=ticket.is_escalated,
            occurred_at=self._clock(),
            title=ticket.title,
            previous_status=previous_status,
            assigned_to=ticket.assigned_to,
            customer_id=ticket.customer_id,
            customer_name=contact.name if contact else None,
            customer_email=contact.email if contact else None,
            customer_phone=contact.phone if contact else None,
        )
        await self._publisher.publish(event)

    async def _ensure_employee(self, name: Optional[str]) -> None:
        if name and self._employees and await self._employees.find_by_name(name) is None:
            raise ResourceNotFoundException("Employee", name)

    @staticmethod
    def _require_title(title: Optional[str]) -> str:
        if title is None or not title.strip():
            raise ValidationException("Title is required", {"field": "title"})
        return title.strip()


def _coerce_priority(value: Union[str, TicketPriority]) -> TicketPriority:
    try:
        return TicketPriority(value)
    except ValueError:
        raise ValidationException(
            f"Unknown priority '{value}'",
            {"allowed": [p.value for p in TicketPriority]}
        ) from None
