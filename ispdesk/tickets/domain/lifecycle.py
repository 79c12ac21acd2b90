"""
Ticket Lifecycle State Machine
==============================

    OPEN --assign--> ASSIGNED --start--> IN_PROGRESS --resolve--> RESOLVED
    RESOLVED --verify--> VERIFIED --close--> CLOSED
    RESOLVED --reopen--> IN_PROGRESS

Escalation (see `escalation`) is allowed from every state except CLOSED.

Each operation takes a ticket and returns the updated copy. The status is
checked before any argument, and nothing here touches storage.
"""

import dataclasses
from enum import Enum
from typing import Dict, FrozenSet, List, Optional, Tuple

from ispdesk.config import TicketStatus
from ispdesk.core.exceptions import InvalidTransitionException, ValidationException
from ispdesk.tickets.domain.entities import Ticket


class TicketAction(str, Enum):
    """Commands a ticket accepts."""
    ASSIGN = "assign"
    START = "start"
    RESOLVE = "resolve"
    VERIFY = "verify"
    REOPEN = "reopen"
    CLOSE = "close"
    ESCALATE = "escalate"


# action -> (source states, target state); escalation keeps the status
# unless it reassigns, so it has no fixed target.
TRANSITIONS: Dict[TicketAction, Tuple[FrozenSet[TicketStatus], Optional[TicketStatus]]] = {
    TicketAction.ASSIGN: (frozenset({TicketStatus.OPEN}), TicketStatus.ASSIGNED),
    TicketAction.START: (frozenset({TicketStatus.ASSIGNED}), TicketStatus.IN_PROGRESS),
    TicketAction.RESOLVE: (frozenset({TicketStatus.IN_PROGRESS}), TicketStatus.RESOLVED),
    TicketAction.VERIFY: (frozenset({TicketStatus.RESOLVED}), TicketStatus.VERIFIED),
    TicketAction.REOPEN: (frozenset({TicketStatus.RESOLVED}), TicketStatus.IN_PROGRESS),
    TicketAction.CLOSE: (frozenset({TicketStatus.VERIFIED}), TicketStatus.CLOSED),
    TicketAction.ESCALATE: (frozenset(set(TicketStatus) - {TicketStatus.CLOSED}), None),
}


def initial_status() -> TicketStatus:
    return TicketStatus.OPEN


def can_perform(status: TicketStatus, action: TicketAction) -> bool:
    sources, _ = TRANSITIONS[action]
    return status in sources


def allowed_actions(status: TicketStatus) -> List[TicketAction]:
    """Actions valid from a status, in workflow order."""
    return [action for action in TicketAction if can_perform(status, action)]


def ensure_allowed(ticket: Ticket, action: TicketAction) -> None:
    if not can_perform(ticket.status, action):
        raise InvalidTransitionException(action.value, ticket.status.value)


def _move(ticket: Ticket, action: TicketAction, **changes) -> Ticket:
    _, target = TRANSITIONS[action]
    return dataclasses.replace(ticket, status=target, **changes)


def _require_text(value: Optional[str], message: str, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationException(message, {"field": field})
    return value.strip()


def assign(ticket: Ticket, agent: Optional[str]) -> Ticket:
    ensure_allowed(ticket, TicketAction.ASSIGN)
    agent = _require_text(agent, "Assignee is required", "assigned_to")
    return _move(ticket, TicketAction.ASSIGN, assigned_to=agent)


def start(ticket: Ticket) -> Ticket:
    ensure_allowed(ticket, TicketAction.START)
    return _move(ticket, TicketAction.START)


def resolve(ticket: Ticket, notes: Optional[str], root_cause: Optional[str] = None) -> Ticket:
    """
    Mark the work done.

    A blank root cause leaves whatever root cause was recorded before.
    """
    ensure_allowed(ticket, TicketAction.RESOLVE)
    notes = _require_text(notes, "resolution notes required", "resolution_notes")

    changes = {"resolution_notes": notes}
    if root_cause is not None and root_cause.strip():
        changes["root_cause"] = root_cause.strip()
    return _move(ticket, TicketAction.RESOLVE, **changes)


def verify(ticket: Ticket) -> Ticket:
    ensure_allowed(ticket, TicketAction.VERIFY)
    return _move(ticket, TicketAction.VERIFY)


def reopen(ticket: Ticket) -> Ticket:
    # Resolution notes and due date are kept
    ensure_allowed(ticket, TicketAction.REOPEN)
    return _move(ticket, TicketAction.REOPEN)


def close(ticket: Ticket) -> Ticket:
    ensure_allowed(ticket, TicketAction.CLOSE)
    return _move(ticket, TicketAction.CLOSE)
