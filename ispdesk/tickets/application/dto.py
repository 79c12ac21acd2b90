"""
Ticket Application DTOs
=======================

Data Transfer Objects for the ticket API layer.

Only light typing happens here; required-field and workflow rules are
raised by the services so that every caller sees the same errors.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from ispdesk.config import TicketPriority
from ispdesk.tickets.application.services import TicketStats
from ispdesk.tickets.domain import (
    EscalationOutcome,
    Ticket,
    TicketComment,
    TicketDraft,
    allowed_actions,
)

# ========== Type Aliases for Literals ==========
TicketStatusStr = Literal["open", "assigned", "in_progress", "resolved", "verified", "closed"]
TicketPriorityStr = Literal["low", "medium", "high"]
TicketActionStr = Literal["assign", "start", "resolve", "verify", "reopen", "close", "escalate"]

DEFAULT_CATEGORY = "internet_issue"


# ========== Request DTOs ==========

class TicketCreateDTO(BaseModel):
    """DTO for opening a ticket."""
    title: str = Field(..., description="Short summary of the problem")
    description: str = Field(default="", description="Details reported by the customer")
    priority: TicketPriorityStr = Field(default="medium")
    category: str = Field(default=DEFAULT_CATEGORY, description="Category code")
    customer_id: Optional[str] = Field(None, description="Customer the ticket belongs to")
    due_date: Optional[datetime] = Field(
        None,
        description="Explicit due date; derived from the category SLA when omitted"
    )

    def to_draft(self) -> TicketDraft:
        return TicketDraft(
            title=self.title,
            description=self.description,
            priority=TicketPriority(self.priority),
            category=self.category,
            customer_id=self.customer_id,
            due_date=self.due_date,
        )


class TicketDraftDTO(TicketCreateDTO):
    """A ticket form that has not been submitted yet."""
    title: str = ""


class TicketUpdateDTO(BaseModel):
    """DTO for editing ticket details. Only fields sent are applied."""
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TicketPriorityStr] = None
    customer_id: Optional[str] = None
    due_date: Optional[datetime] = None


class AssignRequest(BaseModel):
    agent: str = Field(..., description="Employee taking the ticket")


class ResolveRequest(BaseModel):
    resolution_notes: str = Field(..., description="What was done")
    root_cause: Optional[str] = Field(None, description="Why it happened")


class EscalateRequest(BaseModel):
    reason: str = Field(..., description="Why the ticket is escalated")
    assignee: Optional[str] = Field(None, description="Employee taking over, if any")


class CategoryChangeRequest(BaseModel):
    category: str = Field(..., description="New category code")


class DraftCategoryChangeRequest(BaseModel):
    draft: TicketDraftDTO
    category: str = Field(..., description="New category code")


class CommentCreateDTO(BaseModel):
    content: str = Field(..., description="Comment text")
    author_name: Optional[str] = Field(None, description="Defaults to 'Support Agent'")


# ========== Response DTOs ==========

class TicketResponse(BaseModel):
    """Response model for a ticket."""
    id: str
    title: str
    description: str
    status: TicketStatusStr
    priority: TicketPriorityStr
    category: str
    customer_id: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    is_escalated: bool
    is_overdue: bool = Field(..., description="Computed at read time")
    resolution_notes: Optional[str] = None
    root_cause: Optional[str] = None
    created_at: datetime
    allowed_actions: List[TicketActionStr] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, ticket: Ticket, now: datetime) -> "TicketResponse":
        return cls(
            id=ticket.id,
            title=ticket.title,
            description=ticket.description,
            status=ticket.status.value,
            priority=ticket.priority.value,
            category=ticket.category,
            customer_id=ticket.customer_id,
            assigned_to=ticket.assigned_to,
            due_date=ticket.due_date,
            is_escalated=ticket.is_escalated,
            is_overdue=ticket.is_overdue(now),
            resolution_notes=ticket.resolution_notes,
            root_cause=ticket.root_cause,
            created_at=ticket.created_at,
            allowed_actions=[a.value for a in allowed_actions(ticket.status)],
        )


class TicketDraftResponse(BaseModel):
    title: str
    description: str
    priority: TicketPriorityStr
    category: str
    customer_id: Optional[str] = None
    due_date: Optional[datetime] = None

    @classmethod
    def from_domain(cls, draft: TicketDraft) -> "TicketDraftResponse":
        return cls(
            title=draft.title,
            description=draft.description,
            priority=draft.priority.value,
            category=draft.category,
            customer_id=draft.customer_id,
            due_date=draft.due_date,
        )


class CommentResponse(BaseModel):
    id: str
    ticket_id: str
    content: str
    author_name: str
    created_at: datetime

    @classmethod
    def from_domain(cls, comment: TicketComment) -> "CommentResponse":
        return cls(
            id=comment.id,
            ticket_id=comment.ticket_id,
            content=comment.content,
            author_name=comment.author_name,
            created_at=comment.created_at,
        )


class EscalationResponse(BaseModel):
    ticket: TicketResponse
    comment: CommentResponse

    @classmethod
    def from_domain(cls, outcome: EscalationOutcome, now: datetime) -> "EscalationResponse":
        return cls(
            ticket=TicketResponse.from_domain(outcome.ticket, now),
            comment=CommentResponse.from_domain(outcome.comment),
        )


class TicketStatsResponse(BaseModel):
    """Dashboard counters."""
    total: int = Field(..., description="All tickets")
    open: int = Field(..., description="Tickets not yet closed")
    overdue: int = Field(..., description="Past due and not closed")
    unassigned: int = Field(..., description="OPEN tickets without an assignee")
    high_priority: int
    escalated: int

    @classmethod
    def from_domain(cls, stats: TicketStats) -> "TicketStatsResponse":
        return cls(
            total=stats.total,
            open=stats.open,
            overdue=stats.overdue,
            unassigned=stats.unassigned,
            high_priority=stats.high_priority,
            escalated=stats.escalated,
        )
