"""
Ticket Application Layer
========================

Contains:
- DTOs: request/response models for the ticket API
- Services: TicketLifecycleService, CommentLogService and the collaborator
  interfaces they depend on
"""

from ispdesk.tickets.application.dto import (
    AssignRequest,
    CategoryChangeRequest,
    CommentCreateDTO,
    CommentResponse,
    DraftCategoryChangeRequest,
    EscalateRequest,
    EscalationResponse,
    ResolveRequest,
    TicketCreateDTO,
    TicketDraftDTO,
    TicketDraftResponse,
    TicketResponse,
    TicketStatsResponse,
    TicketUpdateDTO,
)
from ispdesk.tickets.application.services import (
    CommentLogService,
    CustomerContact,
    EmployeeRef,
    ICommentRepository,
    ICustomerDirectory,
    IEmployeeDirectory,
    IEventPublisher,
    ITicketRepository,
    TicketFilter,
    TicketLifecycleService,
    TicketStats,
)

__all__ = [
    "AssignRequest",
    "CategoryChangeRequest",
    "CommentCreateDTO",
    "CommentResponse",
    "DraftCategoryChangeRequest",
    "EscalateRequest",
    "EscalationResponse",
    "ResolveRequest",
    "TicketCreateDTO",
    "TicketDraftDTO",
    "TicketDraftResponse",
    "TicketResponse",
    "TicketStatsResponse",
    "TicketUpdateDTO",
    "CommentLogService",
    "CustomerContact",
    "EmployeeRef",
    "ICommentRepository",
    "ICustomerDirectory",
    "IEmployeeDirectory",
    "IEventPublisher",
    "ITicketRepository",
    "TicketFilter",
    "TicketLifecycleService",
    "TicketStats",
]
