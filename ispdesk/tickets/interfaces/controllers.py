"""
Ticket Controllers (API Routes)
===============================

FastAPI routes for the ticket lifecycle.

Controllers are thin - they delegate to TicketLifecycleService and
CommentLogService. The acting user comes from the gateway headers.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.audit.application import AuditTrail
from ispdesk.audit.infrastructure import SQLAlchemyAuditLogRepository
from ispdesk.categories.interfaces import get_category_service
from ispdesk.categories.application import CategoryRegistryService
from ispdesk.config import TicketPriority, TicketStatus, settings
from ispdesk.core import Actor, IAuthorizer
from ispdesk.infrastructure.database import get_session
from ispdesk.shared.api import get_actor, get_authorizer
from ispdesk.shared.infrastructure.logging import get_logger, log_latency
from ispdesk.shared.time import utc_now
from ispdesk.tickets.application import (
    AssignRequest,
    CategoryChangeRequest,
    CommentCreateDTO,
    CommentLogService,
    CommentResponse,
    DraftCategoryChangeRequest,
    EscalateRequest,
    EscalationResponse,
    IEventPublisher,
    ResolveRequest,
    TicketCreateDTO,
    TicketDraftResponse,
    TicketFilter,
    TicketLifecycleService,
    TicketResponse,
    TicketStatsResponse,
    TicketUpdateDTO,
)
from ispdesk.tickets.infrastructure import (
    LoggingEventPublisher,
    SQLAlchemyCommentRepository,
    SQLAlchemyCustomerDirectory,
    SQLAlchemyEmployeeDirectory,
    SQLAlchemyTicketRepository,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/tickets", tags=["Tickets"])


TICKET_RESPONSE_EXAMPLE = {
    "id": "5f0c2a8e-9d3b-4c71-8a55-2f6e1b7d4c90",
    "title": "No internet since this morning",
    "description": "ONT LOS light blinking red.",
    "status": "assigned",
    "priority": "high",
    "category": "internet_issue",
    "customer_id": None,
    "assigned_to": "Jane Tech",
    "due_date": "2024-01-01T04:00:00Z",
    "is_escalated": True,
    "is_overdue": False,
    "resolution_notes": None,
    "root_cause": None,
    "created_at": "2024-01-01T00:00:00Z",
    "allowed_actions": ["start", "escalate"]
}


# ========== Dependencies ==========

def get_event_publisher(request: Request) -> IEventPublisher:
    """Publisher created at startup, or a logging one."""
    publisher = getattr(request.app.state, "event_publisher", None)
    return publisher or LoggingEventPublisher()


async def get_ticket_service(
    session: AsyncSession = Depends(get_session),
    authorizer: IAuthorizer = Depends(get_authorizer),
    categories: CategoryRegistryService = Depends(get_category_service),
    publisher: IEventPublisher = Depends(get_event_publisher)
) -> TicketLifecycleService:
    """Get ticket lifecycle service instance."""
    return TicketLifecycleService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyCommentRepository(session),
        categories,
        authorizer,
        employees=SQLAlchemyEmployeeDirectory(session) if settings.validate_assignees else None,
        customers=SQLAlchemyCustomerDirectory(session),
        publisher=publisher,
        audit_trail=AuditTrail(SQLAlchemyAuditLogRepository(session)),
    )


async def get_comment_service(session: AsyncSession = Depends(get_session)) -> CommentLogService:
    """Get comment log service instance."""
    return CommentLogService(SQLAlchemyTicketRepository(session), SQLAlchemyCommentRepository(session))


def _respond(ticket) -> TicketResponse:
    return TicketResponse.from_domain(ticket, utc_now())


# ========== Collection routes ==========

@router.post(
    "",
    response_model=TicketResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open a ticket",
    description="""
    Creates an OPEN ticket.

    When `due_date` is omitted it is `created_at + sla_hours` of the chosen
    category. The category code must exist in the registry.
    """,
    responses={201: {"content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}}}
)
async def create_ticket(
    request: TicketCreateDTO,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    ticket = await service.create_ticket(request.to_draft(), actor)
    return _respond(ticket)


@router.get(
    "",
    response_model=List[TicketResponse],
    summary="List tickets",
    description="""
    Newest first.

    **Query Parameters:**
    - `status`, `priority`, `category`, `assigned_to`, `customer_id`: exact filters
    - `is_escalated`: escalated (true) or not escalated (false) tickets
    - `overdue`: only tickets past due and not closed
    - `limit` (default 100, max 1000), `offset`
    """
)
async def list_tickets(
    status_filter: Optional[TicketStatus] = Query(None, alias="status"),
    priority: Optional[TicketPriority] = Query(None),
    category: Optional[str] = Query(None),
    assigned_to: Optional[str] = Query(None),
    customer_id: Optional[str] = Query(None),
    is_escalated: Optional[bool] = Query(None),
    overdue: bool = Query(False),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    filters = TicketFilter(
        status=status_filter,
        priority=priority,
        category=category,
        assigned_to=assigned_to,
        customer_id=customer_id,
        is_escalated=is_escalated,
        overdue_at=utc_now() if overdue else None,
    )
    tickets = await service.list(filters, limit=limit, offset=offset)
    now = utc_now()
    return [TicketResponse.from_domain(t, now) for t in tickets]


@router.get(
    "/stats",
    response_model=TicketStatsResponse,
    summary="Dashboard counters"
)
async def ticket_stats(service: TicketLifecycleService = Depends(get_ticket_service)):
    return TicketStatsResponse.from_domain(await service.stats())


@router.post(
    "/drafts/category",
    response_model=TicketDraftResponse,
    summary="Change the category of an unsaved ticket",
    description="Returns the draft with the due date recomputed from the new category's SLA."
)
async def change_draft_category(
    request: DraftCategoryChangeRequest,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    draft = await service.change_category(request.draft.to_draft(), request.category, actor)
    return TicketDraftResponse.from_domain(draft)


# ========== Single ticket routes ==========

@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Get a ticket",
    responses={404: {"description": "Ticket not found"}}
)
async def get_ticket(ticket_id: str, service: TicketLifecycleService = Depends(get_ticket_service)):
    return _respond(await service.get(ticket_id))


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Edit ticket details",
    description="Title, description, customer, due date and priority. Escalated tickets cannot be lowered in priority."
)
async def update_ticket(
    ticket_id: str,
    request: TicketUpdateDTO,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    ticket = await service.update_details(ticket_id, request.model_dump(exclude_unset=True), actor)
    return _respond(ticket)


@router.delete(
    "/{ticket_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a ticket and its comments",
    description="Requires the `delete_records` capability."
)
async def delete_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    await service.delete(ticket_id, actor)


@router.put(
    "/{ticket_id}/category",
    response_model=TicketResponse,
    summary="Change the category of a saved ticket",
    description="The due date is left as it is."
)
async def change_ticket_category(
    ticket_id: str,
    request: CategoryChangeRequest,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    ticket = await service.change_category(ticket_id, request.category, actor)
    return _respond(ticket)


# ========== Lifecycle routes ==========

@router.post(
    "/{ticket_id}/assign",
    response_model=TicketResponse,
    summary="Assign an OPEN ticket",
    description="Requires the `assign_tickets` capability."
)
async def assign_ticket(
    ticket_id: str,
    request: AssignRequest,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    return _respond(await service.assign(ticket_id, request.agent, actor))


@router.post("/{ticket_id}/start", response_model=TicketResponse, summary="Start work on an ASSIGNED ticket")
async def start_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    return _respond(await service.start(ticket_id, actor))


@router.post(
    "/{ticket_id}/resolve",
    response_model=TicketResponse,
    summary="Resolve an IN_PROGRESS ticket",
    description="`resolution_notes` must not be blank."
)
async def resolve_ticket(
    ticket_id: str,
    request: ResolveRequest,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    ticket = await service.resolve(ticket_id, request.resolution_notes, request.root_cause, actor)
    return _respond(ticket)


@router.post("/{ticket_id}/verify", response_model=TicketResponse, summary="Confirm a RESOLVED ticket")
async def verify_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    return _respond(await service.verify(ticket_id, actor))


@router.post(
    "/{ticket_id}/reopen",
    response_model=TicketResponse,
    summary="Send a RESOLVED ticket back to IN_PROGRESS",
    description="Resolution notes and due date are kept."
)
async def reopen_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    return _respond(await service.reopen(ticket_id, actor))


@router.post("/{ticket_id}/close", response_model=TicketResponse, summary="Close a VERIFIED ticket")
async def close_ticket(
    ticket_id: str,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    return _respond(await service.close(ticket_id, actor))


@router.post(
    "/{ticket_id}/escalate",
    response_model=EscalationResponse,
    summary="Escalate a ticket",
    description="""
    Requires the `escalate_tickets` capability. Allowed from any status
    except `closed`.

    Forces `priority=high` and `is_escalated=true`. With an `assignee` the
    ticket is reassigned and moves to `assigned`. A System comment records
    the reason.
    """
)
async def escalate_ticket(
    ticket_id: str,
    request: EscalateRequest,
    actor: Actor = Depends(get_actor),
    service: TicketLifecycleService = Depends(get_ticket_service)
):
    with log_latency(logger, "ticket_escalate", ticket_id=ticket_id):
        outcome = await service.escalate(ticket_id, request.reason, request.assignee, actor)
    return EscalationResponse.from_domain(outcome, utc_now())


# ========== Comment routes ==========

@router.get(
    "/{ticket_id}/comments",
    response_model=List[CommentResponse],
    summary="Comment log of a ticket",
    description="Oldest first."
)
async def list_comments(ticket_id: str, service: CommentLogService = Depends(get_comment_service)):
    return [CommentResponse.from_domain(c) for c in await service.list(ticket_id)]


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a comment"
)
async def add_comment(
    ticket_id: str,
    request: CommentCreateDTO,
    service: CommentLogService = Depends(get_comment_service)
):
    comment = await service.append(ticket_id, request.content, request.author_name)
    return CommentResponse.from_domain(comment)
