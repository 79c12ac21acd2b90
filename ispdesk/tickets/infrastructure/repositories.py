"""
Ticket Infrastructure Repositories
==================================

Concrete implementations of the ticket repository interfaces using
SQLAlchemy.

Writes are flushed, not committed: the request's session commits once the
handler returns, so an escalation's comment and ticket land together.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.config import TicketPriority, TicketStatus
from ispdesk.infrastructure.database import translate_db_errors
from ispdesk.tickets.application import (
    CustomerContact,
    EmployeeRef,
    ICommentRepository,
    ICustomerDirectory,
    IEmployeeDirectory,
    ITicketRepository,
    TicketFilter,
)
from ispdesk.tickets.domain import Ticket, TicketComment
from ispdesk.tickets.infrastructure.models import (
    CommentModel,
    CustomerModel,
    EmployeeModel,
    TicketModel,
)


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


def _ticket_to_domain(model: TicketModel) -> Ticket:
    return Ticket(
        id=str(model.id),
        title=model.title,
        status=TicketStatus(model.status),
        priority=TicketPriority(model.priority),
        category=model.category,
        created_at=model.created_at,
        description=model.description or "",
        customer_id=model.customer_id,
        assigned_to=model.assigned_to,
        due_date=model.due_date,
        is_escalated=bool(model.is_escalated),
        resolution_notes=model.resolution_notes,
        root_cause=model.root_cause,
    )


def _comment_to_domain(model: CommentModel) -> TicketComment:
    return TicketComment(
        id=str(model.id),
        ticket_id=str(model.ticket_id),
        content=model.content,
        author_name=model.author_name,
        created_at=model.created_at,
    )


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of Ticket entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def _get_model(self, ticket_id: str) -> Optional[TicketModel]:
        ticket_uuid = _parse_uuid(ticket_id)
        if ticket_uuid is None:
            return None

        stmt = select(TicketModel).where(TicketModel.id == ticket_uuid)
        with translate_db_errors("load ticket"):
            result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, ticket_id: str) -> Optional[Ticket]:
        model = await self._get_model(ticket_id)
        return _ticket_to_domain(model) if model else None

    async def save(self, ticket: Ticket) -> Ticket:
        model = await self._get_model(ticket.id)
        if model is None:
            model = TicketModel(id=UUID(ticket.id), created_at=ticket.created_at)
            self._session.add(model)

        model.title = ticket.title
        model.description = ticket.description
        model.status = ticket.status.value
        model.priority = ticket.priority.value
        model.category = ticket.category
        model.customer_id = ticket.customer_id
        model.assigned_to = ticket.assigned_to
        model.due_date = ticket.due_date
        model.is_escalated = ticket.is_escalated
        model.resolution_notes = ticket.resolution_notes
        model.root_cause = ticket.root_cause

        with translate_db_errors("save ticket"):
            await self._session.flush()
        return ticket

    async def list(
        self,
        filters: TicketFilter,
        limit: Optional[int] = 100,
        offset: int = 0
    ) -> List[Ticket]:
        """List tickets with filters, newest first."""
        stmt = select(TicketModel)

        conditions = []
        if filters.status is not None:
            conditions.append(TicketModel.status == filters.status.value)
        if filters.priority is not None:
            conditions.append(TicketModel.priority == filters.priority.value)
        if filters.category:
            conditions.append(TicketModel.category == filters.category)
        if filters.assigned_to:
            conditions.append(TicketModel.assigned_to == filters.assigned_to)
        if filters.customer_id:
            conditions.append(TicketModel.customer_id == filters.customer_id)
        if filters.is_escalated is not None:
            conditions.append(TicketModel.is_escalated == filters.is_escalated)
        if filters.overdue_at is not None:
            conditions.append(TicketModel.due_date.is_not(None))
            conditions.append(TicketModel.due_date < filters.overdue_at)
            conditions.append(TicketModel.status != TicketStatus.CLOSED.value)

        if conditions:
            stmt = stmt.where(and_(*conditions))

        stmt = stmt.order_by(TicketModel.created_at.desc()).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        with translate_db_errors("list tickets"):
            result = await self._session.execute(stmt)
        return [_ticket_to_domain(m) for m in result.scalars().all()]

    async def delete(self, ticket_id: str) -> None:
        ticket_uuid = _parse_uuid(ticket_id)
        if ticket_uuid is None:
            return

        with translate_db_errors("delete ticket"):
            await self._session.execute(delete(TicketModel).where(TicketModel.id == ticket_uuid))
            await self._session.flush()


class SQLAlchemyCommentRepository(ICommentRepository):
    """Append-only comment storage ordered by `position`."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def append(self, comment: TicketComment) -> TicketComment:
        ticket_uuid = UUID(comment.ticket_id)

        with translate_db_errors("append comment"):
            result = await self._session.execute(
                select(func.coalesce(func.max(CommentModel.position), 0))
                .where(CommentModel.ticket_id == ticket_uuid)
            )
            position = result.scalar_one() + 1

            self._session.add(CommentModel(
                id=UUID(comment.id),
                ticket_id=ticket_uuid,
                position=position,
                content=comment.content,
                author_name=comment.author_name,
                created_at=comment.created_at,
            ))
            await self._session.flush()

        return comment

    async def list_by_ticket(self, ticket_id: str) -> List[TicketComment]:
        ticket_uuid = _parse_uuid(ticket_id)
        if ticket_uuid is None:
            return []

        stmt = (
            select(CommentModel)
            .where(CommentModel.ticket_id == ticket_uuid)
            .order_by(CommentModel.position.asc())
        )
        with translate_db_errors("list comments"):
            result = await self._session.execute(stmt)
        return [_comment_to_domain(m) for m in result.scalars().all()]

    async def delete_by_ticket(self, ticket_id: str) -> int:
        ticket_uuid = _parse_uuid(ticket_id)
        if ticket_uuid is None:
            return 0

        with translate_db_errors("delete comments"):
            result = await self._session.execute(
                delete(CommentModel).where(CommentModel.ticket_id == ticket_uuid)
            )
            await self._session.flush()
        return result.rowcount or 0


class SQLAlchemyEmployeeDirectory(IEmployeeDirectory):
    """Looks up active employees in the 'employees' table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def find_by_name(self, name: str) -> Optional[EmployeeRef]:
        stmt = (
            select(EmployeeModel)
            .where(EmployeeModel.name == name, EmployeeModel.status == "active")
            .limit(1)
        )
        with translate_db_errors("load employee"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return EmployeeRef(name=model.name, role=model.role, email=model.email)


class SQLAlchemyCustomerDirectory(ICustomerDirectory):
    """Reads customer contact fields from the 'customers' table."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_contact(self, customer_id: str) -> Optional[CustomerContact]:
        customer_uuid = _parse_uuid(customer_id)
        if customer_uuid is None:
            return None

        stmt = select(CustomerModel).where(CustomerModel.id == customer_uuid)
        with translate_db_errors("load customer"):
            result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return CustomerContact(id=str(model.id), name=model.name, email=model.email, phone=model.phone)
