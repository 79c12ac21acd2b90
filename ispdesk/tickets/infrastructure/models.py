"""
Ticket Infrastructure Models
============================

SQLAlchemy ORM models for the ticket module.

`employees` and `customers` are reference tables owned by other parts of
the console; this module only reads them.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ispdesk.config import EmployeeRole, TicketPriority, TicketStatus
from ispdesk.infrastructure.database import Base, UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TicketModel(Base):
    """
    Database model for Ticket entity.

    Maps to the 'tickets' table.
    """
    __tablename__ = "tickets"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Workflow
    status: Mapped[TicketStatus] = mapped_column(String(20), nullable=False, default=TicketStatus.OPEN, index=True)
    priority: Mapped[TicketPriority] = mapped_column(String(20), nullable=False, default=TicketPriority.MEDIUM)
    category: Mapped[str] = mapped_column(String(50), nullable=False, default="internet_issue", index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    is_escalated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    customer_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)

    # SLA
    due_date: Mapped[Optional[datetime]] = mapped_column(UTCDateTime, nullable=True)

    # Resolution
    resolution_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    root_cause: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow, index=True)


class CommentModel(Base):
    """
    Database model for TicketComment.

    Maps to the 'ticket_comments' table. `position` numbers the comments of
    a ticket in append order.
    """
    __tablename__ = "ticket_comments"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    ticket_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_name: Mapped[str] = mapped_column(String(255), nullable=False, default="Support Agent")
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint("ticket_id", "position", name="uq_ticket_comments_position"),
    )


class EmployeeModel(Base):
    """Maps to the 'employees' reference table."""
    __tablename__ = "employees"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[EmployeeRole] = mapped_column(String(20), nullable=False, default=EmployeeRole.SUPPORT)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)


class CustomerModel(Base):
    """Maps to the 'customers' reference table (contact fields only)."""
    __tablename__ = "customers"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=_utcnow)
