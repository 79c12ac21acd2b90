"""
Category Infrastructure Models
==============================

SQLAlchemy ORM model for the category registry.
"""

from datetime import datetime, timezone
from uuid import UUID, uuid4

from sqlalchemy import Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ispdesk.infrastructure.database import Base, UTCDateTime


class CategoryModel(Base):
    """
    Database model for TicketCategoryConfig.

    Maps to the 'ticket_categories' table. Tickets hold the code as plain
    text, so there is no foreign key pointing here.
    """
    __tablename__ = "ticket_categories"

    id: Mapped[UUID] = mapped_column(Uuid, primary_key=True, default=uuid4)
    code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    sla_hours: Mapped[int] = mapped_column(Integer, nullable=False, default=24)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=lambda: datetime.now(timezone.utc)
    )
