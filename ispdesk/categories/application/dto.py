"""
Category Application DTOs
=========================

Request and response models for the category registry API.

Field rules (positive SLA, slug code, required name) are enforced by the
registry service so that direct callers get the same errors as HTTP ones.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ispdesk.categories.domain import TicketCategoryConfig


# ========== Request DTOs ==========

class CategoryCreateDTO(BaseModel):
    """DTO for registering a category."""
    name: str = Field(..., description="Display name, e.g. 'Internet Issue'")
    code: str = Field(..., description="Stable slug referenced by tickets, e.g. 'internet_issue'")
    sla_hours: int = Field(..., description="Resolution target in hours")
    description: str = Field(default="", description="What belongs in this category")


class CategoryUpdateDTO(BaseModel):
    """
    DTO for editing a category.

    Only fields present in the request are applied. `code` may be repeated
    unchanged but never altered.
    """
    name: Optional[str] = None
    code: Optional[str] = None
    sla_hours: Optional[int] = None
    description: Optional[str] = None


# ========== Response DTOs ==========

class CategoryResponse(BaseModel):
    """Response model for a category."""
    id: str
    code: str
    name: str
    sla_hours: int
    description: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, category: TicketCategoryConfig) -> "CategoryResponse":
        return cls(
            id=category.id,
            code=category.code,
            name=category.name,
            sla_hours=category.sla_hours,
            description=category.description,
            created_at=category.created_at,
        )


class SeedResponse(BaseModel):
    """Result of seeding the registry."""
    created: int = Field(..., description="Number of categories inserted")
    categories: List[CategoryResponse] = Field(default_factory=list)
