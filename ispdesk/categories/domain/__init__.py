"""
Category Domain Layer
=====================

Contains:
- Entities: TicketCategoryConfig
- Value Objects: CategoryCode, CategoryTemplate and the starter set

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from ispdesk.categories.domain.entities import (
    TicketCategoryConfig,
    validate_category_name,
    validate_sla_hours,
)
from ispdesk.categories.domain.value_objects import (
    CategoryCode,
    CategoryTemplate,
    DEFAULT_CATEGORIES,
)

__all__ = [
    "TicketCategoryConfig",
    "validate_category_name",
    "validate_sla_hours",
    "CategoryCode",
    "CategoryTemplate",
    "DEFAULT_CATEGORIES",
]
