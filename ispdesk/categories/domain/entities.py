"""
Category Domain Entities
========================

Pure Python domain entities for the ticket category registry.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ispdesk.categories.domain.value_objects import CategoryCode
from ispdesk.core.exceptions import ValidationException


def validate_sla_hours(value: Any) -> int:
    """SLA hours must be a positive whole number."""
    # bool is an int subclass; True must not pass as one hour
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationException(
            "SLA hours must be a positive integer",
            {"sla_hours": value}
        )
    return value


def validate_category_name(value: Optional[str]) -> str:
    if value is None or not value.strip():
        raise ValidationException("Category name is required", {"name": value})
    return value.strip()


@dataclass
class TicketCategoryConfig:
    """
    A ticket category and its service-level agreement.

    The code is the stable identifier tickets refer to; it is fixed at
    creation. Name, SLA and description may be edited.
    """

    id: str
    code: str
    name: str
    sla_hours: int
    description: str = ""
    created_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate category on initialization."""
        CategoryCode(self.code)
        self.name = validate_category_name(self.name)
        validate_sla_hours(self.sla_hours)
        self.description = self.description or ""

    @property
    def category_code(self) -> CategoryCode:
        return CategoryCode(self.code)
