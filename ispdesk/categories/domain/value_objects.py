"""
Category Value Objects
======================

Immutable value objects for the category registry.

Value objects are defined by their attributes rather than an identity.
They are immutable and can be freely shared.
"""

import re
from dataclasses import dataclass
from typing import Tuple

from ispdesk.core.exceptions import ValidationException

_CODE_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_\-]*$")


@dataclass(frozen=True)
class CategoryCode:
    """
    Validated category slug (e.g. ``internet_issue``).

    Tickets keep the code as a plain string so retiring a category never
    invalidates them; this wrapper is what the boundary checks before a code
    reaches a ticket.
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not _CODE_PATTERN.match(self.value):
            raise ValidationException(
                "Category code must be a lower-case slug (letters, digits, '_' or '-')",
                {"code": self.value}
            )

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CategoryTemplate:
    """A category definition used to seed an empty registry."""
    name: str
    code: str
    sla_hours: int
    description: str = ""


DEFAULT_CATEGORIES: Tuple[CategoryTemplate, ...] = (
    CategoryTemplate(
        name="Internet Issue",
        code="internet_issue",
        sla_hours=4,
        description="Connectivity problems, slow speeds, packet loss."
    ),
    CategoryTemplate(
        name="Billing",
        code="billing",
        sla_hours=24,
        description="Invoice inquiries, payment issues, plan changes."
    ),
    CategoryTemplate(
        name="Hardware",
        code="hardware",
        sla_hours=48,
        description="Router malfunction, cable breaks, equipment replacement."
    ),
    CategoryTemplate(
        name="Installation",
        code="installation",
        sla_hours=72,
        description="New service setup, moving services."
    ),
    CategoryTemplate(
        name="Other",
        code="other",
        sla_hours=24,
        description="General inquiries and feedback."
    ),
)
