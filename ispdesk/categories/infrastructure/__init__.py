"""
Category Infrastructure Layer
=============================

- Models: SQLAlchemy ORM model
- Repositories: data access and the YAML starter-set provider
"""

from ispdesk.categories.infrastructure.models import CategoryModel
from ispdesk.categories.infrastructure.repositories import (
    SQLAlchemyCategoryRepository,
    YAMLCategoryDefaultsProvider,
)

__all__ = [
    "CategoryModel",
    "SQLAlchemyCategoryRepository",
    "YAMLCategoryDefaultsProvider",
]
