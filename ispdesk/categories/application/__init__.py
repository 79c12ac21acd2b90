"""
Category Application Layer
==========================

Contains:
- DTOs: request/response models for the registry API
- Services: CategoryRegistryService and its collaborator interfaces
"""

from ispdesk.categories.application.dto import (
    CategoryCreateDTO,
    CategoryResponse,
    CategoryUpdateDTO,
    SeedResponse,
)
from ispdesk.categories.application.services import (
    CategoryRegistryService,
    ICategoryDefaultsProvider,
    ICategoryRepository,
)

__all__ = [
    "CategoryCreateDTO",
    "CategoryResponse",
    "CategoryUpdateDTO",
    "SeedResponse",
    "CategoryRegistryService",
    "ICategoryDefaultsProvider",
    "ICategoryRepository",
]
