"""
Category Controllers (API Routes)
=================================

FastAPI routes for the ticket category registry.

Controllers are thin - they delegate to CategoryRegistryService.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ispdesk.audit.application import AuditTrail
from ispdesk.audit.infrastructure import SQLAlchemyAuditLogRepository
from ispdesk.categories.application import (
    CategoryCreateDTO,
    CategoryRegistryService,
    CategoryResponse,
    CategoryUpdateDTO,
    SeedResponse,
)
from ispdesk.categories.infrastructure import (
    SQLAlchemyCategoryRepository,
    YAMLCategoryDefaultsProvider,
)
from ispdesk.config import settings
from ispdesk.core import Actor, IAuthorizer
from ispdesk.infrastructure.database import get_session
from ispdesk.shared.api import get_actor, get_authorizer

router = APIRouter(prefix="/categories", tags=["Categories"])


CATEGORY_EXAMPLE = {
    "id": "0b6f3c1e-6a0b-4a57-9b0e-3d1f6a1c9e21",
    "code": "internet_issue",
    "name": "Internet Issue",
    "sla_hours": 4,
    "description": "Connectivity problems, slow speeds, packet loss.",
    "created_at": "2024-01-15T10:00:00Z"
}


# ========== Dependencies ==========

def get_category_defaults(request: Request) -> YAMLCategoryDefaultsProvider:
    """Starter set loaded at startup; read on first use when startup was skipped."""
    provider = getattr(request.app.state, "category_defaults", None)
    if provider is None:
        provider = YAMLCategoryDefaultsProvider(settings.category_defaults_path)
        request.app.state.category_defaults = provider
    return provider


async def get_category_service(
    session: AsyncSession = Depends(get_session),
    authorizer: IAuthorizer = Depends(get_authorizer)
) -> CategoryRegistryService:
    """Get category registry service instance."""
    return CategoryRegistryService(
        SQLAlchemyCategoryRepository(session),
        authorizer,
        audit_trail=AuditTrail(SQLAlchemyAuditLogRepository(session)),
    )


async def get_seeding_service(
    session: AsyncSession = Depends(get_session),
    authorizer: IAuthorizer = Depends(get_authorizer),
    defaults: YAMLCategoryDefaultsProvider = Depends(get_category_defaults)
) -> CategoryRegistryService:
    """Registry service wired to the starter set, re-read so file edits apply without a restart."""
    defaults.reload()
    return CategoryRegistryService(
        SQLAlchemyCategoryRepository(session),
        authorizer,
        defaults_provider=defaults,
        audit_trail=AuditTrail(SQLAlchemyAuditLogRepository(session)),
    )


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=List[CategoryResponse],
    summary="List categories",
    description="All categories ordered by name.",
    responses={200: {"content": {"application/json": {"example": [CATEGORY_EXAMPLE]}}}}
)
async def list_categories(service: CategoryRegistryService = Depends(get_category_service)):
    return [CategoryResponse.from_domain(c) for c in await service.list()]


@router.post(
    "",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a category",
    description="""
    Requires the `manage_settings` capability.

    - `code` must be a lower-case slug and unique; it cannot be changed later
    - `sla_hours` must be a positive integer
    """
)
async def create_category(
    request: CategoryCreateDTO,
    actor: Actor = Depends(get_actor),
    service: CategoryRegistryService = Depends(get_category_service)
):
    category = await service.create(
        name=request.name,
        code=request.code,
        sla_hours=request.sla_hours,
        description=request.description,
        actor=actor,
    )
    return CategoryResponse.from_domain(category)


@router.post(
    "/seed",
    response_model=SeedResponse,
    summary="Seed the starter categories",
    description="Re-reads the starter set file and inserts it only when the registry is empty."
)
async def seed_categories(
    actor: Actor = Depends(get_actor),
    service: CategoryRegistryService = Depends(get_seeding_service)
):
    created = await service.seed_defaults(actor)
    return SeedResponse(
        created=len(created),
        categories=[CategoryResponse.from_domain(c) for c in created]
    )


@router.patch(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Edit a category",
    responses={404: {"description": "Category not found"}}
)
async def update_category(
    category_id: str,
    request: CategoryUpdateDTO,
    actor: Actor = Depends(get_actor),
    service: CategoryRegistryService = Depends(get_category_service)
):
    category = await service.update(category_id, request.model_dump(exclude_unset=True), actor)
    return CategoryResponse.from_domain(category)


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Tickets filed under the category keep its code and remain readable."
)
async def delete_category(
    category_id: str,
    actor: Actor = Depends(get_actor),
    service: CategoryRegistryService = Depends(get_category_service)
):
    await service.delete(category_id, actor)
