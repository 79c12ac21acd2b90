"""
ISP Ops Console - Main Application
==================================

Ticket lifecycle and SLA engine of the ISP operations console.

Modules:
- Categories: ticket categories and their SLA hours
- Tickets: lifecycle state machine, escalation, comment log
- Audit: record of create/update/delete actions

Clean Architecture Layers:
- Interfaces: FastAPI controllers
- Application: Services and DTOs
- Domain: Entities, value objects, state machine
- Infrastructure: Database, notification webhook
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

# Configuration and Core
from ispdesk.config import settings
from ispdesk.core import ApplicationException, RoleBasedAuthorizer, SYSTEM_ACTOR

# Infrastructure
from ispdesk.infrastructure.database import (
    close_database,
    create_tables,
    get_engine,
    get_session_context,
    init_database,
)

# Module Routers
from ispdesk.audit.interfaces import audit_router
from ispdesk.categories.interfaces import categories_router
from ispdesk.tickets.interfaces import tickets_router

# Module services used at startup
from ispdesk.audit.application import AuditTrail
from ispdesk.audit.infrastructure import SQLAlchemyAuditLogRepository
from ispdesk.categories.application import CategoryRegistryService
from ispdesk.categories.infrastructure import (
    SQLAlchemyCategoryRepository,
    YAMLCategoryDefaultsProvider,
)
from ispdesk.tickets.infrastructure import LoggingEventPublisher, WebhookEventPublisher

# Shared
from ispdesk.shared.api.middleware import (
    CorrelationIDMiddleware,
    LoggingMiddleware,
    application_exception_handler,
    global_exception_handler,
)
from ispdesk.shared.infrastructure.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def seed_categories(defaults: YAMLCategoryDefaultsProvider) -> int:
    """Insert the starter categories into an empty registry."""
    async with get_session_context() as session:
        service = CategoryRegistryService(
            SQLAlchemyCategoryRepository(session),
            RoleBasedAuthorizer(),
            defaults_provider=defaults,
            audit_trail=AuditTrail(SQLAlchemyAuditLogRepository(session)),
        )
        created = await service.seed_defaults(SYSTEM_ACTOR)
    return len(created)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager.

    STARTUP:
    1. Setup structured logging
    2. Initialize database and create tables
    3. Load the starter categories and seed the registry when empty
    4. Create the ticket event publisher

    SHUTDOWN:
    1. Close the webhook client
    2. Close database connections
    """
    # === STARTUP ===
    setup_logging(settings.log_level, settings.environment)
    logger.info("Starting ISP Ops Console", extra={
        "version": settings.app_version,
        "environment": settings.environment
    })

    logger.info("Initializing database")
    init_database()

    # Development convenience; production schemas come from migrations
    logger.info("Creating database tables")
    await create_tables()

    category_defaults = YAMLCategoryDefaultsProvider(settings.category_defaults_path)

    if settings.seed_categories_on_startup:
        created = await seed_categories(category_defaults)
        logger.info("Category seed checked", extra={"created_count": created})

    if settings.notification_webhook_url:
        publisher = WebhookEventPublisher(settings.notification_webhook_url)
        logger.info("Ticket events go to notification webhook")
    else:
        publisher = LoggingEventPublisher()
        logger.info("Notification webhook not configured - ticket events are logged only")

    app.state.settings = settings
    app.state.event_publisher = publisher
    app.state.category_defaults = category_defaults

    logger.info("ISP Ops Console started successfully")

    yield  # Application runs here

    # === SHUTDOWN ===
    logger.info("Shutting down ISP Ops Console")

    if isinstance(publisher, WebhookEventPublisher):
        await publisher.close()

    await close_database()

    logger.info("ISP Ops Console shutdown complete")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="ISP Ops Console API",
        description="""
        ## Ticket Lifecycle & SLA Engine

        ### Categories
        - `GET/POST /categories`, `PATCH/DELETE /categories/{id}`, `POST /categories/seed`

        ### Tickets
        - `POST /tickets` - Open a ticket (due date from the category SLA)
        - `GET /tickets` - List with filters, including `overdue=true`
        - `POST /tickets/{id}/{assign|start|resolve|verify|reopen|close|escalate}`
        - `GET/POST /tickets/{id}/comments` - Append-only comment log

        ### Workflow

        ```
        OPEN → ASSIGNED → IN_PROGRESS → RESOLVED → VERIFIED → CLOSED
                                    ↖── reopen ──┘
        ```

        Escalation is allowed from any status except CLOSED.

        ### Acting user
        Send `X-Actor-Name` and `X-Actor-Role` (admin, manager, support,
        technician, customer). Assigning, escalating, deleting and
        managing categories are checked against the role.
        """,
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    application.state.settings = settings

    # === CORS Middleware ===
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # === Custom Middleware (from shared) ===
    application.add_middleware(LoggingMiddleware)
    application.add_middleware(CorrelationIDMiddleware)
    application.add_exception_handler(ApplicationException, application_exception_handler)
    application.add_exception_handler(Exception, global_exception_handler)

    # === Include Module Routers ===
    application.include_router(categories_router)
    application.include_router(tickets_router)
    application.include_router(audit_router)

    application.add_api_route("/health", health_check, methods=["GET"], tags=["Health"])
    application.add_api_route("/", root, methods=["GET"], tags=["Root"])
    return application


# === Health Check Endpoint ===

async def health_check(request: Request):
    """
    Health check endpoint for load balancers and orchestrators.

    Reports database connectivity and the notification mode.
    """
    checks = {"database": "connected"}
    try:
        async with get_engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        checks["database"] = f"error: {type(e).__name__}"

    publisher = getattr(request.app.state, "event_publisher", None)
    checks["notifications"] = "webhook" if isinstance(publisher, WebhookEventPublisher) else "log"

    return {
        "status": "healthy" if checks["database"] == "connected" else "degraded",
        "version": settings.app_version,
        "environment": settings.environment,
        "checks": checks
    }


async def root():
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "architecture": "Clean Architecture / Modular Monolith",
        "docs": "/docs",
        "health": "/health",
        "modules": {
            "categories": {"prefix": "/categories"},
            "tickets": {"prefix": "/tickets"},
            "audit": {"prefix": "/audit-logs"}
        }
    }


app = create_app()


# === Development Entry Point ===

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ispdesk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info"
    )
