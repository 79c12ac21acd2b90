"""
Category Interfaces Layer
=========================

FastAPI controllers for the category registry.
"""

from ispdesk.categories.interfaces.controllers import get_category_service, router as categories_router

__all__ = ["categories_router", "get_category_service"]
