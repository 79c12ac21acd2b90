"""
Ticket Interfaces Layer
=======================

FastAPI controllers for the ticket lifecycle and comment log.
"""

from ispdesk.tickets.interfaces.controllers import router as tickets_router

__all__ = ["tickets_router"]
