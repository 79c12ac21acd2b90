"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (Categories,
Tickets and Audit).

Architecture Pattern: Modular Monolith
- Each module (categories, tickets, audit) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket lifecycle or category rules to the shared kernel.
"""

__version__ = "1.0.0"
