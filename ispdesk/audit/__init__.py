"""
Audit Trail Module
==================

Bounded Context for the action audit trail: who created, changed or
deleted which ticket or category, and when.

Escalation rationale is NOT recorded here; it lives in the ticket's
comment log.
"""

__version__ = "1.0.0"
