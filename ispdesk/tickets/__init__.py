"""
Ticket Lifecycle Module
=======================

Bounded Context for support tickets.

Responsibilities:
- Derive due dates from the category SLA
- Move tickets through the OPEN → CLOSED workflow
- Escalate tickets out of band with an audit comment
- Keep the append-only comment log of each ticket
"""

__version__ = "1.0.0"
