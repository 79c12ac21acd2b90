"""
Category Registry Module
========================

Bounded Context for the configurable set of ticket categories.

Responsibilities:
- Create, edit and retire categories (code fixed at creation)
- Hold the SLA hours each category grants a ticket
- Seed the starter set into an empty registry
"""

__version__ = "1.0.0"
