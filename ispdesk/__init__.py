"""
ISP Ops Console
===============

Ticket lifecycle and SLA engine for an ISP operations console.
"""

__version__ = "1.0.0"
