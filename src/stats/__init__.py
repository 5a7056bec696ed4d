"""
Stats Module
============

Bounded Context for dashboard figures.

Responsibilities:
- Ticket counts per workflow status
- Debug view of the raw ticket and comment tables
"""

__version__ = "1.0.0"
