"""
Shared Kernel Module
====================

Infrastructure and API plumbing used by every bounded context
(Tickets, SLA, Stats).

Architecture Pattern: Modular Monolith
- Each module (tickets, sla, stats) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket or SLA business rules to the shared kernel.
"""

__version__ = "1.0.0"
