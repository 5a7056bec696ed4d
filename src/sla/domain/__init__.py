"""
SLA Domain Layer
================

Domain layer for SLA policy.

Contains:
- Value Objects: SLASnapshot
- Domain Services: Stateless business logic (SLACalculator)

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from src.sla.domain.value_objects import SLACalculator, SLASnapshot

__all__ = [
    "SLACalculator",
    "SLASnapshot",
]
