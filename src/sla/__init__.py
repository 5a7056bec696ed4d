"""
SLA Policy Module
=================

Bounded Context for service level agreement rules.

Responsibilities:
- Map a ticket priority to its resolution deadline
- Derive the ok / warning / breach state of a deadline at read time
- Render the human-readable remaining-time text

Persistence and HTTP live in the tickets module; this module is pure.
"""

__version__ = "1.0.0"
