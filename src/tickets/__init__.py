"""
Tickets Module
==============

Bounded Context for helpdesk tickets and their comments.

Responsibilities:
- Ticket creation with a priority-based SLA due date
- Status transitions with an audit trail of system comments
- User comments, which refresh the ticket's updated_at
- Ticket deletion, cascading to comments
"""

__version__ = "1.0.0"
