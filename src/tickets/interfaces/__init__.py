"""
Ticket Interfaces Layer
=======================

Interface adapters (controllers) for the ticket module.

This is the outermost layer - handles HTTP requests/responses and
delegates to application services.
"""

from src.tickets.interfaces.controllers import tickets_router

__all__ = ["tickets_router"]
