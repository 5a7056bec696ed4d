"""
Core Exceptions
================

Errors raised by the services and repositories of the helpdesk.

Services raise them and never catch them; the HTTP layer maps each class to
a status code (see ``src.shared.api.middleware``):

    ApplicationException
    ├── DomainException
    │   └── ValidationException          400
    ├── ResourceNotFoundException        404
    └── RepositoryException
        └── StorageUnavailableException  500
"""

from typing import Optional, Union


class ApplicationException(Exception):
    """Root of every helpdesk error; carries a message and a details dict."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """A ticket rule was violated."""


class ValidationException(DomainException):
    """Required input missing, or a value outside an enforced set."""


class ResourceNotFoundException(ApplicationException):
    """No ticket (or other resource) with the given id."""

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[Union[int, str]] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        if resource_id is None:
            message = f"{resource_type} not found"
        else:
            message = f"{resource_type} with id '{resource_id}' not found"
        super().__init__(message, details)


class RepositoryException(ApplicationException):
    """Data access failed."""


class StorageUnavailableException(RepositoryException):
    """
    The database could not be reached or failed mid-operation.

    Raised after the unit of work has been abandoned; nothing from the
    failed operation is stored. Never retried internally.
    """

    def __init__(self, operation: str, reason: str, details: Optional[dict] = None):
        self.operation = operation
        self.reason = reason
        super().__init__(
            f"Storage unavailable during {operation}",
            details or {"operation": operation}
        )
