"""Exceptions and the clock, shared by every module."""

from src.core.clock import Clock, SystemClock
from src.core.exceptions import (
    ApplicationException,
    DomainException,
    RepositoryException,
    ValidationException,
    ResourceNotFoundException,
    StorageUnavailableException,
)

__all__ = [
    "Clock",
    "SystemClock",
    "ApplicationException",
    "DomainException",
    "RepositoryException",
    "ValidationException",
    "ResourceNotFoundException",
    "StorageUnavailableException",
]
