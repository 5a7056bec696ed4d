"""
Configuration Module
====================

Helpdesk settings (environment variables and `.env`) and the fixed
value sets for priority, status, SLA state and comment author.
"""

from enum import Enum
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings. Every field maps to an upper-case environment variable,
    e.g. `DATABASE_URL`, `API_PREFIX`, `ENFORCE_ENUMERATIONS`.
    """

    # ========== Application ==========
    app_name: str = Field(default="helpdesk-service", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=3000, description="Server port", ge=1, le=65535)
    api_prefix: str = Field(default="/api", description="Prefix for all API routes")

    # ========== Database ==========
    database_url: str = Field(
        default="sqlite+aiosqlite:///./helpdesk.db",
        description="SQLite (aiosqlite) or PostgreSQL (asyncpg) connection URL"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)
    db_connect_timeout: float = Field(
        default=5.0,
        description="Seconds to wait for a database connection before failing",
        gt=0,
        le=60
    )

    # ========== Ticket Rules ==========
    enforce_enumerations: bool = Field(
        default=True,
        description="Reject priorities and statuses outside the fixed sets"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        """Normalise to '' or '/segment' without a trailing slash."""
        v = v.strip().rstrip("/")
        if v and not v.startswith("/"):
            v = "/" + v
        return v


@lru_cache()
def get_settings() -> Settings:
    """Settings from the process environment, read once."""
    return Settings()


# ========== Constants ==========

class Priority(str, Enum):
    """Ticket priority tiers. Each tier maps to a fixed SLA window."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class TicketStatus(str, Enum):
    """Ticket workflow statuses."""
    OPEN = "Open"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    CLOSED = "Closed"


class SLAState(str, Enum):
    """Read-time SLA states."""
    OK = "ok"
    WARNING = "warning"
    BREACH = "breach"


class UserType(str, Enum):
    """Author tag of comments the service writes itself. Callers supply any other tag."""
    SYSTEM = "system"


# ========== Lists for validation ==========

VALID_PRIORITIES = [p.value for p in Priority]
VALID_STATUSES = [s.value for s in TicketStatus]
