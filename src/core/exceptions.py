"""Custom exceptions for the timeline database provisioner."""
from __future__ import annotations

from typing import List, Optional, Tuple


def describe_sql_error(exc: BaseException) -> Tuple[Optional[str], str]:
    """
    Extract the driver's native error code and message from a SQLAlchemy error.

    Returns:
        Tuple of (code, message). The code is the PostgreSQL SQLSTATE when
        psycopg2 provides one, otherwise SQLAlchemy's own error code.
    """
    orig = getattr(exc, "orig", None)
    for attr in ("pgcode", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return str(code), str(orig).strip()
    message = str(orig).strip() if orig is not None else str(exc)
    return getattr(exc, "code", None), message


class ProvisioningError(Exception):
    """Base exception for all provisioning errors."""

    pass


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(ProvisioningError):
    """Raised when required configuration is missing or invalid."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when one or more required environment variables are not set."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(
            f"Missing required environment variables: {', '.join(self.missing)}"
        )


# =============================================================================
# Database Errors
# =============================================================================


class DatabaseError(ProvisioningError):
    """Base exception for database-related errors."""

    pass


class ConnectionError(DatabaseError):
    """Raised when database connection fails."""

    pass


class ConnectionExhaustedError(ConnectionError):
    """Raised when every connection attempt allowed by the retry policy failed."""

    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        self.code: Optional[str] = None
        self.message: Optional[str] = None
        if last_error is not None:
            self.code, self.message = describe_sql_error(last_error)
        super().__init__(
            f"Failed to establish database connection after {attempts} attempts"
            + (f": {last_error}" if last_error is not None else "")
        )


class SQLExecutionError(DatabaseError):
    """Raised when a schema or seed batch fails. Never retried."""

    def __init__(self, stage: str, code: Optional[str], message: str):
        self.stage = stage
        self.code = code
        self.message = message
        super().__init__(f"{stage} failed [{code or 'unknown'}]: {message}")


__all__ = [
    "ProvisioningError",
    "ConfigurationError",
    "MissingConfigurationError",
    "DatabaseError",
    "ConnectionError",
    "ConnectionExhaustedError",
    "SQLExecutionError",
    "describe_sql_error",
]
