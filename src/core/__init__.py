"""Core module exports."""
from __future__ import annotations

from core.config import (
    DatabaseConfig,
    Settings,
    get_settings,
    load_database_config,
    reload_settings,
)
from core.db import Base, build_engine, check_connection, provisioning_engine
from core.exceptions import (
    # Base
    ProvisioningError,
    # Configuration
    ConfigurationError,
    MissingConfigurationError,
    # Database
    DatabaseError,
    ConnectionError,
    ConnectionExhaustedError,
    SQLExecutionError,
)
from core.logging_config import (
    setup_logging,
    get_logger,
    JSONFormatter,
)
from core.models import (
    Timeline,
    Meeting,
    MeetingAttendee,
    Communication,
    CommunicationResponse,
)

__all__ = [
    # Config
    "Settings",
    "DatabaseConfig",
    "get_settings",
    "reload_settings",
    "load_database_config",
    # Database
    "Base",
    "build_engine",
    "check_connection",
    "provisioning_engine",
    # Models
    "Timeline",
    "Meeting",
    "MeetingAttendee",
    "Communication",
    "CommunicationResponse",
    # Exceptions
    "ProvisioningError",
    "ConfigurationError",
    "MissingConfigurationError",
    "DatabaseError",
    "ConnectionError",
    "ConnectionExhaustedError",
    "SQLExecutionError",
    # Logging
    "setup_logging",
    "get_logger",
    "JSONFormatter",
]
