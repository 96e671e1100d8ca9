# src/shiptivity/core/__init__.py
"""Core infrastructure: Store, Validation, Configuration, Logging."""

from shiptivity.core.config import (
    DatabaseSettings,
    LoggingSettings,
    ServerSettings,
    ShiptivitySettings,
    load_settings,
)
from shiptivity.core.logging import configure_logging, get_logger
from shiptivity.core.store import BoardDB, BoardQueries, UnitOfWork
from shiptivity.core.validation import (
    validate_identifier,
    validate_lane,
    validate_move_request,
    validate_priority,
)

__all__ = [
    "BoardDB",
    "BoardQueries",
    "DatabaseSettings",
    "LoggingSettings",
    "ServerSettings",
    "ShiptivitySettings",
    "UnitOfWork",
    "configure_logging",
    "get_logger",
    "load_settings",
    "validate_identifier",
    "validate_lane",
    "validate_move_request",
    "validate_priority",
]
