"""Logging configuration and utilities for algtools-mcp."""

from __future__ import annotations

from algtools_mcp.utils.logging import (
    LOG_FORMAT,
    LoggingConfig,
    configure_third_party_loggers,
    get_logger,
    setup_logging_from_config,
)

__all__ = [
    "LOG_FORMAT",
    "LoggingConfig",
    "setup_logging_from_config",
    "get_logger",
    "configure_third_party_loggers",
]
