"""Logging utilities for algtools-mcp.

Every module logs through ``get_logger(__name__)`` so that all records end up
under the ``algtools_mcp`` namespace, which is configured in one place from
the ``logging`` section of ``config.mcp.yml``.
"""

from __future__ import annotations

import logging
import logging.handlers
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Default format always includes filename and line number
LOG_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s"
)

ROOT_LOGGER_NAME = "algtools_mcp"
DEFAULT_LOG_FILE = "./logs/algtools-mcp.log"
DEFAULT_MAX_BYTES = 10485760  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_THIRD_PARTY_LOGGERS = ["httpx", "httpcore", "uvicorn.access", "mcp"]


def _to_level(value: Any, default: int) -> int:
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        level = getattr(logging, value.upper(), None)
        if isinstance(level, int):
            return level
    return default


@dataclass
class LoggingConfig:
    """Console / rotating file logging and third-party logger levels."""

    level: str = "INFO"
    file_enabled: bool = False
    file_path: str = DEFAULT_LOG_FILE
    max_bytes: int = DEFAULT_MAX_BYTES
    backup_count: int = DEFAULT_BACKUP_COUNT
    third_party_level: str = "WARNING"
    third_party_loggers: list[str] = field(
        default_factory=lambda: list(DEFAULT_THIRD_PARTY_LOGGERS)
    )

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> LoggingConfig:
        """Build from the ``logging`` mapping of a YAML config.

        Expected shape::

            level: INFO
            file: {enabled: false, path: ..., max_bytes: ..., backup_count: ...}
            third_party: {level: WARNING, loggers: [httpx, ...]}
        """
        data = data or {}
        file_data = data.get("file") or {}
        third_party = data.get("third_party") or {}

        loggers = third_party.get("loggers", DEFAULT_THIRD_PARTY_LOGGERS)
        if not isinstance(loggers, (list, tuple)):
            raise ValueError("logging.third_party.loggers must be a list")

        return cls(
            level=str(data.get("level", cls.level)).upper(),
            file_enabled=bool(file_data.get("enabled", False)),
            file_path=str(file_data.get("path", DEFAULT_LOG_FILE)),
            max_bytes=int(file_data.get("max_bytes", DEFAULT_MAX_BYTES)),
            backup_count=int(file_data.get("backup_count", DEFAULT_BACKUP_COUNT)),
            third_party_level=str(
                third_party.get("level", cls.third_party_level)
            ).upper(),
            third_party_loggers=[str(name) for name in loggers],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "level": self.level,
            "file": {
                "enabled": self.file_enabled,
                "path": self.file_path,
                "max_bytes": self.max_bytes,
                "backup_count": self.backup_count,
            },
            "third_party": {
                "level": self.third_party_level,
                "loggers": list(self.third_party_loggers),
            },
        }


def _reset_root_logger(level: int) -> logging.Logger:
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.propagate = False
    return root_logger


def setup_logging_from_config(logging_config: LoggingConfig | None = None) -> None:
    """Set up logging for the package.

    Logs go to stderr and, when ``file_enabled`` is set, to a rotating file.

    Args:
        logging_config: Logging settings. Defaults to ``LoggingConfig()``.
    """
    if logging_config is None:
        logging_config = LoggingConfig()

    log_level = _to_level(logging_config.level, logging.INFO)
    root_logger = _reset_root_logger(log_level)
    formatter = logging.Formatter(LOG_FORMAT)

    # stdout is left alone so stdio-based MCP clients never see log lines
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if logging_config.file_enabled:
        log_path = Path(logging_config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=logging_config.max_bytes,
            backupCount=logging_config.backup_count,
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    configure_third_party_loggers(
        _to_level(logging_config.third_party_level, logging.WARNING),
        logging_config.third_party_loggers,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a specific module.

    Args:
        name: Name of the logger (typically __name__)

    Returns:
        Logger living under the ``algtools_mcp`` namespace
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_third_party_loggers(
    level: int = logging.WARNING, loggers: list[str] | tuple[str, ...] | None = None
) -> None:
    """Quiet chatty third-party libraries.

    Args:
        level: Logging level for third-party loggers
        loggers: Logger names to adjust. Defaults to the HTTP/server stack.
    """
    for logger_name in loggers or DEFAULT_THIRD_PARTY_LOGGERS:
        logging.getLogger(logger_name).setLevel(level)
