"""Logging configuration for zkarena.

Every module logs through ``logging.getLogger(__name__)``; this module only
decides where the ``zkarena`` logger hierarchy writes and in which format.
"""

import logging
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..errors import ConfigurationError
from .formatters import JSONFormatter, TextFormatter


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_stdlib(self) -> int:
        return getattr(logging, self.name)


@dataclass
class LogConfig:
    """Log configuration."""

    name: str = "zkarena"
    level: LogLevel = LogLevel.INFO
    format_type: str = "text"
    handlers: List[str] = field(default_factory=lambda: ["console"])
    log_file: Optional[str] = None
    propagate: bool = False

    def validate(self) -> None:
        if self.format_type not in ("text", "json"):
            raise ConfigurationError(
                f"Unknown log format: {self.format_type}", config_key="format_type"
            )
        for handler in self.handlers:
            if handler not in ("console", "file"):
                raise ConfigurationError(f"Unknown log handler: {handler}", config_key="handlers")
        if "file" in self.handlers and not self.log_file:
            raise ConfigurationError("file handler requires log_file", config_key="log_file")


_lock = threading.RLock()
_installed: List[logging.Handler] = []
_root_name = "zkarena"


def _make_formatter(config: LogConfig) -> logging.Formatter:
    if config.format_type == "json":
        return JSONFormatter()
    return TextFormatter()


def setup_logging(config: Optional[LogConfig] = None) -> logging.Logger:
    """Install handlers on the ``config.name`` logger, replacing earlier ones."""
    global _root_name
    config = config or LogConfig()
    config.validate()

    with _lock:
        shutdown_logging()
        logger = logging.getLogger(config.name)
        logger.setLevel(config.level.to_stdlib())
        logger.propagate = config.propagate

        formatter = _make_formatter(config)
        for name in config.handlers:
            if name == "console":
                handler: logging.Handler = logging.StreamHandler(sys.stderr)
            else:
                handler = logging.FileHandler(config.log_file, encoding="utf-8")
            handler.setFormatter(formatter)
            logger.addHandler(handler)
            _installed.append(handler)

        _root_name = config.name
        return logger


def get_logger(name: str = "zkarena") -> logging.Logger:
    """Get a logger inside the configured hierarchy."""
    if name == _root_name or name.startswith(_root_name + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_root_name}.{name}")


def shutdown_logging() -> None:
    """Detach and close the handlers installed by :func:`setup_logging`."""
    with _lock:
        logger = logging.getLogger(_root_name)
        while _installed:
            handler = _installed.pop()
            logger.removeHandler(handler)
            handler.close()
