"""Logging setup for zkarena."""

from .core import LogConfig, LogLevel, get_logger, setup_logging, shutdown_logging
from .formatters import JSONFormatter, TextFormatter

__all__ = [
    "LogLevel",
    "LogConfig",
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "JSONFormatter",
    "TextFormatter",
]
