"""Log formatters.

``JSONFormatter`` emits one JSON object per record; ``TextFormatter`` emits a
single human-readable line. Both pick up a ``circuit_id`` passed through the
``extra`` mapping of a logging call.
"""

import json
import logging
import time
from typing import Any, Dict, Optional


class JSONFormatter(logging.Formatter):
    """JSON log formatter."""

    def __init__(
        self,
        include_timestamp: bool = True,
        include_logger: bool = True,
        include_exception: bool = True,
        include_thread: bool = False,
        timestamp_format: str = "iso",
        indent: Optional[int] = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_logger = include_logger
        self.include_exception = include_exception
        self.include_thread = include_thread
        self.timestamp_format = timestamp_format
        self.indent = indent

    def format(self, record: logging.LogRecord) -> str:
        data: Dict[str, Any] = {}

        if self.include_timestamp:
            data["timestamp"] = self._format_timestamp(record.created)

        data["level"] = record.levelname.lower()

        if self.include_logger:
            data["logger"] = record.name

        circuit_id = getattr(record, "circuit_id", None)
        if circuit_id:
            data["circuit_id"] = circuit_id

        if self.include_exception and record.exc_info and record.exc_info[1] is not None:
            data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        if self.include_thread:
            data["thread_id"] = record.thread

        data["message"] = record.getMessage()

        return json.dumps(data, indent=self.indent, default=str)

    def _format_timestamp(self, timestamp: float) -> str:
        if self.timestamp_format == "iso":
            return (
                time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(timestamp))
                + f".{int((timestamp % 1) * 1000000):06d}Z"
            )
        elif self.timestamp_format == "unix":
            return str(timestamp)
        return time.strftime(self.timestamp_format, time.gmtime(timestamp))


class TextFormatter(logging.Formatter):
    """Plain text formatter: ``timestamp [level] logger: message``."""

    def __init__(self, timestamp_format: str = "%Y-%m-%d %H:%M:%S"):
        super().__init__()
        self.timestamp_format = timestamp_format

    def format(self, record: logging.LogRecord) -> str:
        timestamp = time.strftime(self.timestamp_format, time.localtime(record.created))
        line = f"{timestamp} [{record.levelname}] {record.name}: {record.getMessage()}"

        circuit_id = getattr(record, "circuit_id", None)
        if circuit_id:
            line += f" (circuit={circuit_id})"

        if record.exc_info and record.exc_info[1] is not None:
            line += "\n" + self.formatException(record.exc_info)
        return line
