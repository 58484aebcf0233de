"""Python logging handler capturing collector diagnostics.

This adapter bridges Python's standard library logging module to the
LogStoragePort, so skipped namespaces, failed tag lookups and malformed
labels of an invocation can be inspected as structured entries.
"""

import logging
import traceback

from cwmetrics.core.models import LogEntry
from cwmetrics.core.ports import LogStoragePort

# Standard LogRecord attributes that should not be treated as extra fields
_STANDARD_LOGRECORD_ATTRS = frozenset(
    {
        "args",
        "asctime",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)


class DiagnosticsHandler(logging.Handler):
    """Logging handler that writes log records to a LogStoragePort.

    Example:
        ```python
        storage = InMemoryLogStorage()
        handler = DiagnosticsHandler(storage, level=logging.INFO)
        logging.getLogger("cwmetrics").addHandler(handler)
        ```
    """

    def __init__(self, storage: LogStoragePort, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._storage = storage

    def emit(self, record: logging.LogRecord) -> None:
        """Emit a log record to the storage backend."""
        attributes: dict[str, str | int | float | bool] = {"logger": record.name}

        # Extra attributes passed via logging call, e.g. region and namespace
        for key, value in record.__dict__.items():
            if key not in _STANDARD_LOGRECORD_ATTRS and isinstance(
                value, (str, int, float, bool)
            ):
                attributes[key] = value

        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            if exc_type is not None:
                attributes["exc_type"] = exc_type.__name__
            if exc_value is not None:
                attributes["exc_message"] = str(exc_value)
            if exc_tb is not None:
                attributes["exc_traceback"] = "".join(
                    traceback.format_exception(exc_type, exc_value, exc_tb)
                )

        self._storage.write(
            LogEntry(
                timestamp=record.created,
                level=record.levelname,
                message=record.getMessage(),
                attributes=attributes,
            )
        )
