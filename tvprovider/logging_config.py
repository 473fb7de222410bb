"""
Structured JSON logging for provider observability.

Provides a single-line JSON formatter, root logger configuration, and a
timing context manager for storage operations such as the transient purge.
"""

import json
import logging
import sys
import time
from contextlib import contextmanager
from datetime import UTC, datetime

# Extra record attributes copied into the JSON payload when present
EXTRA_FIELDS = (
    "event",
    "operation",
    "duration_ms",
    "channels_deleted",
    "programs_deleted",
    "watermark_ms",
    "boot_epoch_ms",
    "table",
    "key",
)


# -----------------------------------------------------------------------------
# JSON Formatter
# -----------------------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Output format:
    {"timestamp": "...", "level": "INFO", "logger": "...", "message": "...", "event": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def configure_logging(json_format: bool = True, level: str = "INFO") -> None:
    """
    Configure root logging.

    Args:
        json_format: If True, use JSON format. If False, use human-readable format.
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


# -----------------------------------------------------------------------------
# Context Managers
# -----------------------------------------------------------------------------


@contextmanager
def log_operation(operation: str, logger_name: str = "tvprovider.storage"):
    """
    Context manager for storage operation instrumentation.

    Logs completion or failure with duration and re-raises any error.
    The yielded dict is merged into the completion record.

    Usage:
        with log_operation("transient_purge") as metrics:
            metrics["programs_deleted"] = store.delete_transient_programs()
    """
    start_time = time.monotonic()
    logger = logging.getLogger(logger_name)
    metrics: dict = {}

    logger.debug(
        f"{operation} started",
        extra={"event": f"{operation}_started", "operation": operation},
    )

    try:
        yield metrics
    except Exception as e:
        duration_ms = int((time.monotonic() - start_time) * 1000)
        logger.error(
            f"{operation} failed: {e}",
            extra={
                "event": f"{operation}_failed",
                "operation": operation,
                "duration_ms": duration_ms,
            },
            exc_info=True,
        )
        raise

    duration_ms = int((time.monotonic() - start_time) * 1000)
    extra = {
        "event": f"{operation}_completed",
        "operation": operation,
        "duration_ms": duration_ms,
    }
    extra.update(metrics)
    logger.info(f"{operation} completed ({duration_ms}ms)", extra=extra)
