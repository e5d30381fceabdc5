"""Structured logging built on Loguru.

Every service built on the bootstrap layer logs through Loguru. This module
configures it once per process:

- **console**: human-readable with inline context (development)
- **json**: one JSON object per line (containers and log collectors)

Standard library loggers (uvicorn, SQLAlchemy, asyncio) are intercepted and
forwarded to Loguru so every record shares the same format. An optional
error reporting sink receives serialized records at or above a configured
level for alerting.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Final, Protocol, cast

from loguru import logger

from src.core.constants import REDACTED


class _LoggingState:
    """Simple state holder to track if logging has been configured."""

    def __init__(self) -> None:
        self.configured = False
        self.error_sink_id: int | None = None


_state = _LoggingState()


class LogConfigProtocol(Protocol):
    """Protocol for log configuration objects."""

    @property
    def log_level(self) -> str:
        """Logging level."""
        ...

    @property
    def log_formatter_type(self) -> str | None:
        """Log formatter type."""
        ...


class ErrorReportingProtocol(Protocol):
    """Protocol for error reporting configuration objects."""

    @property
    def level(self) -> str:
        """Minimum forwarded level."""
        ...

    @property
    def destination(self) -> str | None:
        """Sink destination."""
        ...


class SettingsProtocol(Protocol):
    """Protocol for settings objects that setup_logging can accept."""

    @property
    def app_name(self) -> str:
        """Service name."""
        ...

    @property
    def debug(self) -> bool:
        """Debug mode flag."""
        ...

    @property
    def log_config(self) -> LogConfigProtocol:
        """Log configuration."""
        ...

    @property
    def error_reporting(self) -> ErrorReportingProtocol:
        """Error reporting configuration."""
        ...


MAX_FIELD_VALUE_LENGTH: Final[int] = 100
SENSITIVE_FIELDS: Final[frozenset[str]] = frozenset(
    {"password", "token", "secret", "authorization", "credentials"}
)
UVICORN_LOGGERS: Final[tuple[str, ...]] = ("uvicorn", "uvicorn.error", "uvicorn.access")


def _escape(value: object) -> str:
    # Loguru treats the returned format as a template
    return str(value).replace("{", "{{").replace("}", "}}")


def _format_extra_field(key: str, value: object) -> str:
    """Format an extra field for display, redacting sensitive ones."""
    str_value = str(value)
    if key.lower() in SENSITIVE_FIELDS:
        str_value = REDACTED
    elif len(str_value) > MAX_FIELD_VALUE_LENGTH:
        str_value = str_value[: MAX_FIELD_VALUE_LENGTH - 3] + "..."
    return f"{_escape(key)}={_escape(str_value)}"


def format_console_with_context(record: dict[str, Any]) -> str:
    """Format log record for console with all context fields visible.

    Args:
        record: Loguru record to format.

    Returns:
        str: Loguru format template for the record.
    """
    parts = [
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green>",
        "<level>{level: <8}</level>",
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan>",
    ]

    extra = record.get("extra", {})
    context_parts = [
        f"<dim>{_format_extra_field(key, value)}</dim>"
        for key, value in extra.items()
        if not key.startswith("_") and value is not None
    ]
    if context_parts:
        parts.append(" ".join(f"[{part}]" for part in context_parts))

    parts.append("{message}")
    template = " | ".join(parts)
    if record.get("exception"):
        template += "\n{exception}"
    return template + "\n"


def serialize_for_json(record: dict[str, Any]) -> str:
    """Format log record as one JSON object.

    Args:
        record: Loguru record to format.

    Returns:
        str: JSON-formatted log entry with newline.
    """
    log_entry: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "logger": record["name"],
        "function": record["function"],
        "module": record["module"],
        "line": record["line"],
    }

    if extra := record.get("extra", {}):
        filtered_extra = {
            k: (REDACTED if k.lower() in SENSITIVE_FIELDS else v)
            for k, v in extra.items()
            if not k.startswith("_")
        }
        log_entry.update(filtered_extra)

    if exc := record.get("exception"):
        log_entry["exception"] = {
            "type": exc.type.__name__ if exc.type else None,
            "value": str(exc.value) if exc.value else None,
        }

    return json.dumps(log_entry, default=str) + "\n"


class InterceptHandler(logging.Handler):
    """Intercept standard logging and redirect to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        """Forward log record to Loguru.

        Args:
            record: Standard library LogRecord to forward.
        """
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def _structured_sink(message: object) -> None:
    """Sink writing JSON records to stdout."""
    record = getattr(message, "record", None)
    if record is not None:
        sys.stdout.write(serialize_for_json(record))
        sys.stdout.flush()


def add_error_reporting_sink(level: str, destination: str) -> int:
    """Forward records at or above ``level`` to ``destination``.

    Records are written serialized so alerting pipelines can consume them.

    Args:
        level: Minimum level to forward.
        destination: File path receiving the records.

    Returns:
        int: The Loguru handler id of the sink.
    """
    logger.info(
        "Error reporting will be used with a level '{}' and a destination '{}'.",
        level,
        destination,
    )
    return logger.add(
        destination,
        level=level,
        serialize=True,
        enqueue=True,
        backtrace=False,
        diagnose=False,
    )


def setup_logging(settings: SettingsProtocol) -> None:
    """Configure Loguru for the process.

    Args:
        settings: Service settings containing log configuration.

    Note:
        Only the first call has an effect.
    """
    if _state.configured:
        return

    logger.remove()
    formatter_type = settings.log_config.log_formatter_type or "console"
    level = settings.log_config.log_level

    if formatter_type == "json":
        logger.add(
            _structured_sink,
            level=level,
            enqueue=True,
            diagnose=False,
            backtrace=False,
        )
    else:
        logger.add(
            sys.stdout,
            format=cast("Any", format_console_with_context),
            level=level,
            enqueue=True,
            colorize=True,
            diagnose=settings.debug,
            backtrace=settings.debug,
        )

    bind_context(service=settings.app_name)

    # Route standard library logging (uvicorn, SQLAlchemy) through Loguru
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for logger_name in UVICORN_LOGGERS:
        std_logger = logging.getLogger(logger_name)
        std_logger.handlers = [InterceptHandler()]
        std_logger.propagate = False

    reporting = settings.error_reporting
    if reporting.destination:
        _state.error_sink_id = add_error_reporting_sink(
            reporting.level, reporting.destination
        )

    logger.info(
        "Logging configured with {} formatter",
        formatter_type,
        log_level=level,
    )
    _state.configured = True


def bind_context(**kwargs: object) -> None:
    """Bind context variables to every subsequent log record.

    For request-scoped context, use logger.contextualize() instead.

    Args:
        **kwargs: Context variables to bind.
    """
    logger.configure(extra=kwargs)
