"""
Structured logging using structlog.
One line per event, readable when a session logs every tick.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from adviewability.config import settings


def _add_log_level(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Add log level to the event dict."""
    if method_name == "warn":
        method_name = "warning"
    event_dict["level"] = method_name.upper()
    return event_dict


def _format_value(value: Any) -> str:
    """Render a context value; floats are rounded, containers truncated."""
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (list, tuple, dict)):
        str_val = str(value)
        if len(str_val) > 100:
            str_val = str_val[:100] + "..."
        return str_val
    return str(value)


def _line_renderer(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> str:
    """
    Render logs as a single line.
    Format: [LEVEL] logger: event | key=value | key2=value2
    """
    level = event_dict.pop("level", "INFO")
    event = event_dict.pop("event", "")
    name = event_dict.pop("logger_name", None)

    context_parts = [
        f"{key}={_format_value(value)}"
        for key, value in sorted(event_dict.items())
        if key not in ("timestamp", "logger")
    ]

    prefix = f"[{level}] {name}: " if name else f"[{level}] "
    if context_parts:
        return f"{prefix}{event} | {' | '.join(context_parts)}"
    return f"{prefix}{event}"


def setup_logging(log_level: str | None = None) -> None:
    """Configure structlog for the engine."""
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _line_renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance bound to the given module name."""
    return structlog.get_logger(name).bind(logger_name=name)


# Initialize logging on module import
setup_logging()
