"""
Structured Logging for gangsched

This module configures structlog on top of the standard library logger and
tags every record with the id of the scheduling cycle it was emitted from.
"""

import json
import logging
import sys
import threading
import uuid
from datetime import datetime
from functools import wraps
from typing import Optional

import structlog

from .config import LoggingConfig

# Thread-local storage for the current scheduling cycle
_cycle_context = threading.local()


class CycleContext:
    """Manages the correlation id of the scheduling cycle on this thread."""

    @staticmethod
    def get_cycle_id() -> Optional[str]:
        """Get the current cycle id, if one is set."""
        return getattr(_cycle_context, "cycle_id", None)

    @staticmethod
    def set_cycle_id(cycle_id: str):
        """Set the cycle id for the current thread."""
        _cycle_context.cycle_id = cycle_id

    @staticmethod
    def clear_cycle_id():
        """Clear the cycle id for the current thread."""
        if hasattr(_cycle_context, "cycle_id"):
            delattr(_cycle_context, "cycle_id")

    @staticmethod
    def new_cycle_id() -> str:
        return str(uuid.uuid4())[:8]


def with_cycle_id(cycle_id: str = None):
    """Decorator to run a function inside a scheduling cycle context."""

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            previous = CycleContext.get_cycle_id()
            CycleContext.set_cycle_id(cycle_id or CycleContext.new_cycle_id())
            try:
                return func(*args, **kwargs)
            finally:
                if previous:
                    CycleContext.set_cycle_id(previous)
                else:
                    CycleContext.clear_cycle_id()

        return wrapper

    return decorator


class JSONFormatter(logging.Formatter):
    """JSON formatter for records emitted through the stdlib handler."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.utcnow().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "cycle_id": CycleContext.get_cycle_id(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class ConsoleFormatter(logging.Formatter):
    """Console formatter with level colors and the cycle id."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
        "GRAY": "\033[90m",
    }

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.COLORS.get(record.levelname, "")
        reset_color = self.COLORS["RESET"]
        gray_color = self.COLORS["GRAY"]

        timestamp = datetime.utcnow().strftime("%H:%M:%S.%f")[:-3]
        cycle_id = CycleContext.get_cycle_id() or "-"

        message = record.getMessage()
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return (
            f"{gray_color}{timestamp}{reset_color} "
            f"{gray_color}[{cycle_id:8}]{reset_color} "
            f"{level_color}{record.levelname:8}{reset_color} "
            f"{record.name:24} "
            f"{message}"
        )


def setup_logging(config: Optional[LoggingConfig] = None, configure_structlog: bool = True):
    """Setup structured logging for gangsched.

    The level, logger name and cycle id are printed by the handler's
    formatter, so the structlog chain only renders the event and its fields.
    ``configure_structlog=False`` leaves a host's structlog setup in place and
    only installs the handler on the ``gangsched`` logger.
    """
    if config is None:
        config = LoggingConfig.from_env()

    if configure_structlog:
        _configure_structlog(config)

    package_logger = logging.getLogger("gangsched")
    package_logger.setLevel(getattr(logging, config.log_level))
    package_logger.propagate = False

    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    if config.log_format == "json":
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(ConsoleFormatter())
    package_logger.addHandler(console_handler)

    package_logger.debug(
        f"Logging initialized - log_level={config.log_level}, log_format={config.log_format}"
    )


def _configure_structlog(config: LoggingConfig):
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if config.log_format == "json"
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


def _init_logging():
    """Import-time setup; a structlog configuration made by the host wins."""
    setup_logging(configure_structlog=not structlog.is_configured())


# Initialize logging on module import
_init_logging()
