"""Structured logging configuration for tryscope using structlog.

Log records go through structlog's stdlib integration, so applications that
already configure :mod:`logging` keep control of handlers. ``setup_logging``
is the explicit entry point for applications that want tryscope to install
handlers itself.
"""

import logging
import sys
from pathlib import Path
from typing import Any, cast

import structlog

from ..config import get_settings

# Library default: stay silent until the application configures handlers
logging.getLogger("tryscope").addHandler(logging.NullHandler())


def _build_processors(structured: bool, add_timestamp: bool, colorize: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]

    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    processors.extend(
        [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
    )

    if structured:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=colorize))

    return processors


def _configure_structlog(processors: list[Any]) -> None:
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    structured: bool = False,
    console: bool = True,
    add_timestamp: bool = True,
    colorize: bool = False,
) -> None:
    """Configure structured logging and install handlers.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        structured: Use JSON structured output
        console: Enable console output on stderr
        add_timestamp: Add timestamps to logs
        colorize: Colorize console output (only for non-structured)
    """
    global _logging_initialized

    _configure_structlog(_build_processors(structured, add_timestamp, colorize and console))

    handlers: list[logging.Handler] = []

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(file_handler)

    if not handlers:
        handlers.append(logging.NullHandler())

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level.upper()),
        handlers=handlers,
        force=True,
    )
    logging.getLogger("tryscope").setLevel(getattr(logging, level.upper()))

    _logging_initialized = True


# Global state for lazy initialization
_logging_initialized = False


def _ensure_logging_initialized() -> None:
    """Set up tryscope logging from settings on first use.

    The structlog processor chain is only installed when the application
    has not configured structlog itself; an application's configuration is
    never replaced here. Stdlib handlers are left to the application unless
    the settings name a log file.
    """
    global _logging_initialized

    if _logging_initialized:
        return

    try:
        settings = get_settings()
    except (ImportError, AttributeError, OSError, ValueError) as e:
        # Bad TRYSCOPE_* values must not make the package unusable
        _logging_initialized = True
        if not structlog.is_configured():
            _configure_structlog(_build_processors(False, add_timestamp=True, colorize=False))
        logging.getLogger(__name__).warning(
            "Invalid tryscope settings, using default logging: %s", e
        )
        return

    if settings.log_file is not None and not structlog.is_configured():
        try:
            setup_logging(
                level=settings.log_level,
                log_file=settings.log_file,
                structured=settings.structured_logs,
                console=False,
            )
        except OSError as e:
            logging.getLogger(__name__).warning(
                "Cannot open log file %s, using default logging: %s", settings.log_file, e
            )
        else:
            return

    if not structlog.is_configured():
        _configure_structlog(
            _build_processors(settings.structured_logs, add_timestamp=True, colorize=False)
        )
    logging.getLogger("tryscope").setLevel(getattr(logging, settings.log_level))

    _logging_initialized = True


def reset_logging() -> None:
    """Forget the lazy initialization so the next logger re-reads settings."""
    global _logging_initialized
    _logging_initialized = False
    structlog.reset_defaults()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    _ensure_logging_initialized()
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


class LogContext:
    """Context manager for temporary log context."""

    def __init__(self, logger: structlog.stdlib.BoundLogger, **kwargs) -> None:
        """Initialize with logger and context.

        Args:
            logger: Logger instance
            **kwargs: Context key-value pairs
        """
        self.logger = logger
        self.context = kwargs

    def __enter__(self) -> structlog.stdlib.BoundLogger:
        """Enter context and bind values."""
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Exit context; the bound logger goes out of scope with it."""
        pass
