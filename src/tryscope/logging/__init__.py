"""Logging module for tryscope."""

from .logger import LogContext, get_logger, reset_logging, setup_logging

__all__ = [
    "setup_logging",
    "get_logger",
    "reset_logging",
    "LogContext",
]
