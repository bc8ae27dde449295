"""Centralised logging setup for the brewdesk application."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any

import structlog
from structlog.types import FilteringBoundLogger

from brewdesk.core.config import Brewdesk

_CONFIGURED = False
_HANDLERS: list[logging.Handler] = []


def sanitise_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Drop None values so downstream processors never see them.

    Args:
        logger: The logger instance.
        method_name: The name of the method called on the logger.
        event_dict: The event dictionary to sanitise.

    Returns:
        The sanitised event dictionary.
    """
    return {k: v for k, v in event_dict.items() if v is not None}


def configure_logging(
    level: str | None = None,
    log_file: Path | None = None,
    enable_console: bool = False,
    force: bool = False,
) -> None:
    """Configure logging for the brewdesk application.

    Only the first call has an effect unless ``force`` is set, which replaces
    the handlers installed by the earlier call.

    Args:
        level: The logging level as a string (e.g., "DEBUG", "INFO").
            Defaults to the configured ``BREWDESK_LOG_LEVEL``.
        log_file: Optional path to a log file for file logging.
        enable_console: Whether to enable console logging.
        force: Reconfigure even if logging was already configured.
    """
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    for handler in _HANDLERS:
        logging.root.removeHandler(handler)
        handler.close()
    _HANDLERS.clear()

    level_no = getattr(logging, (level or Brewdesk.log_level).upper(), logging.INFO)

    if log_file is None:
        Brewdesk.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = Brewdesk.log_dir / "backend.log"

    file_handler = RotatingFileHandler(log_file, maxBytes=2_000_000, backupCount=2)
    file_handler.setLevel(level_no)

    shared_processors = [
        sanitise_context,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level_no)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logging.root.addHandler(console_handler)
        _HANDLERS.append(console_handler)

        renderers = [
            structlog.processors.ExceptionRenderer(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(level_no),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.root.setLevel(level_no)
    logging.root.addHandler(file_handler)
    _HANDLERS.append(file_handler)

    _CONFIGURED = True


def get_logger(name: str = "brewdesk") -> FilteringBoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Optional name for the logger, typically the module name.

    Returns:
        A structlog FilteringBoundLogger instance.

    Usage:
        log = get_logger(__name__)
        log.info("untap_start", tap="homebrew/cask", duration_ms=123)

    Standard context keys:
        - tap (str): Name of the tap being operated on
        - package (str): Name of the package
        - kind (str): "formula" or "cask"
        - duration_ms (int): Operation duration in milliseconds
        - error (str): Error message if applicable
    """
    if not _CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)
