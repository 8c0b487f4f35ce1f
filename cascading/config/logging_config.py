"""
Logging configuration for the cascading engine using structlog.

Configures structlog with:
- Pretty console output (human-readable, colored)
- Optional JSON file output (machine-readable, structured)
- Daily log file rotation (UTC) for the JSON file
"""

import logging
import sys
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional, Union

import structlog


def setup_logging(level: str = "INFO", log_dir: Optional[Union[str, Path]] = None, colors: bool = True):
    """
    Configure structlog with pretty console and optional JSON file output.

    This should be called once at application startup (e.g., in the CLI).
    After calling this, modules can use: logger = structlog.get_logger(__name__)

    Args:
        level: Console log level name
        log_dir: Directory for cascading.jsonl; no file logging when None/empty
        colors: Colorize console output
    """
    # Shared processors for both console and file
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Configure structlog to use stdlib integration
    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    # Console handler with pretty output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.dev.ConsoleRenderer(colors=colors),
        foreign_pre_chain=shared_processors,
    )
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if not log_dir:
        return

    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # File handler with JSON output and daily rotation (UTC)
    file_handler = TimedRotatingFileHandler(
        filename=logs_dir / "cascading.jsonl",
        when="midnight",
        interval=1,
        backupCount=30,  # Keep 30 days of logs
        encoding="utf-8",
        utc=True,
    )
    file_handler.suffix = "%Y-%m-%d.jsonl"
    file_handler.setLevel(logging.DEBUG)
    file_formatter = structlog.stdlib.ProcessorFormatter(
        processor=structlog.processors.JSONRenderer(),
        foreign_pre_chain=shared_processors,
    )
    file_handler.setFormatter(file_formatter)
    root_logger.addHandler(file_handler)
