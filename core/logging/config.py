"""Structlog configuration: JSON log file plus colored console output."""

import logging
import logging.handlers
import os
from pathlib import Path

import structlog

from core.logging.processors import (
    add_process_info,
    add_request_context,
    add_service_context,
    console_renderer,
)

DEFAULT_LOG_FILE = "./logs/notification-engine.log"
MAX_LOG_FILE_BYTES = 100 * 1024 * 1024
LOG_BACKUP_COUNT = 240

# Shared by structlog events and records from stdlib loggers (Django, rq)
PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    add_request_context,
]


def _formatter(renderer, with_metadata: bool) -> logging.Formatter:
    chain = list(PRE_CHAIN)
    if with_metadata:
        chain += [add_service_context, add_process_info]
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer, foreign_pre_chain=chain
    )


def setup_logging() -> None:
    """Configure structlog for the engine processes (web and rq workers).

    File output is JSON with request, caller, service and process metadata,
    rotated at 100MB. Console output is colored and always enabled.

    Environment Variables:
    - LOG_FILE_PATH: Path to log file (default: ./logs/notification-engine.log)
    - LOG_LEVEL: Logging level (default: INFO)
    - SERVICE_NAME: Service name for metadata (default: notification-engine)
    - ENVIRONMENT: Deployment environment (default: development)
    """
    log_file_path = os.getenv("LOG_FILE_PATH", DEFAULT_LOG_FILE)
    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    Path(log_file_path).parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.handlers.RotatingFileHandler(
        filename=log_file_path,
        maxBytes=MAX_LOG_FILE_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(
        _formatter(structlog.processors.JSONRenderer(), with_metadata=True)
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(_formatter(console_renderer, with_metadata=False))

    structlog.configure(
        processors=[
            *PRE_CHAIN,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            add_service_context,
            add_process_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    for handler in (file_handler, console_handler):
        handler.setLevel(log_level)
        root_logger.addHandler(handler)

    structlog.get_logger(__name__).info(
        "logging_configured",
        log_file=log_file_path,
        log_level=logging.getLevelName(log_level),
    )
