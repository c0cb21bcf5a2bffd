"""
Structured logging configuration for BibShelf.

Provides JSON-formatted logs for production observability and
human-readable logs for local development.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

from rich.console import Console
from rich.logging import RichHandler

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None)).keys()
) | {"message", "asctime"}


def setup_logging(
    service_name: str,
    log_level: str = "INFO",
    log_format: str = "text",
    log_output: str = "stdout",
    log_dir: str = "logs",
) -> logging.Logger:
    """
    Configure structured logging for a service.

    Handlers are installed on the root logger, so module loggers created with
    ``get_logger(__name__)`` share the service's output without duplication.

    Args:
        service_name: Name of the service (e.g., 'api', 'ingestion')
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: 'json' for production, 'text' for development
        log_output: 'stdout', 'stderr', 'file', or 'both'
        log_dir: Directory for the log file when writing to a file

    Returns:
        Configured logger for the service
    """
    level = getattr(logging, log_level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()  # Remove existing handlers

    if log_output in ["stdout", "stderr", "both"]:
        use_stderr = log_output == "stderr"
        if log_format == "json":
            stream = sys.stderr if use_stderr else sys.stdout
            handler: logging.Handler = logging.StreamHandler(stream)
            handler.setFormatter(JSONFormatter(service_name=service_name))
        else:
            # Rich handler for readable local dev logs
            console = Console(stderr=use_stderr)
            handler = RichHandler(
                console=console,
                rich_tracebacks=True,
                show_time=True,
                show_path=True,
            )
            handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)

    if log_output in ["file", "both"]:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path / f"{service_name}.log", encoding="utf-8")
        file_handler.setFormatter(JSONFormatter(service_name=service_name))
        root.addHandler(file_handler)

    # Suppress noisy third-party loggers
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logger = logging.getLogger(service_name)
    logger.setLevel(level)
    return logger


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Converts log records to one JSON object per line, including any fields
    passed through ``extra=``.
    """

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON string."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": self.service_name,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS and not key.startswith("_"):
                log_data[key] = value

        return json.dumps(log_data, default=str)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Adapter to inject contextual information into all log messages.

    Usage:
        logger = setup_logging("api")
        request_logger = LoggerAdapter(logger, {"path": request.url.path})
        request_logger.info("Serving publications", extra={"page": 2})
    """

    def process(self, msg: str, kwargs: Any) -> tuple:
        """Inject context into log message."""
        # Merge adapter context with per-call extra
        if "extra" not in kwargs:
            kwargs["extra"] = {}
        kwargs["extra"].update(self.extra)
        return msg, kwargs
