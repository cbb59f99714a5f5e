"""Structured logging for VulnShop."""
import logging
import json
import subprocess
import sys
from datetime import datetime
from typing import Optional
from contextvars import ContextVar

# Context variable for request ID
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


class JSONFormatter(logging.Formatter):
    """JSON log formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_ctx.get()
        if request_id:
            log_data["request_id"] = request_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, "extra_data"):
            log_data.update(record.extra_data)

        return json.dumps(log_data, default=str)


class StructuredLogger:
    """Logger with structured data support."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)

    def _log(self, level: int, message: str, **kwargs):
        """Log with extra structured data."""
        extra = {"extra_data": kwargs} if kwargs else {}
        self.logger.log(level, message, extra=extra)

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, **kwargs)

    def log_query(self, sql: str):
        """Log a raw SQL statement before it runs (verbatim, never redacted)."""
        self.info(f"Executing query: {sql}", event="query", sql=sql)

    def log_api_request(
        self,
        method: str,
        path: str,
        status_code: int,
        duration_ms: float,
        client_ip: str
    ):
        """Log an API request."""
        self.info(
            f"{method} {path} - {status_code}",
            event="api_request",
            method=method,
            path=path,
            status_code=status_code,
            duration_ms=round(duration_ms, 2),
            client_ip=client_ip
        )

    def log_to_file(self, filename: str, message: str) -> int:
        """
        Append a message to a log file through the shell.

        VULNERABILITY: Command injection - both arguments are pasted into a
        shell command line.

        Returns:
            The shell's exit status.
        """
        command = f"echo '{message}' >> {filename}"
        self.debug("Writing log file", event="log_to_file", command=command)
        return subprocess.run(command, shell=True).returncode

    def read_log_file(self, filename: str) -> str:
        """
        Read a log file.

        VULNERABILITY: Path traversal - the path is used as given.
        """
        with open(filename, "r") as f:
            return f.read()


def setup_logging(json_format: bool = True, level: str = "INFO"):
    """
    Configure logging for the application.

    Args:
        json_format: If True, use JSON logging (for production).
                    If False, use human-readable format (for development).
        level: Root log level name.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        ))

    root_logger.addHandler(handler)

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger instance."""
    return StructuredLogger(name)


# Application logger
logger = get_logger("vulnshop")
