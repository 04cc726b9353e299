"""
JSON logging for the API server and the terminal client

Records carry the request id of the HTTP request being served, plus any
checklist context passed through ``extra=`` (runbook/execution ids, step
index, patch counts).
"""
import json
import logging
import re
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional


request_id_context: ContextVar[Optional[str]] = ContextVar('request_id', default=None)

# Keys copied from ``extra=`` into the JSON record
CONTEXT_FIELDS = ("runbook_id", "execution_id", "step_idx", "path", "applied", "skipped", "status")


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "line": f"{record.module}:{record.lineno}",
        }

        request_id = request_id_context.get()
        if request_id:
            log_data["request_id"] = request_id

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class UrlCredentialFilter(logging.Filter):
    """Masks ``user:password@`` in URLs (DATABASE_URL, API_BASE_URL) before output."""

    PATTERN = re.compile(r"(\w+://[^/\s:@]+):[^@\s/]+@")

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = self.PATTERN.sub(r"\1:***@", message)
        if masked != message:
            record.msg = masked
            record.args = ()
        return True


def setup_logging(log_level: str = "INFO") -> None:
    """Route everything through one stdout handler with JSON output"""
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter())
    console_handler.addFilter(UrlCredentialFilter())
    root_logger.addHandler(console_handler)

    for noisy in ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("runbook_checklist").setLevel(log_level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def set_request_id(request_id: Optional[str] = None) -> str:
    """Bind a request id to the current context, generating one if needed"""
    if request_id is None:
        request_id = str(uuid.uuid4())[:8]
    request_id_context.set(request_id)
    return request_id
