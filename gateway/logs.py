"""
Logging setup with per-request ids.

JSON output puts one object per line with: timestamp, level, logger,
message, request_id, and any whitelisted extras passed via ``extra=``.
Request ids are set per request by middleware and stored in a contextvar.
"""
import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}

_EXTRA_FIELDS = (
    "event_id",
    "channel",
    "method",
    "path",
    "status",
    "duration_ms",
    "skills",
    "addr",
    "error",
)


def get_request_id() -> Optional[str]:
    return request_id_ctx.get()


def set_request_id(rid: str):
    """Set the request id for the current context; returns a reset token."""
    return request_id_ctx.set(rid)


def generate_request_id() -> str:
    return str(uuid.uuid4())


def parse_log_level(level: str) -> int:
    """Map a config level name to a logging level; unknown names mean INFO."""
    return _LEVELS.get((level or "").lower(), logging.INFO)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = getattr(record, "request_id", None) or get_request_id()
        if rid:
            log_entry["request_id"] = rid

        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val

        return json.dumps(log_entry, default=str)


def configure_logging(level: str = "info", fmt: str = "json", stream=None) -> None:
    """Install a single stdout handler on the root logger.

    Call once at startup, before anything logs.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(parse_log_level(level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    if (fmt or "").lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
    root_logger.addHandler(handler)

    for noisy in ("uvicorn.access", "httpcore", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
