"""Structured logging for jiracli.

Diagnostics go to stderr so they never interleave with command output.
The default level is WARNING; ``--debug``/``JIRACLI_DEBUG=1`` lowers it to
DEBUG and ``JIRACLI_LOG_JSON=1`` switches to one JSON object per line.
"""

from __future__ import annotations

import json
import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from .errors import redact

DEFAULT_LEVEL = "WARNING"

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for k, v in record.__dict__.items():
            if k not in _RESERVED and not k.startswith("_") and k not in entry:
                entry[k] = v
        return json.dumps(entry, default=str)


class StructuredLogger:
    def __init__(
        self, name: str = "jiracli", json_logging: bool = False, level: str = DEFAULT_LEVEL
    ) -> None:
        self._logger = logging.getLogger(name)
        self._logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
        for h in list(self._logger.handlers):
            self._logger.removeHandler(h)
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            JSONFormatter()
            if json_logging
            else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        )
        self._logger.addHandler(handler)
        self._logger.propagate = False

    @property
    def level(self) -> int:
        return self._logger.level

    def log_operation(self, operation: str, **kw: Any) -> None:
        self._logger.info(f"Operation: {operation}", extra={"operation": operation, **kw})

    def log_request(
        self, method: str, uri: str, status: int | None, duration_ms: float, **kw: Any
    ) -> None:
        safe_uri = redact(uri)
        extra = {
            "operation": "http_request",
            "method": method,
            "uri": safe_uri,
            "status": status,
            "duration_ms": round(duration_ms, 2),
            **kw,
        }
        self._logger.debug(f"{method} {safe_uri} -> {status} ({duration_ms:.2f}ms)", extra=extra)

    def log_performance(self, operation: str, duration_ms: float, **kw: Any) -> None:
        extra = {"operation": operation, "duration_ms": round(duration_ms, 2), **kw}
        self._logger.info(f"Performance: {operation} completed in {duration_ms:.2f}ms", extra=extra)

    def log_error(self, message: str, error: str | None = None, **kw: Any) -> None:
        extra = dict(kw)
        if error:
            extra["error"] = redact(error)
        self._logger.error(message, extra=extra)

    def debug(self, message: str, **kw: Any) -> None:
        self._logger.debug(message, extra=kw)

    def info(self, message: str, **kw: Any) -> None:
        self._logger.info(message, extra=kw)

    def warning(self, message: str, **kw: Any) -> None:
        self._logger.warning(message, extra=kw)

    def error(self, message: str, **kw: Any) -> None:  # noqa: D401
        self._logger.error(message, extra=kw)

    @contextmanager
    def timed_operation(self, operation: str, **kw: Any) -> Iterator[None]:  # noqa: D401
        start = time.perf_counter()
        self.log_operation(f"{operation}_start", **kw)
        try:
            yield
            self.log_performance(operation, (time.perf_counter() - start) * 1000, **kw)
        except Exception as exc:
            self.log_error(f"operation {operation} failed", error=str(exc), **kw)
            raise


_GLOBAL: StructuredLogger | None = None


def _env_level() -> str:
    if os.environ.get("JIRACLI_DEBUG") == "1":
        return "DEBUG"
    return os.environ.get("JIRACLI_LOG_LEVEL", DEFAULT_LEVEL)


def get_logger() -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    if _GLOBAL is None:
        _GLOBAL = StructuredLogger(
            json_logging=os.environ.get("JIRACLI_LOG_JSON") == "1", level=_env_level()
        )
    return _GLOBAL


def configure_logging(json_logging: bool | None = None, level: str | None = None) -> StructuredLogger:
    global _GLOBAL  # noqa: PLW0603
    if json_logging is None:
        json_logging = os.environ.get("JIRACLI_LOG_JSON") == "1"
    _GLOBAL = StructuredLogger(json_logging=json_logging, level=level or _env_level())
    return _GLOBAL
