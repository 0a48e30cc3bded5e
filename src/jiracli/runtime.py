"""Runtime helpers for jiracli command execution."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from .logging import get_logger


def execute_command(handler: Callable[[], Any], command: str) -> int:
    """Run a command handler, logging its outcome and duration."""
    logger = get_logger()
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else 0
    except SystemExit as exc:
        exit_code = int(exc.code or 0)
        _record(command, exit_code, start)
        raise
    except Exception as exc:
        _record(command, 1, start)
        logger.log_error(f"command {command} failed", error=str(exc), command=command)
        raise
    _record(command, exit_code, start)
    return exit_code


def _record(command: str, exit_code: int, start: float) -> None:
    duration = max(0.0, time.monotonic() - start)
    get_logger().log_performance(f"command_{command}", duration * 1000, exit_code=exit_code)


__all__ = ["execute_command"]
