"""Centralized retry / backoff helpers for Jira HTTP calls.

``run_with_retries`` re-invokes a thunk returning a ``requests.Response``
while the server answers with a transient status (429 / 502 / 503 / 504) or
the connection drops. An explicit ``Retry-After`` header wins over the
exponential backoff.

Environment overrides:
  JIRACLI_RETRY_ATTEMPTS (default 3)
  JIRACLI_RETRY_BASE (seconds base, default 0.5)
  JIRACLI_RETRY_MAX_SLEEP (cap in seconds, optional)
"""

from __future__ import annotations

import os
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field

import requests

from .logging import get_logger

TRANSIENT_STATUSES = frozenset({429, 502, 503, 504})

_JITTER = random.SystemRandom()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass
class RetryConfig:
    attempts: int = field(default_factory=lambda: _env_int("JIRACLI_RETRY_ATTEMPTS", 3))
    base_sleep: float = field(default_factory=lambda: _env_float("JIRACLI_RETRY_BASE", 0.5))


def is_transient(status: int | None) -> bool:
    return status in TRANSIENT_STATUSES


def _retry_after(response: requests.Response | None) -> float | None:
    if response is None:
        return None
    value = response.headers.get("Retry-After") if response.headers else None
    if value is None:
        return None
    try:
        secs = float(str(value).strip())
    except ValueError:
        return None
    return secs if secs > 0 else None


def _compute_sleep(attempt: int, cfg: RetryConfig, response: requests.Response | None) -> float:
    explicit = _retry_after(response)
    backoff = cfg.base_sleep * (2 ** (attempt - 1)) + _JITTER.uniform(0, 0.25)
    sleep_for = explicit if explicit is not None else backoff
    max_cap_env = os.environ.get("JIRACLI_RETRY_MAX_SLEEP")
    if max_cap_env:
        try:
            cap = float(max_cap_env)
        except ValueError:
            return sleep_for
        if cap >= 0:
            sleep_for = min(sleep_for, cap)
    return sleep_for


def run_with_retries(
    fn: Callable[[], requests.Response],
    *,
    cfg: RetryConfig | None = None,
    idempotent: bool = True,
    sleep: Callable[[float], None] = time.sleep,
) -> requests.Response:
    """Call ``fn`` until it returns a non-transient response or attempts run out.

    Non-idempotent calls are attempted exactly once. Connection errors on the
    last attempt propagate to the caller.
    """
    cfg = cfg or RetryConfig()
    attempts = max(1, cfg.attempts) if idempotent else 1
    for attempt in range(1, attempts + 1):
        try:
            response = fn()
        except requests.ConnectionError:
            if attempt >= attempts:
                raise
            response = None
        else:
            if attempt >= attempts or not is_transient(response.status_code):
                return response
        sleep_for = _compute_sleep(attempt, cfg, response)
        get_logger().debug(
            f"transient failure, attempt {attempt}/{attempts}, sleeping {sleep_for:.2f}s",
            operation="retry",
            attempt=attempt,
        )
        sleep(sleep_for)
    raise RuntimeError("retry logic exited unexpectedly")  # pragma: no cover


__all__ = ["RetryConfig", "TRANSIENT_STATUSES", "is_transient", "run_with_retries"]
