"""Error taxonomy, response classification & reporting.

Jira answers failures in several loosely typed shapes (an HTTP 401, a body
with ``errorMessages``, a body with an ``errors`` mapping, a successful body
carrying ``warningMessages`` ...). They are classified exactly once, at the
client boundary, into a closed set of variants:

- ``Unauthorized``
- ``ValidationErrors(messages)``
- ``FieldErrors(errors)``
- ``Warnings(messages)``
- ``Unknown(raw)``

``ErrorReporter`` dispatches display logic on the variant instead of
re-testing field presence at each call site.

Public API:
- classify_response(raw) -> ApiProblem
- ErrorReporter.show_errors(response) / ErrorReporter.show_error(message)
- redact(text) -> str
"""

from __future__ import annotations

import re
import sys
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, TextIO, Union

from .ux import Colors, colorize

_SENSITIVE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"ATATT[A-Za-z0-9_\-=]{20,}"),  # Atlassian API tokens
    re.compile(r"(?<=://)[^/\s:@]+:[^/\s@]+(?=@)"),  # user:password@ in URLs
    re.compile(r"(?i)(?<=authorization: basic )[A-Za-z0-9+/=]+"),
]

_REDACTION_PLACEHOLDER = "<redacted>"

AUTH_FAILURE_MESSAGE = "Error trying to authenticate"


class JiraCliError(Exception):
    """Base class for errors raised by jiracli."""

    exit_code = 1


class ConfigError(JiraCliError):
    """The configuration file is missing, unreadable or unwritable."""

    exit_code = 2


class ConfigCorruptError(ConfigError):
    """The configuration file exists but does not hold a valid record."""


@dataclass(frozen=True)
class Unauthorized:
    pass


@dataclass(frozen=True)
class ValidationErrors:
    messages: tuple[str, ...]


@dataclass(frozen=True)
class FieldErrors:
    errors: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Warnings:
    messages: tuple[str, ...]


@dataclass(frozen=True)
class Unknown:
    raw: Any


ApiProblem = Union[Unauthorized, ValidationErrors, FieldErrors, Warnings, Unknown]
_PROBLEM_TYPES = (Unauthorized, ValidationErrors, FieldErrors, Warnings, Unknown)


class JiraAPIError(JiraCliError):
    """Raised when the Jira REST API (or the transport) reports a failure."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error: Any | None = None,
        problem: ApiProblem | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.error = error
        self.problem: ApiProblem = problem or classify_response(
            {"statusCode": status_code, "error": error}
            if error is not None
            else {"statusCode": status_code, "message": message}
        )


def redact(text: str) -> str:
    """Mask API tokens and URL credentials in arbitrary text."""
    if not text:
        return text
    redacted = text
    for pat in _SENSITIVE_PATTERNS:
        redacted = pat.sub(_REDACTION_PLACEHOLDER, redacted)
    return redacted


def _as_messages(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(item) for item in value)
    return ()


def classify_response(raw: Any) -> ApiProblem:
    """Classify a raw response/error object.

    Precedence: 401 status, then an ``error`` body (``errorMessages`` before
    ``errors``), then ``warningMessages``, then anything else.
    """
    if isinstance(raw, _PROBLEM_TYPES):
        return raw
    if isinstance(raw, JiraAPIError):
        return raw.problem
    if not isinstance(raw, Mapping):
        return Unknown(raw)

    if str(raw.get("statusCode")) == "401":
        return Unauthorized()
    error = raw.get("error")
    if error is not None:
        if isinstance(error, Mapping):
            messages = _as_messages(error.get("errorMessages"))
            if messages:
                return ValidationErrors(messages)
            errors = error.get("errors")
            return FieldErrors(dict(errors) if isinstance(errors, Mapping) else {})
        return Unknown(error)
    if raw.get("warningMessages") is not None:
        return Warnings(_as_messages(raw.get("warningMessages")))
    return Unknown(raw.get("message", raw))


class ErrorReporter:
    """Prints classified problems as padded, coloured lines."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        return self._stream or sys.stderr

    def _write(self, text: str = "") -> None:
        try:
            print(text, file=self.stream)
        except (OSError, ValueError):  # pragma: no cover - closed/broken stream
            return

    def _red(self, text: str) -> str:
        return colorize(text, Colors.RED, stream=self.stream)

    def lines_for(self, problem: ApiProblem) -> list[str]:
        if isinstance(problem, Unauthorized):
            return [self._red(f"  {AUTH_FAILURE_MESSAGE}")]
        if isinstance(problem, ValidationErrors):
            return [self._red(f"  Error: {msg}") for msg in problem.messages]
        if isinstance(problem, FieldErrors):
            return [self._red(f"  Error: {value}") for value in problem.errors.values()]
        if isinstance(problem, Warnings):
            return [
                colorize(f" Warning: {msg}", Colors.YELLOW, stream=self.stream)
                for msg in problem.messages
            ]
        return ["  " + self._red(str(problem.raw))]

    def show_errors(self, response: Any) -> None:
        """Classify ``response`` and print one line per reported problem."""
        problem = classify_response(response)
        self._write()
        for line in self.lines_for(problem):
            self._write(line)
        self._write()

    def show_error(self, message: str) -> None:
        self._write()
        self._write(self._red(f"  {message}"))
        self._write()


__all__ = [
    "ApiProblem",
    "ConfigCorruptError",
    "ConfigError",
    "ErrorReporter",
    "FieldErrors",
    "JiraAPIError",
    "JiraCliError",
    "Unauthorized",
    "Unknown",
    "ValidationErrors",
    "Warnings",
    "classify_response",
    "redact",
]
