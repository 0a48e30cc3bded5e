"""Pytest configuration for jiracli tests.

Ensures the in-repo `src` directory is on `sys.path` so the package can be
imported without an editable install (`pip install -e .`). Every test runs
with a clean jiracli environment: no inherited JIRACLI_* overrides, colours
off, and fresh process-wide session/logger singletons.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from jiracli import logging as jiracli_logging  # noqa: E402
from jiracli import session as jiracli_session  # noqa: E402
from jiracli.ux import TABLE_CHARS  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in list(os.environ):
        if name.startswith("JIRACLI_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.setattr(jiracli_session, "_SESSION", None)
    monkeypatch.setattr(jiracli_logging, "_GLOBAL", None)


class ScriptedRenderer:
    """Answers prompt chains from a fixed mapping and records what was asked."""

    def __init__(self, answers: Mapping[str, Any] | None = None) -> None:
        self.answers = dict(answers or {})
        self.asked: list[Any] = []

    def ask(self, questions: Sequence[Any]) -> dict[str, Any]:
        self.asked.extend(questions)
        return {q.name: self.answers[q.name] for q in questions if q.name in self.answers}


class RecordingReporter:
    def __init__(self) -> None:
        self.errors: list[Any] = []
        self.messages: list[str] = []

    def show_errors(self, response: Any) -> None:
        self.errors.append(response)

    def show_error(self, message: str) -> None:
        self.messages.append(message)


class StubSession:
    """Stands in for ``JiraSession`` when exercising domain handlers.

    ``responses`` maps ``(method, path)`` to a payload; an exception instance
    is raised instead of returned.
    """

    def __init__(self, responses: Mapping[tuple[str, str], Any] | None = None) -> None:
        self.responses = dict(responses or {})
        self.calls: list[tuple[str, str, Any, Any]] = []
        self.errors: list[Any] = []
        self.messages: list[str] = []
        self.table_chars = TABLE_CHARS

    def _answer(self, method: str, path: str, extra: Any, body: Any) -> Any:
        self.calls.append((method, path, extra, body))
        result = self.responses[(method, path)]
        if isinstance(result, Exception):
            raise result
        return result

    def api_request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        return self._answer(method, path, params, json_body)

    def agile_request(
        self, path: str, *, method: str = "GET", query: Any = None, json_body: Any | None = None
    ) -> Any:
        return self._answer(method, path, query, json_body)

    def show_errors(self, response: Any) -> None:
        self.errors.append(response)

    def show_error(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def renderer_factory():
    return ScriptedRenderer


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def stub_session_factory():
    return StubSession
