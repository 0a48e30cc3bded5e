"""Process-wide session: configuration, API client and request primitives.

``get_session()`` returns the same ``JiraSession`` for the whole process.
``init()`` must complete before any command handler runs; it is the only way
into ``SessionState.CLIENT_READY`` and the only place the client is built.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from .boards import Boards
from .client import JiraClient, build_client
from .config import DEFAULT_FILE_NAME, ConfigRecord, ConfigStore
from .errors import ErrorReporter, Warnings
from .issues import Issues
from .logging import get_logger
from .projects import Projects
from .prompts import PromptRenderer, QuestionaryRenderer
from .uris import Query
from .users import Users
from .ux import TABLE_CHARS
from .versions import Versions


class SessionState(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURING = "configuring"
    CONFIGURED = "configured"
    CLIENT_READY = "client_ready"


class JiraSession:
    def __init__(
        self,
        *,
        prompter: PromptRenderer | None = None,
        reporter: ErrorReporter | None = None,
        config_file_name: str | None = None,
        home: Path | None = None,
        client_factory: Callable[[ConfigRecord], JiraClient] = build_client,
    ) -> None:
        self.config_file_name = config_file_name or os.environ.get(
            "JIRACLI_CONFIG_FILE", DEFAULT_FILE_NAME
        )
        self.reporter = reporter or ErrorReporter()
        self.table_chars: Mapping[str, str] = TABLE_CHARS
        self.state = SessionState.UNCONFIGURED
        self._client_factory = client_factory
        self._api: JiraClient | None = None

        self.boards = Boards(self)
        self.issues = Issues(self)
        self.projects = Projects(self)
        self.users = Users(self)
        self.versions = Versions(self)
        self.config = ConfigStore(
            prompter=prompter or QuestionaryRenderer(),
            reporter=self,
            boards=self.boards,
            home=home,
        )

    def init(self) -> SessionState:
        """Load (or interactively create) the config, then build the client.

        Returns ``CONFIGURING`` when the config was just created; no command
        may run in that case.
        """
        if self.state is SessionState.CLIENT_READY:
            return self.state
        result = self.config.init(self.config_file_name)
        if result.created:
            self.state = SessionState.CONFIGURING
            return self.state
        self.state = SessionState.CONFIGURED
        self._api = self._client_factory(result.record)
        self.state = SessionState.CLIENT_READY
        get_logger().debug("session ready", host=result.record.host)
        return self.state

    @property
    def api(self) -> JiraClient:
        if self._api is None:
            raise RuntimeError("Session not initialised; call init() first")
        return self._api

    # ---- request primitives ---------------------------------------------
    def api_request(
        self,
        path: str,
        *,
        method: str = "GET",
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        """Call the classic API. Raises ``JiraAPIError`` on failure."""
        payload = self.api.request(method, self.api.make_uri(path), params=params, json_body=json_body)
        self._report_warnings(payload)
        return payload

    def agile_request(
        self,
        path: str,
        *,
        method: str = "GET",
        query: Query = None,
        json_body: Any | None = None,
    ) -> Any:
        """Call the agile API. Raises ``JiraAPIError`` on failure."""
        payload = self.api.request(method, self.api.make_agile_uri(path, query), json_body=json_body)
        self._report_warnings(payload)
        return payload

    def _report_warnings(self, payload: Any) -> None:
        if isinstance(payload, dict) and payload.get("warningMessages"):
            self.show_errors(Warnings(tuple(str(w) for w in payload["warningMessages"])))

    # ---- reporting ------------------------------------------------------
    def show_errors(self, response: Any) -> None:
        self.reporter.show_errors(response)

    def show_error(self, message: str) -> None:
        self.reporter.show_error(message)


_SESSION: JiraSession | None = None


def get_session(**kwargs: Any) -> JiraSession:
    """Return the process session, creating it on first use.

    Keyword arguments only apply to that first construction.
    """
    global _SESSION  # noqa: PLW0603
    if _SESSION is None:
        _SESSION = JiraSession(**kwargs)
    return _SESSION


__all__ = ["JiraSession", "SessionState", "get_session"]
