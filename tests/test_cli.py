from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from jiracli import __version__
from jiracli import cli as cli_module
from jiracli.config import DEFAULT_FILE_NAME, ConfigRecord, write_config
from jiracli.errors import JiraAPIError
from jiracli.logging import get_logger
from jiracli.router import RELEASE_NEEDS_PROJECT
from jiracli.session import JiraSession

ANSWERS = {"host": "jira.example.com", "username": "me", "password": "pw", "protocol": True}


class _Client:
    """Answers every request from a queue; records what was asked."""

    def __init__(self, payloads: list[Any]) -> None:
        self.payloads = payloads
        self.requests: list[tuple[str, str]] = []

    def make_uri(self, pathname: str, query: Any = None) -> str:
        return f"https://jira.example.com/rest/api/2{pathname}"

    def make_agile_uri(self, pathname: str, query: Any = None) -> str:
        return f"https://jira.example.com/rest/agile/1.0{pathname}"

    def request(self, method: str, uri: str, *, params: Any = None, json_body: Any = None) -> Any:
        self.requests.append((method, uri))
        nxt = self.payloads.pop(0)
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


class _InterruptingRenderer:
    def ask(self, questions):
        raise KeyboardInterrupt


def _install(monkeypatch, tmp_path: Path, renderer, payloads: list[Any] | None = None) -> _Client:
    client = _Client(list(payloads or []))
    session = JiraSession(prompter=renderer, home=tmp_path, client_factory=lambda record: client)
    monkeypatch.setattr(cli_module, "get_session", lambda: session)
    return client


def _configure(tmp_path: Path) -> None:
    write_config(
        tmp_path / DEFAULT_FILE_NAME,
        ConfigRecord(protocol="https", host="jira.example.com", username="me", password="pw"),
    )


def test_first_run_creates_config_and_exits_zero(monkeypatch, tmp_path, renderer_factory, capsys):
    client = _install(monkeypatch, tmp_path, renderer_factory(ANSWERS))

    assert cli_module.main(["issue"]) == 0

    assert (tmp_path / DEFAULT_FILE_NAME).exists()
    assert client.requests == []
    assert "Config file successfully created in:" in capsys.readouterr().out


def test_release_without_project_makes_no_request(monkeypatch, tmp_path, renderer_factory, capsys):
    _configure(tmp_path)
    client = _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["issue", "--release", "1.0"]) == 1

    assert client.requests == []
    assert RELEASE_NEEDS_PROJECT in capsys.readouterr().err


def test_version_prints_package_version(monkeypatch, tmp_path, renderer_factory, capsys):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_version_flag():
    with pytest.raises(SystemExit) as info:
        cli_module.main(["--version"])
    assert info.value.code == 0


def test_missing_command_is_a_usage_error():
    with pytest.raises(SystemExit) as info:
        cli_module.main([])
    assert info.value.code == 2


def test_handler_failure_exits_one(monkeypatch, tmp_path, renderer_factory, capsys):
    _configure(tmp_path)
    denied = JiraAPIError("denied", status_code=401, error={})
    client = _install(monkeypatch, tmp_path, renderer_factory(), [denied])

    assert cli_module.main(["issue", "ABC-1"]) == 1

    assert client.requests == [("GET", "https://jira.example.com/rest/api/2/issue/ABC-1")]
    assert "Error trying to authenticate" in capsys.readouterr().err


def test_project_listing(monkeypatch, tmp_path, renderer_factory, capsys):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory(), [[{"key": "ABC", "name": "Alpha"}]])

    assert cli_module.main(["project"]) == 0
    assert "ABC" in capsys.readouterr().out


def test_corrupt_config_exits_two(monkeypatch, tmp_path, renderer_factory, capsys):
    (tmp_path / DEFAULT_FILE_NAME).write_text("{oops", encoding="utf-8")
    _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["project"]) == 2
    assert "not valid JSON" in capsys.readouterr().err


def test_interrupted_prompt_exits_130(monkeypatch, tmp_path):
    _install(monkeypatch, tmp_path, _InterruptingRenderer())
    assert cli_module.main(["project"]) == 130
    assert not (tmp_path / DEFAULT_FILE_NAME).exists()


def test_config_remove(monkeypatch, tmp_path, renderer_factory, capsys):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["config", "remove"]) == 0
    assert not (tmp_path / DEFAULT_FILE_NAME).exists()
    assert "Config file successfully deleted!" in capsys.readouterr().out


def test_config_proxy_update(monkeypatch, tmp_path, renderer_factory):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["config", "proxy", "http://proxy:3128"]) == 0
    assert '"proxy": "http://proxy:3128"' in (tmp_path / DEFAULT_FILE_NAME).read_text()


def test_debug_flag_enables_debug_logging(monkeypatch, tmp_path, renderer_factory):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    cli_module.main(["--debug", "version"])

    assert get_logger().level == 10


def test_quiet_flag_and_environment_raise_log_level(monkeypatch, tmp_path, renderer_factory):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    cli_module.main(["--quiet", "version"])
    assert get_logger().level == 40

    monkeypatch.setenv("JIRACLI_QUIET", "1")
    cli_module.main(["version"])
    assert get_logger().level == 40


def test_blank_password_is_refused_and_config_stays_usable(
    monkeypatch, tmp_path, renderer_factory, capsys
):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory({"password": ""}))

    assert cli_module.main(["config", "password"]) == 1
    assert "The password cannot be empty." in capsys.readouterr().err
    assert '"password": "pw"' in (tmp_path / DEFAULT_FILE_NAME).read_text()


def test_config_with_blank_values_can_still_be_repaired(monkeypatch, tmp_path, renderer_factory):
    write_config(
        tmp_path / DEFAULT_FILE_NAME,
        ConfigRecord(protocol="https", host="jira.example.com", username="me", password=""),
    )
    _install(monkeypatch, tmp_path, renderer_factory({"password": "fresh"}))

    assert cli_module.main(["config", "password"]) == 0
    assert '"password": "fresh"' in (tmp_path / DEFAULT_FILE_NAME).read_text()


def test_failed_config_update_exits_one(monkeypatch, tmp_path, renderer_factory):
    _configure(tmp_path)
    _install(monkeypatch, tmp_path, renderer_factory())

    assert cli_module.main(["config", "host", ""]) == 1
