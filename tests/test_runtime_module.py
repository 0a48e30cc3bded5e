from __future__ import annotations

import json

import pytest

from jiracli.logging import configure_logging
from jiracli.runtime import execute_command


def test_execute_command_returns_handler_code():
    assert execute_command(lambda: 3, "issue") == 3
    assert execute_command(lambda: None, "issue") == 0


def test_execute_command_logs_duration(capsys):
    configure_logging(json_logging=True, level="INFO")

    execute_command(lambda: 0, "project")

    entry = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
    assert entry["operation"] == "command_project"
    assert entry["exit_code"] == 0


def test_execute_command_logs_and_reraises(capsys):
    configure_logging(json_logging=True, level="INFO")

    def boom() -> int:
        raise OSError("disk full")

    with pytest.raises(OSError):
        execute_command(boom, "config")

    lines = [json.loads(line) for line in capsys.readouterr().err.splitlines() if line]
    assert lines[0]["exit_code"] == 1
    assert lines[1]["message"] == "command config failed"
    assert lines[1]["error"] == "disk full"
