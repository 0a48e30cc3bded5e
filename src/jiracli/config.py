"""Persisted credentials and defaults (``~/.jira-cli.json``).

The file is the only state that survives between invocations. It is either
absent (unconfigured) or holds a complete record; writes always replace the
whole file.
"""

from __future__ import annotations

import json
import os
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, cast

from .errors import ConfigCorruptError, ConfigError
from .logging import get_logger
from .prompts import CONFIG_QUESTIONS, PASSWORD_QUESTIONS, PromptRenderer, board_question
from .ux import Colors, colorize, print_error, print_success, print_value

if TYPE_CHECKING:
    from .boards import Boards

DEFAULT_FILE_NAME = ".jira-cli.json"
API_VERSION = "2"
REQUIRED_FIELDS = ("host", "username", "password")
REMOVE_TOKEN = "remove"

_KNOWN_KEYS = {
    "protocol",
    "host",
    "username",
    "password",
    "apiVersion",
    "strictSSL",
    "defaultBoard",
    "proxy",
}


class ConfigField(str, Enum):
    HOST = "host"
    USERNAME = "username"
    PASSWORD = "password"
    BOARD = "board"
    PROXY = "proxy"


class Reporter(Protocol):
    def show_error(self, message: str) -> None: ...


def _strict_ssl(value: Any) -> bool:
    if not isinstance(value, bool):
        raise ConfigCorruptError(f"Config field strictSSL must be true or false, got {value!r}")
    return value


@dataclass
class ConfigRecord:
    protocol: str
    host: str
    username: str
    password: str
    api_version: str = API_VERSION
    strict_ssl: bool = True
    default_board: str | int | None = None
    proxy: str | None = None
    extras: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "protocol": self.protocol,
            "host": self.host,
            "username": self.username,
            "password": self.password,
            "apiVersion": self.api_version,
            "strictSSL": self.strict_ssl,
        }
        if self.default_board is not None:
            data["defaultBoard"] = self.default_board
        if self.proxy is not None:
            data["proxy"] = self.proxy
        for key, value in self.extras.items():
            data.setdefault(key, value)
        return data

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> ConfigRecord:
        missing = [name for name in REQUIRED_FIELDS if name not in raw]
        if missing:
            raise ConfigCorruptError(f"Config file is missing required field(s): {', '.join(missing)}")
        return cls(
            protocol=str(raw.get("protocol") or "https"),
            host=str(raw["host"]),
            username=str(raw["username"]),
            password=str(raw["password"]),
            api_version=str(raw.get("apiVersion") or API_VERSION),
            strict_ssl=_strict_ssl(raw.get("strictSSL", True)),
            default_board=raw.get("defaultBoard"),
            proxy=raw.get("proxy") or None,
            extras={k: v for k, v in raw.items() if k not in _KNOWN_KEYS},
        )


@dataclass
class ConfigInit:
    record: ConfigRecord
    created: bool


def write_config(path: Path, record: ConfigRecord) -> None:
    """Serialize ``record`` and replace ``path`` with it in one go."""
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(json.dumps(record.to_dict()), encoding="utf-8")
    try:
        os.chmod(tmp, 0o600)
    except (OSError, NotImplementedError):  # pragma: no cover - platform specific
        pass
    tmp.replace(path)


def load_config(path: Path) -> ConfigRecord:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    try:
        raw: Any = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigCorruptError(
            f"Config file {path} is not valid JSON: {exc.msg} at position {exc.pos}"
        ) from exc
    if not isinstance(raw, dict):
        raise ConfigCorruptError(f"Config file {path} must hold a JSON object")
    return ConfigRecord.from_dict(cast(dict[str, Any], raw))


class ConfigStore:
    """Owns the configuration record and every mutation of it."""

    def __init__(
        self,
        *,
        prompter: PromptRenderer,
        reporter: Reporter,
        boards: Boards | None = None,
        home: Path | None = None,
    ) -> None:
        self.prompter = prompter
        self.reporter = reporter
        self.boards = boards
        self._home = home
        self.file_path: Path | None = None
        self._record: ConfigRecord | None = None
        self._updaters: dict[ConfigField, Callable[[str | None, bool, bool], bool]] = {
            ConfigField.HOST: self._update_host,
            ConfigField.USERNAME: self._update_username,
            ConfigField.PASSWORD: self._update_password,
            ConfigField.BOARD: self._update_board,
            ConfigField.PROXY: self._update_proxy,
        }

    @property
    def record(self) -> ConfigRecord:
        if self._record is None:
            raise ConfigError("Configuration not loaded")
        return self._record

    # ---- lifecycle ------------------------------------------------------
    def init(self, file_name: str = DEFAULT_FILE_NAME) -> ConfigInit:
        """Load the config file, creating it interactively when absent.

        A freshly created config is returned with ``created=True``; the caller
        is expected to stop there instead of running a command.
        """
        home = self._home or Path.home()
        self.file_path = home / file_name
        if not self.file_path.exists():
            self._record = self.create_config_file(self.file_path)
            return ConfigInit(self._record, created=True)
        self._record = load_config(self.file_path)
        get_logger().debug("config loaded", path=str(self.file_path))
        return ConfigInit(self._record, created=False)

    def create_config_file(self, path: Path) -> ConfigRecord:
        answers = self.prompter.ask(CONFIG_QUESTIONS)
        protocol = "https" if answers.get("protocol") else "http"
        record = ConfigRecord(
            protocol=protocol,
            host=str(answers.get("host") or "").strip(),
            username=str(answers.get("username") or "").strip(),
            password=str(answers.get("password") or "").strip(),
            api_version=API_VERSION,
            strict_ssl=True,
        )
        with get_logger().timed_operation("config_write", path=str(path)):
            write_config(path, record)
        print("")
        print("Config file successfully created in: " + colorize(str(path), Colors.GREEN))
        print("")
        return record

    def remove_config_file(self) -> bool:
        """Delete the config file. A missing file raises ``FileNotFoundError``."""
        path = self._require_path()
        path.unlink()
        get_logger().log_operation("config_removed", path=str(path))
        print_error("Config file successfully deleted!", stream=sys.stdout)
        return True

    def update_config_file(self) -> bool:
        path = self._require_path()
        try:
            with get_logger().timed_operation("config_write", path=str(path)):
                write_config(path, self.record)
        except OSError:
            self.reporter.show_error("Error updating config file.")
            return False
        print_success("Config file successfully updated.")
        return True

    def _require_path(self) -> Path:
        if self.file_path is None:
            raise ConfigError("Configuration not loaded")
        return self.file_path

    # ---- field updates --------------------------------------------------
    def update_config_record(
        self,
        field_name: str,
        value: str | None = None,
        *,
        set_default: bool = False,
        remove: bool = False,
    ) -> bool:
        """Show or change one field. Returns ``False`` when nothing could be done."""
        try:
            key = ConfigField(field_name)
        except ValueError:
            self.docs()
            return True
        return self._updaters[key](value, set_default, remove)

    def _required(self, label: str, value: str) -> str | None:
        value = value.strip()
        if not value:
            self.reporter.show_error(f"The {label} cannot be empty.")
            return None
        return value

    def _update_host(self, value: str | None, set_default: bool, remove: bool) -> bool:
        if value is None:
            print_value("Current host", self.record.host)
            return True
        host = self._required("host", value)
        if host is None:
            return False
        self.record.host = host
        return self.update_config_file()

    def _update_username(self, value: str | None, set_default: bool, remove: bool) -> bool:
        if value is None:
            print_value("Current username", self.record.username)
            return True
        username = self._required("username", value)
        if username is None:
            return False
        self.record.username = username
        return self.update_config_file()

    def _update_password(self, value: str | None, set_default: bool, remove: bool) -> bool:
        answers = self.prompter.ask(PASSWORD_QUESTIONS)
        password = self._required("password", str(answers.get("password") or ""))
        if password is None:
            return False
        self.record.password = password
        return self.update_config_file()

    def _update_board(self, value: str | None, set_default: bool, remove: bool) -> bool:
        if set_default:
            return self._choose_default_board()
        if self.record.default_board is None:
            print_error("There is no default board set.", stream=sys.stdout)
            return True
        if remove:
            self.record.default_board = None
            return self.update_config_file()
        board = self._boards().get_board(self.record.default_board)
        if board is None:
            return False
        print_value("Your default board is", board.get("name"), color=Colors.GREEN)
        return True

    def _choose_default_board(self) -> bool:
        boards = self._boards().get_boards()
        if not boards:
            return False
        # Board names are not unique; the first board with a given name wins.
        by_name: dict[str, Any] = {}
        for board in boards:
            by_name.setdefault(str(board["name"]), board["id"])
        answers = self.prompter.ask([board_question(list(by_name))])
        self.record.default_board = by_name[answers["board"]]
        return self.update_config_file()

    def _update_proxy(self, value: str | None, set_default: bool, remove: bool) -> bool:
        if value is None:
            print_value("Current proxy", self.record.proxy or "not defined")
            return True
        self.record.proxy = None if value == REMOVE_TOKEN else value
        return self.update_config_file()

    def _boards(self) -> Boards:
        if self.boards is None:
            raise ConfigError("Board lookups need an initialised session")
        return self.boards

    def docs(self) -> None:
        print("")
        print("  Usage:  config <command> [value] [--set] [--remove]")
        print("")
        print("")
        print("  Commands:")
        print("")
        print("    host       Show or set the jira host")
        print("    username   Show or set the jira username")
        print("    password   Prompt for a new API token")
        print("    board      Show the default board (--set to choose, --remove to clear)")
        print("    proxy      Show or set the proxy URI ('remove' clears it)")
        print("    remove     Remove the config file")
        print("")


__all__ = [
    "API_VERSION",
    "DEFAULT_FILE_NAME",
    "ConfigField",
    "ConfigInit",
    "ConfigRecord",
    "ConfigStore",
    "load_config",
    "write_config",
]
