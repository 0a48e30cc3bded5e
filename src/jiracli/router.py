"""Maps parsed top-level commands onto session handlers.

Routing only checks which arguments/options are present; anything deeper is
the handler's job. Each ``cmd_*`` returns a process exit code.
"""

from __future__ import annotations

import argparse
from collections.abc import Callable
from typing import Any

from . import __version__
from .session import JiraSession

RELEASE_NEEDS_PROJECT = "You must specify a project (Use project option: -p <Project Key>)"


def _exit_code(result: Any) -> int:
    return 1 if result is None or result is False else 0


class CommandRouter:
    def __init__(self, session: JiraSession) -> None:
        self.session = session
        self._handlers: dict[str, Callable[[argparse.Namespace], int]] = {
            "config": self.cmd_config,
            "project": self.cmd_project,
            "user": self.cmd_user,
            "version": self.cmd_version,
            "issue": self.cmd_issue,
            "search": self.cmd_search,
            "open": self.cmd_open,
        }

    def dispatch(self, args: argparse.Namespace) -> int:
        handler = self._handlers.get(args.cmd)
        if handler is None:
            self.session.show_error(f"Unknown command: {args.cmd}")
            return 1
        return handler(args)

    def cmd_config(self, args: argparse.Namespace) -> int:
        store = self.session.config
        field = getattr(args, "field", None)
        if field is None:
            store.docs()
            return 0
        if field == "remove":
            return _exit_code(store.remove_config_file())
        return _exit_code(
            store.update_config_record(
                field,
                getattr(args, "value", None),
                set_default=bool(getattr(args, "set", False)),
                remove=bool(getattr(args, "remove", False)),
            )
        )

    def cmd_project(self, args: argparse.Namespace) -> int:
        if getattr(args, "subcmd", None) is None:
            return _exit_code(self.session.projects.list_projects())
        return 0

    def cmd_user(self, args: argparse.Namespace) -> int:
        if getattr(args, "subcmd", None) is None:
            return _exit_code(self.session.users.list_users())
        return 0

    def cmd_version(self, args: argparse.Namespace) -> int:
        project = getattr(args, "project", None)
        if project is None:
            print(__version__)
            return 0
        number = getattr(args, "number", None)
        if number:
            return _exit_code(self.session.versions.create_version(project, number))
        return _exit_code(self.session.versions.list_versions(project))

    def cmd_issue(self, args: argparse.Namespace) -> int:
        issues = self.session.issues
        key = getattr(args, "key", None)
        release = getattr(args, "release", None)
        project = getattr(args, "project", None)
        user = getattr(args, "user", None)
        if key is None:
            if release:
                if not project:
                    self.session.show_error(RELEASE_NEEDS_PROJECT)
                    return 1
                return _exit_code(issues.get_release_issues(project, release))
            if user:
                return _exit_code(issues.summary(user))
            if project:
                return _exit_code(issues.get_project_issues(project))
            return _exit_code(issues.summary(None))

        if getattr(args, "assign", None):
            return _exit_code(issues.assign_issue(key, args.assign))
        if getattr(args, "transition", None):
            return _exit_code(issues.make_transition(key, args.transition))
        if getattr(args, "comment", None):
            return _exit_code(issues.add_comment(key, args.comment))
        return _exit_code(issues.find_issue(key))

    def cmd_search(self, args: argparse.Namespace) -> int:
        jql = " ".join(getattr(args, "jql", None) or [])
        if not jql:
            self.session.show_error("You must provide a JQL query")
            return 1
        return _exit_code(self.session.issues.search(jql))

    def cmd_open(self, args: argparse.Namespace) -> int:
        key = getattr(args, "key", None)
        if not key:
            return 0
        return _exit_code(self.session.issues.open_issue(key))


__all__ = ["CommandRouter", "RELEASE_NEEDS_PROJECT"]
