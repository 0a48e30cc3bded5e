from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import JiraAPIError
from .ux import print_table

if TYPE_CHECKING:
    from .session import JiraSession


class Projects:
    def __init__(self, session: JiraSession) -> None:
        self.session = session

    def list_projects(self) -> list[dict[str, Any]] | None:
        try:
            projects = self.session.api_request("/project")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        projects = [p for p in projects or [] if isinstance(p, dict)]
        rows = [
            (p.get("key"), p.get("name"), p.get("projectTypeKey", "")) for p in projects
        ]
        print_table(["Key", "Name", "Type"], rows, chars=self.session.table_chars)
        return projects
