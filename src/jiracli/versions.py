from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import JiraAPIError
from .ux import print_success, print_table

if TYPE_CHECKING:
    from .session import JiraSession


class Versions:
    def __init__(self, session: JiraSession) -> None:
        self.session = session

    def list_versions(self, project: str) -> list[dict[str, Any]] | None:
        try:
            versions = self.session.api_request(f"/project/{project}/versions")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        versions = [v for v in versions or [] if isinstance(v, dict)]
        rows = [
            (
                v.get("name"),
                "released" if v.get("released") else "unreleased",
                v.get("releaseDate", ""),
                v.get("description", ""),
            )
            for v in versions
        ]
        print_table(
            ["Version", "Status", "Release date", "Description"],
            rows,
            chars=self.session.table_chars,
        )
        return versions

    def create_version(
        self, project: str, name: str, *, description: str | None = None
    ) -> dict[str, Any] | None:
        payload: dict[str, Any] = {"name": name, "project": project}
        if description:
            payload["description"] = description
        try:
            version = self.session.api_request("/version", method="POST", json_body=payload)
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        print_success(f"Version {name} created in {project}.")
        return version
