"""Board lookups on the agile API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import JiraAPIError

if TYPE_CHECKING:
    from .session import JiraSession


class Boards:
    def __init__(self, session: JiraSession) -> None:
        self.session = session

    def get_boards(self) -> list[dict[str, Any]] | None:
        """Return ``[{"id": ..., "name": ...}]`` for every visible board."""
        try:
            res = self.session.agile_request("/board")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        values = res.get("values", []) if isinstance(res, dict) else []
        return [{"id": b.get("id"), "name": b.get("name")} for b in values if isinstance(b, dict)]

    def get_board(self, board_id: str | int) -> dict[str, Any] | None:
        try:
            return self.session.agile_request(f"/board/{board_id}")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
