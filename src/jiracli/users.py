from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .errors import JiraAPIError
from .ux import print_table

if TYPE_CHECKING:
    from .session import JiraSession

PAGE_SIZE = 1000


class Users:
    def __init__(self, session: JiraSession) -> None:
        self.session = session

    def list_users(self) -> list[dict[str, Any]] | None:
        try:
            users = self.session.api_request(
                "/users/search", params={"startAt": 0, "maxResults": PAGE_SIZE}
            )
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        users = [
            u for u in users or [] if isinstance(u, dict) and u.get("accountType", "atlassian") == "atlassian"
        ]
        rows = [
            (u.get("displayName"), u.get("emailAddress", ""), "yes" if u.get("active") else "no")
            for u in users
        ]
        print_table(["Name", "Email", "Active"], rows, chars=self.session.table_chars)
        return users

    def find_user(self, query: str) -> dict[str, Any] | None:
        """Resolve a name/email fragment to the first matching user."""
        try:
            matches = self.session.api_request("/user/search", params={"query": query})
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        for user in matches or []:
            if isinstance(user, dict):
                return user
        self.session.show_error(f"No user found matching '{query}'")
        return None
