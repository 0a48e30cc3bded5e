"""Issue lookups and mutations.

Every public method reports its own failures through the session and
returns ``None`` instead of raising.
"""

from __future__ import annotations

import webbrowser
from typing import TYPE_CHECKING, Any

from .errors import JiraAPIError
from .ux import Colors, colorize, print_success, print_table

if TYPE_CHECKING:
    from .session import JiraSession

SEARCH_FIELDS = "summary,status,priority,assignee,issuetype"
MAX_RESULTS = 100


def _quote(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def _name(value: Any, key: str = "name") -> str:
    return str(value.get(key, "")) if isinstance(value, dict) else ""


class Issues:
    def __init__(self, session: JiraSession) -> None:
        self.session = session

    # ---- listings -------------------------------------------------------
    def search(self, jql: str) -> list[dict[str, Any]] | None:
        try:
            res = self.session.api_request(
                "/search",
                params={"jql": jql, "fields": SEARCH_FIELDS, "maxResults": MAX_RESULTS},
            )
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        issues = res.get("issues", []) if isinstance(res, dict) else []
        self._print_issues(issues)
        return issues

    def summary(self, user: str | None = None) -> list[dict[str, Any]] | None:
        """Open issues assigned to ``user`` (the authenticated user by default)."""
        assignee = _quote(user) if user else "currentUser()"
        return self.search(
            f"assignee = {assignee} AND resolution = Unresolved ORDER BY priority DESC, updated DESC"
        )

    def get_project_issues(self, project: str) -> list[dict[str, Any]] | None:
        return self.search(
            f"project = {_quote(project)} AND resolution = Unresolved ORDER BY priority DESC"
        )

    def get_release_issues(self, project: str, release: str) -> list[dict[str, Any]] | None:
        return self.search(
            f"project = {_quote(project)} AND fixVersion = {_quote(release)} ORDER BY status ASC"
        )

    def _print_issues(self, issues: list[Any]) -> None:
        rows = []
        for issue in issues:
            if not isinstance(issue, dict):
                continue
            fields = issue.get("fields") or {}
            rows.append(
                (
                    issue.get("key"),
                    _name(fields.get("priority")),
                    _name(fields.get("status")),
                    fields.get("summary", ""),
                )
            )
        print_table(["Key", "Priority", "Status", "Summary"], rows, chars=self.session.table_chars)

    # ---- single issue ---------------------------------------------------
    def find_issue(self, key: str) -> dict[str, Any] | None:
        try:
            issue = self.session.api_request(f"/issue/{key}")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        if not isinstance(issue, dict):
            issue = {}
        fields = issue.get("fields") or {}
        print("")
        title = colorize(str(issue.get("key", key)), Colors.BLUE, bold=True)
        print(f"  {title}  {fields.get('summary', '')}")
        print("")
        print(f"  Type:      {_name(fields.get('issuetype'))}")
        print(f"  Status:    {_name(fields.get('status'))}")
        print(f"  Priority:  {_name(fields.get('priority'))}")
        print(f"  Assignee:  {_name(fields.get('assignee'), 'displayName') or 'Unassigned'}")
        print(f"  Reporter:  {_name(fields.get('reporter'), 'displayName')}")
        description = fields.get("description")
        if description:
            print("")
            print(f"  {description}")
        print("")
        return issue

    def open_issue(self, key: str) -> bool:
        record = self.session.config.record
        url = f"{record.protocol}://{record.host}/browse/{key}"
        return webbrowser.open(url)

    # ---- mutations ------------------------------------------------------
    def assign_issue(self, key: str, user: str) -> bool | None:
        account = self.session.users.find_user(user)
        if account is None:
            return None
        try:
            self.session.api_request(
                f"/issue/{key}/assignee",
                method="PUT",
                json_body={"accountId": account.get("accountId")},
            )
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        print_success(f"Issue {key} assigned to {account.get('displayName', user)}.")
        return True

    def make_transition(self, key: str, transition: str) -> bool | None:
        try:
            res = self.session.api_request(f"/issue/{key}/transitions")
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        transitions = res.get("transitions", []) if isinstance(res, dict) else []
        available = [t for t in transitions if isinstance(t, dict)]
        wanted = transition.strip().lower()
        match = next(
            (
                t
                for t in available
                if str(t.get("id")) == wanted or str(t.get("name", "")).lower() == wanted
            ),
            None,
        )
        if match is None:
            names = ", ".join(str(t.get("name")) for t in available) or "none"
            self.session.show_error(
                f"Transition '{transition}' is not available for {key} (available: {names})"
            )
            return None
        try:
            self.session.api_request(
                f"/issue/{key}/transitions",
                method="POST",
                json_body={"transition": {"id": str(match.get("id"))}},
            )
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        print_success(f"Issue {key} moved to {match.get('name')}.")
        return True

    def add_comment(self, key: str, comment: str) -> dict[str, Any] | None:
        try:
            res = self.session.api_request(
                f"/issue/{key}/comment", method="POST", json_body={"body": comment}
            )
        except JiraAPIError as exc:
            self.session.show_errors(exc)
            return None
        print_success(f"Comment added to {key}.")
        return res if isinstance(res, dict) else {}
