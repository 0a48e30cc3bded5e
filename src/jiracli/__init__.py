"""jiracli - work with Jira issues, projects and boards from the terminal.

Library use:

from jiracli import get_session

session = get_session()
session.init()
session.issues.find_issue("PROJ-1")

The ``jiracli`` console script wraps the same session.
"""

from __future__ import annotations

# Version constant (sync manually with pyproject)
__version__ = "0.1.0"

from .config import ConfigRecord, ConfigStore  # noqa: E402
from .errors import ConfigError, JiraAPIError, JiraCliError  # noqa: E402
from .session import JiraSession, SessionState, get_session  # noqa: E402

__all__ = [
    "ConfigError",
    "ConfigRecord",
    "ConfigStore",
    "JiraAPIError",
    "JiraCliError",
    "JiraSession",
    "SessionState",
    "__version__",
    "get_session",
]
