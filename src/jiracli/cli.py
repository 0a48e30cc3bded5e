from __future__ import annotations

import argparse
import os
from typing import Any

from . import __version__
from .errors import ConfigError
from .logging import configure_logging
from .router import CommandRouter
from .runtime import execute_command
from .session import SessionState, get_session

EXIT_INTERRUPTED = 130

_MAX_HELP_WIDTH = 100


class _HelpFormatter(argparse.HelpFormatter):
    def __init__(self, prog: str) -> None:
        super().__init__(prog, max_help_position=30, width=_MAX_HELP_WIDTH)


class _FormatterArgumentParser(argparse.ArgumentParser):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("formatter_class", _HelpFormatter)
        super().__init__(*args, **kwargs)


def _build_parser() -> argparse.ArgumentParser:
    """Construct top-level CLI parser with subcommands.

    Keep ordering stable for help output readability.
    """
    p = _FormatterArgumentParser(prog="jiracli", description="Jira from the command line")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--debug",
        action="store_true",
        help="Log requests and internal steps to stderr (env: JIRACLI_DEBUG=1)",
    )
    p.add_argument(
        "--quiet",
        action="store_true",
        help="Only log errors (env: JIRACLI_QUIET=1)",
    )
    sub = p.add_subparsers(
        dest="cmd",
        required=True,
        parser_class=_FormatterArgumentParser,
        metavar="<command>",
    )

    pc = sub.add_parser("config", help="Show or change the saved configuration")
    pc.add_argument("field", nargs="?", help="host | username | password | board | proxy | remove")
    pc.add_argument("value", nargs="?", help="New value for the field")
    pc.add_argument("--set", action="store_true", help="Choose a new default (board)")
    pc.add_argument("--remove", action="store_true", help="Clear the default (board)")

    pp = sub.add_parser("project", help="List projects")
    pp.add_argument("subcmd", nargs="?", help=argparse.SUPPRESS)

    pu = sub.add_parser("user", help="List users")
    pu.add_argument("subcmd", nargs="?", help=argparse.SUPPRESS)

    pv = sub.add_parser("version", help="List or create project versions")
    pv.add_argument("project", nargs="?", help="Project key (omit to print the tool version)")
    pv.add_argument("-n", "--number", help="Create a version with this name")

    pi = sub.add_parser("issue", help="Show, search and update issues")
    pi.add_argument("key", nargs="?", help="Issue key, e.g. PROJ-123")
    pi.add_argument("-r", "--release", help="Issues fixed in this release (needs --project)")
    pi.add_argument("-p", "--project", help="Project key")
    pi.add_argument("-u", "--user", help="Issues assigned to this user")
    pi.add_argument("-a", "--assign", help="Assign the issue to this user")
    pi.add_argument("-t", "--transition", help="Move the issue through this transition")
    pi.add_argument("-c", "--comment", help="Add a comment to the issue")

    ps = sub.add_parser("search", help="Search issues with a JQL query")
    ps.add_argument("jql", nargs="*", help="JQL query")

    po = sub.add_parser("open", help="Open an issue in the browser")
    po.add_argument("key", nargs="?", help="Issue key")

    return p


def _log_level(args: argparse.Namespace) -> str | None:
    if args.debug:
        return "DEBUG"
    if args.quiet or os.environ.get("JIRACLI_QUIET") == "1":
        return "ERROR"
    return None


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=_log_level(args))
    session = get_session()
    try:
        state = session.init()
        if state is SessionState.CONFIGURING:
            return 0
        router = CommandRouter(session)
        return execute_command(lambda: router.dispatch(args), args.cmd)
    except KeyboardInterrupt:
        print("")
        return EXIT_INTERRUPTED
    except ConfigError as exc:
        session.show_error(str(exc))
        return exc.exit_code
    except OSError as exc:
        session.show_error(str(exc))
        return ConfigError.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
