"""Request URI builders for the two Jira REST surfaces.

Both builders are pure functions of the client's connection parameters; they
never touch the network. ``pathname`` must start with ``/``.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional, Protocol, Union
from urllib.parse import unquote, urlencode, urlunsplit

AGILE_API_PREFIX = "/rest/agile/1.0"
CLASSIC_API_PREFIX = "/rest/api/{api_version}"


class ConnectionParams(Protocol):
    protocol: str
    host: str
    port: str | None
    base: str


Query = Optional[Union[str, Mapping[str, Any]]]


def _netloc(conn: ConnectionParams) -> str:
    port = str(conn.port) if conn.port not in (None, "") else ""
    return f"{conn.host}:{port}" if port else conn.host


def _query_string(query: Query) -> str:
    if not query:
        return ""
    if isinstance(query, str):
        return query.lstrip("?")
    return urlencode({k: v for k, v in query.items() if v is not None}, doseq=True)


def _build(conn: ConnectionParams, path: str, query: Query) -> str:
    return urlunsplit((conn.protocol, _netloc(conn), path, _query_string(query), ""))


def make_api_uri(
    conn: ConnectionParams, pathname: str, *, api_version: str = "2", query: Query = None
) -> str:
    """``{base}/rest/api/{api_version}{pathname}`` on the client's host."""
    prefix = CLASSIC_API_PREFIX.format(api_version=api_version)
    return _build(conn, f"{conn.base}{prefix}{pathname}", query)


def make_agile_uri(conn: ConnectionParams, pathname: str, *, query: Query = None) -> str:
    """``{base}/rest/agile/1.0{pathname}``, percent-decoded once after building.

    Decoding last lets already-encoded query fragments pass through verbatim.
    """
    return unquote(_build(conn, f"{conn.base}{AGILE_API_PREFIX}{pathname}", query))


__all__ = [
    "AGILE_API_PREFIX",
    "ConnectionParams",
    "make_agile_uri",
    "make_api_uri",
]
