from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import requests

from . import __version__
from .errors import JiraAPIError, redact
from .logging import get_logger
from .retry import run_with_retries
from .uris import Query, make_agile_uri, make_api_uri

if TYPE_CHECKING:
    from .config import ConfigRecord

USER_AGENT = f"jiracli/{__version__}"
HTTP_ERROR_STATUS = 400
DEFAULT_TIMEOUT = 30.0


def _default_timeout() -> float:
    try:
        return float(os.environ.get("JIRACLI_HTTP_TIMEOUT", DEFAULT_TIMEOUT))
    except ValueError:
        return DEFAULT_TIMEOUT


@dataclass
class JiraClient:
    """Authenticated REST client bound to one Jira host."""

    protocol: str
    host: str
    username: str
    password: str
    api_version: str = "2"
    strict_ssl: bool = True
    port: str | None = None
    base: str = ""
    proxy: str | None = None
    timeout: float = field(default_factory=_default_timeout)
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._session = self.session or requests.Session()
        self._session.auth = (self.username, self.password)
        self._session.verify = self.strict_ssl
        self._session.headers.setdefault("Accept", "application/json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)
        if self.proxy:
            self._session.proxies = {"http": self.proxy, "https": self.proxy}

    # ---- URIs ---------------------------------------------------------
    def make_uri(self, pathname: str, query: Query = None) -> str:
        return make_api_uri(self, pathname, api_version=self.api_version, query=query)

    def make_agile_uri(self, pathname: str, query: Query = None) -> str:
        return make_agile_uri(self, pathname, query=query)

    # ---- Transport ----------------------------------------------------
    def request(
        self,
        method: str,
        uri: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        """Perform one request and return the decoded JSON body (or ``None``).

        Raises ``JiraAPIError`` for HTTP failures and transport errors alike.
        """
        logger = get_logger()
        method = method.upper()

        def _run() -> requests.Response:
            return self._session.request(
                method,
                uri,
                params=params,
                json=json_body,
                timeout=self.timeout,
            )

        start = time.perf_counter()
        try:
            response = run_with_retries(_run, idempotent=method == "GET")
        except requests.RequestException as exc:
            logger.log_request(method, uri, None, (time.perf_counter() - start) * 1000)
            raise JiraAPIError(redact(str(exc))) from exc
        logger.log_request(method, uri, response.status_code, (time.perf_counter() - start) * 1000)

        if response.status_code >= HTTP_ERROR_STATUS:
            raise JiraAPIError(
                f"Jira API {method} {redact(uri)} failed with {response.status_code}",
                status_code=response.status_code,
                error=_decode(response),
            )
        return _decode(response)


def _decode(response: requests.Response) -> Any:
    if not response.text:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def build_client(record: ConfigRecord, *, session: requests.Session | None = None) -> JiraClient:
    """Turn a loaded configuration record into the process' API client."""
    client = JiraClient(
        protocol=record.protocol,
        host=record.host,
        username=record.username,
        password=record.password,
        api_version=record.api_version,
        strict_ssl=record.strict_ssl,
        proxy=record.proxy,
        session=session,
    )
    get_logger().debug(
        "jira client constructed",
        host=record.host,
        protocol=record.protocol,
        proxy=redact(record.proxy) if record.proxy else None,
    )
    return client


__all__ = ["JiraClient", "build_client"]
