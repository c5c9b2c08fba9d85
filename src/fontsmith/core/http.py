"""HTTP helpers built on requests with cross-platform TLS guidance."""

from __future__ import annotations

import asyncio
import json
import logging
from threading import Lock
from typing import Any

import requests

from .exceptions import (
    DeserialisationError,
    FontsmithError,
    RemoteRejectedError,
    SourceConnectionError,
)


logger = logging.getLogger(__name__)


def _tls_help(url: str) -> str:
    return (
        "TLS certificate verification failed while downloading "
        f"'{url}'. On macOS run the Python 'Install Certificates.command' "
        "(from the python.org installer). On Windows run 'py -m pip install --upgrade certifi'. "
        "On Linux install your 'ca-certificates' package (apt/yum/apk). "
        "Also check system date/time and any proxy or corporate SSL inspection."
    )


class HttpClient:
    """Blocking GET helper with async wrappers running in worker threads.

    The underlying :class:`requests.Session` is created lazily and shared by
    every call, including calls issued concurrently from ``asyncio`` tasks.
    """

    def __init__(
        self,
        *,
        user_agent: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        self._session_lock = Lock()
        self._session = session
        self._timeout = timeout
        self._user_agent = user_agent

    @property
    def user_agent(self) -> str:
        return self._user_agent

    def _ensure_session(self) -> requests.Session:
        with self._session_lock:
            if self._session is None:
                self._session = requests.Session()
            return self._session

    def get(self, url: str, *, headers: dict[str, str] | None = None) -> requests.Response:
        """Issue a GET request, mapping failures onto fontsmith exceptions."""
        merged = {"User-Agent": self._user_agent}
        if headers:
            merged.update(headers)
        client = self._ensure_session()
        logger.debug("GET %s", url)
        try:
            response = client.get(url, headers=merged, timeout=self._timeout)
        except requests.exceptions.SSLError as exc:
            raise SourceConnectionError(_tls_help(url)) from exc
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise SourceConnectionError(f"Unable to reach '{url}': {exc}") from exc
        except requests.RequestException as exc:
            raise FontsmithError(f"Request to '{url}' failed: {exc}") from exc
        if not 200 <= response.status_code < 300:
            raise RemoteRejectedError(url, response.status_code, getattr(response, "reason", None))
        return response

    def get_bytes(self, url: str) -> bytes:
        return self.get(url).content

    def get_json(self, url: str) -> Any:
        payload = self.get(url, headers={"Accept": "application/json"}).content
        try:
            return json.loads(payload)
        except ValueError as exc:
            raise DeserialisationError(f"Invalid JSON returned by '{url}': {exc}") from exc

    async def fetch_bytes(self, url: str) -> bytes:
        return await asyncio.to_thread(self.get_bytes, url)

    async def fetch_json(self, url: str) -> Any:
        return await asyncio.to_thread(self.get_json, url)


__all__ = ["HttpClient"]
