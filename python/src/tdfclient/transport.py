"""HTTP transport used by :class:`tdfclient.client.TdfClient`."""

from __future__ import annotations

from typing import Any, Mapping, Protocol

import requests


class Transport(Protocol):
    """Issue a request and return ``(status_code, body_text)``."""

    def __call__(self, method: str, url: str, params: Mapping[str, Any] | None = None) -> tuple[int, str]:
        ...


class RequestsTransport:
    """Transport backed by a shared ``requests.Session``.

    The response status is returned as-is; the TDF server signals errors in the
    body, so classification is left to the caller.
    """

    def __init__(self, session: requests.Session | None = None, timeout: float | None = None):
        self.session = session or requests.Session()
        self.timeout = timeout

    def __call__(self, method: str, url: str, params: Mapping[str, Any] | None = None) -> tuple[int, str]:
        resp = self.session.request(method, url, params=params, timeout=self.timeout)
        return resp.status_code, resp.text

    def close(self) -> None:
        self.session.close()
