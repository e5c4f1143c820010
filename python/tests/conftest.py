"""Shared fixtures for tdfclient tests."""

import threading

import pytest

from tdfclient.client import TdfClient


class StubTransport:
    """Records calls and answers with a canned body (or raises)."""

    def __init__(self, body="{}", status=200, exc=None):
        self.body = body
        self.status = status
        self.exc = exc
        self.calls = []
        self.release = threading.Event()
        self.release.set()

    def __call__(self, method, url, params=None):
        self.release.wait(timeout=5)
        self.calls.append((method, url, params))
        if self.exc is not None:
            raise self.exc
        return self.status, self.body


@pytest.fixture
def transport():
    return StubTransport()


@pytest.fixture
def client(transport):
    with TdfClient(transport=transport) as c:
        yield c
