import os

os.environ["BACKEND_URL"] = "http://backend.test/api"
os.environ["BACKEND_TOKEN"] = "test-token"
os.environ["CACHE_SWEEP_INTERVAL"] = "0"

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from posyandu_portal.services.backend import BackendClient
from posyandu_portal.utils.caching import DataCache

BACKEND_PREFIX = "/api"


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float):
        self.now += int(seconds * 1000)


class BackendStub:
    """Handler for ``httpx.MockTransport`` standing in for the posyandu backend.

    Each (method, path) gets a queue of responses or exceptions; the last one
    keeps being served once the others are used up.
    """

    def __init__(self):
        self._routes = {}
        self.requests = []

    def add(self, method: str, path: str, *responses):
        self._routes[(method, BACKEND_PREFIX + path)] = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if queue is None:
            return httpx.Response(404, json={"success": False, "message": "No stub"})
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def calls(self, method: str, path: str):
        return [
            r
            for r in self.requests
            if r.method == method and r.url.path == BACKEND_PREFIX + path
        ]


def ok(data, message=""):
    return httpx.Response(200, json={"success": True, "message": message, "data": data})


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return DataCache(default_ttl=60, clock=clock, max_entries=0)


@pytest.fixture
def backend_stub():
    return BackendStub()


def install_backend(client: TestClient, stub: BackendStub) -> BackendClient:
    """Route the running app's backend calls to ``stub``.

    The client built at startup is closed here; the replacement is closed by
    the app's shutdown since it becomes ``app.state.backend``.
    """
    client.portal.call(app.state.backend.aclose)
    backend = BackendClient(transport=httpx.MockTransport(stub))
    app.state.backend = backend
    app.state.fetcher.backend = backend
    return backend


@pytest.fixture
def client(backend_stub):
    """TestClient with a fresh app session (new cache) per test."""
    with TestClient(app) as c:
        install_backend(c, backend_stub)
        yield c
