"""
Events BFF — Test Configuration (conftest.py)
==============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    Function-scoped:
    ├── upstream: Fake events API (httpx.MockTransport) wired into the shared client
    ├── login: Installs a session for the route tests via dependency_overrides
    └── test_client: HTTPX AsyncClient talking to the FastAPI app over ASGI
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["EVENTS_API_BASE_URL"] = "http://upstream.test/events-api"
os.environ["SESSION_SECRET"] = "test-secret-not-real"
os.environ["SERVICE_TIMEOUT"] = "5"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Callable, List, Optional  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from events_bff import http_client  # noqa: E402
from events_bff.routes.dependencies import get_session  # noqa: E402


class FakeUpstream:
    """
    Records every outgoing request and answers with a configurable handler.

    Usage:
        upstream.respond(200, json={"event_list": []})
        upstream.fail(httpx.ConnectError)
    """

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self._handler: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)

    def respond(self, status_code: int = 200, **kwargs) -> None:
        self._handler = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, exc_type: type, message: str = "boom") -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)
        self._handler = _raise

    @property
    def last_request(self) -> Optional[httpx.Request]:
        return self.requests[-1] if self.requests else None


@pytest_asyncio.fixture
async def upstream(monkeypatch):
    """
    Replaces the shared httpx client with one backed by a FakeUpstream.

    Why:  Tests must never reach a real events API; MockTransport keeps the
          real client code path (hooks, raise_for_status, elapsed) intact.
    """
    fake = FakeUpstream()
    client = http_client.build_client(transport=httpx.MockTransport(fake))
    monkeypatch.setattr(http_client, "_client", client)
    yield fake
    await client.aclose()


@pytest.fixture
def login():
    """
    Installs a session for route tests.

    Usage:
        login(customer_id="C-1", current_loan_number="L-9")
    """
    from events_bff.main import app

    def _login(**session):
        app.dependency_overrides[get_session] = lambda: dict(session)

    yield _login
    app.dependency_overrides.pop(get_session, None)


@pytest_asyncio.fixture
async def test_client():
    """HTTPX AsyncClient routed straight into the FastAPI app (no server)."""
    from events_bff.main import app
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
