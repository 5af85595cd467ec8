"""
Events BFF — Route Tests
=========================

What:  End-to-end tests through the FastAPI app (middleware, dependencies,
       exception handlers) with the events API faked by MockTransport.
"""

import json
import logging
from base64 import b64encode

import httpx
import pytest
from itsdangerous import TimestampSigner

from events_bff import __version__
from events_bff.config import settings


def signed_session(data: dict) -> str:
    """Encodes a session cookie exactly as Starlette's SessionMiddleware does."""
    payload = b64encode(json.dumps(data).encode("utf-8"))
    return TimestampSigner(str(settings.session_secret)).sign(payload).decode("utf-8")


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["version"] == __version__
        assert body["uptime_seconds"] >= 0


class TestAllEvents:

    @pytest.mark.asyncio
    async def test_returns_camelized_snapshot(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")
        upstream.respond(200, json={"event_list": [{"event_type": "PAYMENT_POSTED"}]})

        response = await test_client.get("/all-events")

        assert response.status_code == 200
        assert response.json() == {"eventList": [{"eventType": "PAYMENT_POSTED"}]}
        assert upstream.last_request.url.path == "/events-api/customers/C-1/loans/L-9/events"

    @pytest.mark.asyncio
    async def test_sets_no_cache_headers(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")

        response = await test_client.get("/all-events")

        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert response.headers["pragma"] == "no-cache"
        assert response.headers["expires"] == "0"

    @pytest.mark.asyncio
    async def test_request_id_round_trip(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")

        response = await test_client.get("/all-events", headers={"X-Request-ID": "trace-42"})

        assert response.headers["x-request-id"] == "trace-42"
        assert upstream.last_request.headers["x-request-id"] == "trace-42"

    @pytest.mark.asyncio
    async def test_signed_session_cookie_reaches_upstream_and_log(self, test_client, upstream, caplog):
        caplog.set_level(logging.INFO, logger="events_bff.http_client")
        test_client.cookies.set(
            settings.session_cookie,
            signed_session({"customerId": "C-5", "currentLoanNumber": "L-12"}),
        )

        response = await test_client.get("/all-events", headers={"X-Request-ID": "trace-9"})

        assert response.status_code == 200
        assert upstream.last_request.url.path == "/events-api/customers/C-5/loans/L-12/events"

        record = next(r for r in caplog.records if r.getMessage().startswith("API RESPONSE"))
        assert record.context["customer_id"] == "C-5"
        assert record.context["request_id"] == "trace-9"
        assert record.context["method"] == "GET"
        assert record.context["path"] == "/all-events"

    @pytest.mark.asyncio
    async def test_tampered_session_cookie_is_ignored(self, test_client, upstream):
        cookie = signed_session({"customer_id": "C-5", "current_loan_number": "L-12"})
        forged = cookie.rsplit(".", 1)[0] + ".not-the-signature"
        test_client.cookies.set(settings.session_cookie, forged)

        response = await test_client.get("/all-events")

        assert response.status_code == 401
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_without_session_returns_401(self, test_client, upstream):
        response = await test_client.get("/all-events")

        assert response.status_code == 401
        body = response.json()
        assert body["error"] == "session_required"
        assert body["details"]["missing"] == ["customer_id", "current_loan_number"]
        assert upstream.requests == []

    @pytest.mark.asyncio
    async def test_upstream_error_returns_502(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")
        upstream.respond(503, json={"detail": "maintenance"})

        response = await test_client.get("/all-events", headers={"X-Request-ID": "trace-7"})

        assert response.status_code == 502
        body = response.json()
        assert body["error"] == "upstream_error"
        assert body["details"] == {"upstream_status": 503}
        assert body["request_id"] == "trace-7"
        assert "upstream.test" not in response.text

    @pytest.mark.asyncio
    async def test_upstream_timeout_returns_504(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")
        upstream.fail(httpx.ReadTimeout, "timed out")

        response = await test_client.get("/all-events")

        assert response.status_code == 504
        assert response.json()["error"] == "upstream_timeout"

    @pytest.mark.asyncio
    async def test_upstream_unreachable_returns_502(self, test_client, upstream, login):
        login(customer_id="C-1", current_loan_number="L-9")
        upstream.fail(httpx.ConnectError, "connection refused")

        response = await test_client.get("/all-events")

        assert response.status_code == 502
        assert response.json()["error"] == "upstream_unreachable"
