"""
Events BFF — Events Integration & Service Unit Tests
=====================================================

What we test:
    ✅ Events URL composition (base URL, quoting of path segments)
    ✅ get_events goes through the shared client and camelizes the result
    ✅ get_home_snapshot forwards session values and context unchanged
    ✅ Missing session values raise SessionRequiredError before any call
"""

from unittest.mock import AsyncMock, patch

import pytest

from events_bff.context import RequestContext
from events_bff.exceptions import SessionRequiredError
from events_bff.integrations import events as events_api
from events_bff.services import events_service


class TestEventsIntegration:

    def test_events_url(self):
        assert events_api.events_url("C-1", 1234) == (
            "http://upstream.test/events-api/customers/C-1/loans/1234/events"
        )

    def test_events_url_quotes_segments(self):
        url = events_api.events_url("C 1/2", "L?9")
        assert url.endswith("/customers/C%201%2F2/loans/L%3F9/events")

    @pytest.mark.asyncio
    async def test_get_events_calls_upstream(self, upstream):
        upstream.respond(200, json={"events": [{"event_id": 1, "posted_on": "2024-01-15"}]})

        result = await events_api.get_events("C-1", "L-9", RequestContext(request_id="r1"))

        assert upstream.last_request.method == "GET"
        assert upstream.last_request.url.path == "/events-api/customers/C-1/loans/L-9/events"
        assert result == {"events": [{"eventId": 1, "postedOn": "2024-01-15"}]}


class TestHomeSnapshot:

    @pytest.mark.asyncio
    async def test_forwards_session_values(self):
        context = RequestContext(request_id="r2")
        snapshot = {"events": []}

        with patch(
            "events_bff.services.events_service.events_api.get_events",
            new=AsyncMock(return_value=snapshot),
        ) as mock_get:
            result = await events_service.get_home_snapshot(
                {"customer_id": "C-1", "current_loan_number": "L-9"}, context
            )

        assert result is snapshot
        mock_get.assert_awaited_once_with("C-1", "L-9", context)

    @pytest.mark.asyncio
    async def test_accepts_camel_case_session_keys(self):
        with patch(
            "events_bff.services.events_service.events_api.get_events",
            new=AsyncMock(return_value={}),
        ) as mock_get:
            await events_service.get_home_snapshot(
                {"customerId": "C-2", "currentLoanNumber": "L-3"}
            )

        mock_get.assert_awaited_once_with("C-2", "L-3", None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "session, missing",
        [
            ({}, ["customer_id", "current_loan_number"]),
            ({"customer_id": "C-1"}, ["current_loan_number"]),
            ({"customer_id": "", "current_loan_number": "L-9"}, ["customer_id"]),
        ],
    )
    async def test_missing_session_values(self, upstream, session, missing):
        with pytest.raises(SessionRequiredError) as exc_info:
            await events_service.get_home_snapshot(session)

        assert exc_info.value.missing == missing
        assert upstream.requests == []
