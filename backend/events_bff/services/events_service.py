"""
Events BFF — Events Service
============================

What:  Builds the home snapshot shown after login.
How:   Reads the customer id and current loan number from the session and
       forwards them to the events integration. The upstream payload is
       returned as-is (already camelCased by the HTTP client).
Who:   Called by GET /all-events.
"""

import logging
from typing import Any, Mapping

from events_bff.context import ContextLike
from events_bff.exceptions import SessionRequiredError
from events_bff.integrations import events as events_api

logger = logging.getLogger(__name__)

# Session key → alternate spelling written by camelCase producers
SESSION_KEYS = {
    "customer_id": "customerId",
    "current_loan_number": "currentLoanNumber",
}


def _session_value(session: Mapping[str, Any], key: str) -> Any:
    value = session.get(key)
    if value in (None, ""):
        value = session.get(SESSION_KEYS[key])
    return value


async def get_home_snapshot(session: Mapping[str, Any], context: ContextLike = None) -> Any:
    """
    Returns the upstream event feed for the session's customer and loan.

    Raises:
        SessionRequiredError: customer id or loan number missing (no upstream call)
        UpstreamServiceError: propagated from the HTTP client
    """
    customer_id = _session_value(session, "customer_id")
    loan_number = _session_value(session, "current_loan_number")

    missing = [
        key for key, value in (("customer_id", customer_id), ("current_loan_number", loan_number))
        if value in (None, "")
    ]
    if missing:
        logger.warning("Home snapshot requested without session values: %s", ", ".join(missing))
        raise SessionRequiredError(missing=missing)

    return await events_api.get_events(customer_id, loan_number, context)
