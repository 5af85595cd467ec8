"""Client for the upstream events API."""

from typing import Any
from urllib.parse import quote

from events_bff import http_client
from events_bff.config import settings
from events_bff.context import ContextLike


def events_url(customer_id: Any, loan_number: Any) -> str:
    return (
        f"{settings.events_api_base_url}"
        f"/customers/{quote(str(customer_id), safe='')}"
        f"/loans/{quote(str(loan_number), safe='')}/events"
    )


async def get_events(customer_id: Any, loan_number: Any, context: ContextLike = None) -> Any:
    """Fetches the event feed for one customer loan; keys come back camelCased."""
    return await http_client.get({"url": events_url(customer_id, loan_number)}, context)
