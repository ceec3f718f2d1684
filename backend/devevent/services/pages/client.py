"""Server-side client that assembles event detail pages from the events API."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from devevent.models import missing_display_fields
from devevent.utils import normalize_string_list

from .exceptions import PageClientError
from .models import EventPage

logger = logging.getLogger(__name__)


def parse_list_field(value: Any) -> list[str]:
    """Decode tags/agenda from an API payload, [] for anything unusable."""
    try:
        return normalize_string_list(value)
    except ValueError:
        return []


class EventPageClient:
    """Fetches events over HTTP from the public base URL."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> EventPageClient:
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout_seconds,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("EventPageClient must be used as async context manager")
        return self._client

    def _event_path(self, slug: str) -> str:
        return f"/api/events/{quote(slug, safe='')}"

    async def get_event(self, slug: str) -> dict[str, Any] | None:
        """Fetch the raw event payload, None when the API reports 404."""
        response = await self.client.get(self._event_path(slug))
        if response.status_code == 404:
            return None
        if response.is_error:
            raise PageClientError(
                f"Failed to fetch event (status: {response.status_code})",
                status_code=response.status_code,
            )
        return response.json().get("event") or None

    async def get_similar_events(self, slug: str) -> list[dict[str, Any]]:
        try:
            response = await self.client.get(f"{self._event_path(slug)}/similar")
            response.raise_for_status()
            return response.json().get("events") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Similar events unavailable for '{slug}': {e}")
            return []

    async def get_booking_count(self, slug: str) -> int:
        try:
            response = await self.client.get(f"{self._event_path(slug)}/bookings/count")
            response.raise_for_status()
            return int(response.json().get("count") or 0)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Booking count unavailable for '{slug}': {e}")
            return 0

    async def get_event_page(self, slug: str) -> EventPage | None:
        """
        Build the detail page for an event.

        Returns None when the event does not exist or is missing any of the
        fields the page requires.
        """
        event = await self.get_event(slug)
        if event is None:
            return None

        missing = missing_display_fields(event)
        if missing:
            logger.info(f"Event '{slug}' is not displayable, missing: {', '.join(missing)}")
            return None

        return EventPage(
            slug=event.get("slug") or slug,
            event_id=event.get("_id") or event.get("id"),
            title=event.get("title") or "",
            description=event["description"],
            image=event["image"],
            overview=event["overview"],
            date=event["date"],
            time=event["time"],
            location=event["location"],
            mode=event["mode"],
            audience=event["audience"],
            organizer=event["organizer"],
            agenda_items=parse_list_field(event["agenda"]),
            tag_items=parse_list_field(event["tags"]),
            bookings=await self.get_booking_count(slug),
            similar_events=await self.get_similar_events(slug),
        )
