"""Event page view models."""

from typing import Any

from pydantic import BaseModel, Field


class EventPage(BaseModel):
    """Everything the event detail page needs, already decoded."""

    slug: str
    event_id: str | None = None
    title: str = ""
    description: str
    image: str
    overview: str
    date: str
    time: str
    location: str
    mode: str
    audience: str
    organizer: str
    agenda_items: list[str] = Field(default_factory=list)
    tag_items: list[str] = Field(default_factory=list)
    bookings: int = 0
    similar_events: list[dict[str, Any]] = Field(default_factory=list)
