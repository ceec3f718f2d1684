"""Event models."""

from datetime import datetime
from typing import Any, Mapping, Optional

from pydantic import Field, field_validator, model_validator

from devevent.models.common import BaseSchema, DocumentSchema
from devevent.utils import SLUG_RULE, is_valid_slug, normalize_string_list, slugify

# Fields that must be present and non-empty for an event page to be shown
DISPLAY_FIELDS = (
    "description",
    "image",
    "overview",
    "date",
    "time",
    "location",
    "mode",
    "agenda",
    "audience",
    "tags",
    "organizer",
)

TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "organizer",
    "date",
    "time",
    "location",
    "mode",
    "audience",
    "image",
)


def missing_display_fields(event: Mapping[str, Any]) -> list[str]:
    """Names of the display fields that are absent or empty."""
    return [name for name in DISPLAY_FIELDS if not event.get(name)]


class EventFields(BaseSchema):
    """Descriptive fields shared by stored events and creation input."""

    title: str = ""
    description: str = ""
    overview: str = ""
    organizer: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    mode: str = ""
    audience: str = ""
    image: str = ""
    tags: list[str] = Field(default_factory=list)
    agenda: list[str] = Field(default_factory=list)

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        """Stored documents may carry explicit nulls for unset text."""
        return "" if v is None else v

    @field_validator("tags", "agenda", mode="before")
    @classmethod
    def decode_list(cls, v: Any) -> list[str]:
        """Accept native lists, JSON array strings and CSV strings."""
        return normalize_string_list(v)


class EventCreate(EventFields):
    """
    Event creation input.

    The slug is taken from the request when given, otherwise derived from
    the title. Either way it must match the slug pattern.
    """

    title: str = Field(..., min_length=1)
    slug: Optional[str] = None

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title cannot be empty")
        return v

    @model_validator(mode="after")
    def resolve_slug(self) -> "EventCreate":
        slug = self.slug.strip() if self.slug else slugify(self.title)
        if not is_valid_slug(slug):
            raise ValueError(f"Invalid slug '{slug}': {SLUG_RULE}")
        self.slug = slug
        return self


class Event(EventFields, DocumentSchema):
    """Stored event document."""

    slug: str
    updated_at: Optional[datetime] = None
