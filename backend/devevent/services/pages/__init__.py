"""Event detail page assembly."""

from .client import EventPageClient, parse_list_field
from .exceptions import PageClientError
from .models import EventPage

__all__ = [
    "EventPageClient",
    "EventPage",
    "PageClientError",
    "parse_list_field",
]
