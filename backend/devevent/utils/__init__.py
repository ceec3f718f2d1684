"""Shared helpers."""

from devevent.utils.lists import normalize_string_list
from devevent.utils.slugs import SLUG_PATTERN, SLUG_RULE, is_valid_slug, slugify

__all__ = [
    "normalize_string_list",
    "SLUG_PATTERN",
    "SLUG_RULE",
    "is_valid_slug",
    "slugify",
]
