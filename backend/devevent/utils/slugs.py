"""Slug validation and derivation."""

import re

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
SLUG_RULE = "Slug must contain only lowercase letters, numbers, and hyphens"

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def is_valid_slug(value: object) -> bool:
    """Return True if value is a well-formed slug."""
    return isinstance(value, str) and bool(SLUG_PATTERN.fullmatch(value))


def slugify(text: str) -> str:
    """
    Derive a slug from free text.

    Lowercases, collapses every run of non-alphanumeric characters into a
    single hyphen and trims hyphens from both ends. Returns an empty string
    when the text has no ASCII letters or digits.
    """
    return _NON_ALNUM.sub("-", text.lower()).strip("-")
