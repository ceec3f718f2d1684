"""Decoding of list fields that arrive in more than one shape."""

import json
from typing import Any


def normalize_string_list(value: Any) -> list[str]:
    """
    Decode a tags/agenda value into an ordered list of strings.

    Accepted shapes, tried in this order:
    1. None or empty string -> []
    2. list or tuple -> each item as a string
    3. JSON array string, e.g. '["go", "rust"]' -> its items as strings
    4. any other string -> comma separated, items stripped, empties dropped

    A string that parses as JSON but not as an array (e.g. '"go"' or '42')
    falls through to the comma-separated rule.
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]

    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            parsed = json.loads(value)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(item) for item in parsed]
        return [part.strip() for part in value.split(",") if part.strip()]

    raise ValueError(f"Cannot decode {type(value).__name__} as a list of strings")
