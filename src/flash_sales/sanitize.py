"""HTML stripping for request input.

Every string that reaches the flash sale engine from HTTP goes through
`sanitize_value` first, so stored titles and descriptions never carry markup.
"""
from typing import Any

import bleach

# Nested payload depth cap
MAX_DEPTH = 10


def sanitize_input(value: Any) -> Any:
    """Strip all HTML tags from a string; other values are returned as-is"""
    if isinstance(value, str):
        return bleach.clean(value, tags=[], attributes={}, strip=True)
    return value


def sanitize_value(value: Any, depth: int = 0) -> Any:
    """Recursively sanitize strings inside dicts and lists"""
    if depth > MAX_DEPTH:
        return value
    if isinstance(value, dict):
        return {k: sanitize_value(v, depth + 1) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize_value(v, depth + 1) for v in value]
    return sanitize_input(value)
