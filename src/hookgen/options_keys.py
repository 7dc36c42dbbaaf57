"""
Key lookup for option mappings.

The option schema is camelCase (`currencySettler`, `blockNumberOffset`), but
Python callers naturally write snake_case. Both spellings are accepted.
Boolean options must be real booleans.
"""

import re
from typing import Any, Mapping

from .exceptions import ConfigurationError

MISSING = object()

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])([A-Z])")


def to_snake(name: str) -> str:
    """Convert a camelCase schema key to snake_case."""
    return _CAMEL_BOUNDARY_RE.sub(r"_\1", name).lower()


def lookup(data: Mapping[str, Any], key: str) -> Any:
    """
    Return the value for a camelCase schema key, trying the snake_case spelling second.

    Returns MISSING when neither spelling is present, so callers can tell an
    explicit None/False apart from an absent key.
    """
    if key in data:
        return data[key]
    snake = to_snake(key)
    if snake in data:
        return data[snake]
    return MISSING


def parse_flag(field: str, value: Any) -> bool:
    """Read a boolean option. None counts as unset; strings such as "false" are rejected."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    raise ConfigurationError(field, f"expected true or false, got {value!r}")
