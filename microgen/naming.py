"""Identifier case conversion used when emitting Go names."""

from __future__ import annotations

import re

_ACRONYM_BOUNDARY = re.compile(r"([A-Z]+)([A-Z][a-z])")
_WORD_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")


def to_upper_first(name: str) -> str:
    """Export an identifier: ``visit`` -> ``Visit``."""
    if not name:
        return name
    return name[0].upper() + name[1:]


def to_lower_first(name: str) -> str:
    """Unexport an identifier: ``Visit`` -> ``visit``."""
    if not name:
        return name
    return name[0].lower() + name[1:]


def to_lower(name: str) -> str:
    return name.lower()


def to_snake_case(name: str) -> str:
    """Convert Go-style names to snake_case, keeping acronyms together.

    ``UserID`` -> ``user_id``, ``HTTPServer`` -> ``http_server``.
    """
    if not name:
        return name
    converted = _ACRONYM_BOUNDARY.sub(r"\1_\2", name)
    converted = _WORD_BOUNDARY.sub(r"\1_\2", converted)
    return converted.replace("-", "_").lower()


def last_upper_or_first(name: str) -> str:
    """Pick a one-letter receiver name: the last capital (lowered), else the first letter."""
    if not name:
        raise ValueError("cannot derive a receiver name from an empty identifier")
    for char in reversed(name):
        if char.isupper():
            return char.lower()
    return name[0]


__all__ = [
    "last_upper_or_first",
    "to_lower",
    "to_lower_first",
    "to_snake_case",
    "to_upper_first",
]
