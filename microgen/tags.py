"""Documentation tag parsing.

Tags are doc-comment lines of the form ``// @keyword arg1, arg2`` attached to
an interface or a method. They are parsed once into an immutable mapping from
keyword to its arguments; lines that are not tags are ignored.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Tuple

TAG_MARK = "// @"

MAIN_TAG = "microgen"
FORCE_TAG = "force"
PROTOBUF_TAG = "protobuf"
GRPC_ADDR_TAG = "grpc-addr"

MIDDLEWARE_TAG = "middleware"
LOGGING_MIDDLEWARE_TAG = "logging"
RECOVER_MIDDLEWARE_TAG = "recover"
GRPC_TAG = "grpc"
GRPC_SERVER_TAG = "grpc-server"
GRPC_CLIENT_TAG = "grpc-client"


class Tags(Mapping):
    """Read-only keyword -> arguments view over parsed documentation tags."""

    def __init__(self, entries: Mapping[str, Tuple[str, ...]] | None = None) -> None:
        self._entries: Dict[str, Tuple[str, ...]] = dict(entries or {})

    def __getitem__(self, keyword: str) -> Tuple[str, ...]:
        return self._entries[keyword]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Tags({self._entries!r})"

    def has(self, keyword: str) -> bool:
        return keyword in self._entries

    def arguments(self, keyword: str) -> Tuple[str, ...]:
        """Return the arguments of ``keyword``, empty when the tag is absent."""
        return self._entries.get(keyword, ())

    def contains(self, keyword: str, *values: str) -> bool:
        """Return True when ``keyword`` carries any of ``values``."""
        arguments = self._entries.get(keyword, ())
        return any(value in arguments for value in values)

    def first(self, keyword: str, default: str | None = None) -> str | None:
        arguments = self._entries.get(keyword)
        if not arguments:
            return default
        return arguments[0]


def parse_tag_line(line: str) -> Tuple[str, Tuple[str, ...]] | None:
    """Parse a single doc line, returning ``(keyword, args)`` or None."""
    stripped = line.strip()
    if not stripped.startswith(TAG_MARK):
        return None
    body = stripped[len(TAG_MARK):].strip()
    if not body:
        return None
    parts = body.split(None, 1)
    keyword = parts[0].lower()
    arguments: List[str] = []
    if len(parts) > 1:
        arguments = [item.strip() for item in parts[1].split(",") if item.strip()]
    return keyword, tuple(arguments)


def parse_tags(lines: Iterable[str]) -> Tags:
    """Collect every tag in ``lines``; repeated keywords accumulate their arguments."""
    collected: Dict[str, List[str]] = {}
    for line in lines:
        parsed = parse_tag_line(line)
        if parsed is None:
            continue
        keyword, arguments = parsed
        bucket = collected.setdefault(keyword, [])
        for argument in arguments:
            if argument not in bucket:
                bucket.append(argument)
    return Tags({keyword: tuple(arguments) for keyword, arguments in collected.items()})


__all__ = [
    "FORCE_TAG",
    "GRPC_ADDR_TAG",
    "GRPC_CLIENT_TAG",
    "GRPC_SERVER_TAG",
    "GRPC_TAG",
    "LOGGING_MIDDLEWARE_TAG",
    "MAIN_TAG",
    "MIDDLEWARE_TAG",
    "PROTOBUF_TAG",
    "RECOVER_MIDDLEWARE_TAG",
    "TAG_MARK",
    "Tags",
    "parse_tag_line",
    "parse_tags",
]
