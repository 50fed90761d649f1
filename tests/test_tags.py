"""Tests for documentation tag parsing."""

from __future__ import annotations

from microgen.tags import parse_tag_line, parse_tags


def test_parse_tag_line() -> None:
    assert parse_tag_line("// @microgen middleware, logging") == ("microgen", ("middleware", "logging"))
    assert parse_tag_line("  // @Force  ") == ("force", ())
    assert parse_tag_line("// plain comment") is None
    assert parse_tag_line("// @") is None


def test_parse_tags_accumulates_repeated_keywords() -> None:
    tags = parse_tags(
        [
            "// Service description.",
            "// @microgen middleware",
            "// @microgen logging, middleware",
            "// @protobuf github.com/acme/protobuf",
        ]
    )

    assert tags.arguments("microgen") == ("middleware", "logging")
    assert tags.first("protobuf") == "github.com/acme/protobuf"
    assert set(tags) == {"microgen", "protobuf"}


def test_tag_lookups_on_missing_keywords() -> None:
    tags = parse_tags(["// @force"])

    assert tags.has("force")
    assert not tags.has("microgen")
    assert tags.arguments("microgen") == ()
    assert tags.first("force") is None
    assert tags.first("protobuf", "fallback") == "fallback"
    assert not tags.contains("microgen", "grpc")


def test_contains_matches_any_value() -> None:
    tags = parse_tags(["// @microgen grpc-server"])

    assert tags.contains("microgen", "grpc", "grpc-server")
    assert not tags.contains("microgen", "grpc")
