"""Load interface descriptions from YAML into the interface model.

A description looks like::

    name: StringService
    package: stringsvc
    import_path: github.com/acme/stringsvc
    docs:
      - "// @microgen middleware, logging, grpc"
      - "// @protobuf github.com/acme/protobuf"
    imports:
      entity: github.com/acme/stringsvc/entity
    methods:
      - "Count(ctx context.Context, text string) (count int, err error)"
      - name: Visit
        docs: ["// Visit records a page view."]
        args: ["ctx context.Context", "visit *entity.Visit"]
        results: ["err error"]

Type strings use Go syntax. Package selectors are resolved through
``imports``; selectors without an entry are taken as the import path itself,
which covers the standard library (``context``, ``time``).
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

import yaml

from .errors import LoaderError
from .logging import get_logger
from .models import (
    Array,
    Field,
    InlineInterface,
    Interface,
    Map,
    Named,
    Pointer,
    Signature,
    Slice,
    TypeExpr,
    Variadic,
)

logger = get_logger("loader")

_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_QUALIFIED = re.compile(r"^(?:([A-Za-z_][A-Za-z0-9_]*)\.)?([A-Za-z_][A-Za-z0-9_]*)$")
_TYPE_START = ("*", "[", "...", "map[", "interface{", "interface {")
_OPEN = "([{"
_CLOSE = ")]}"


def load_interface(path: Path) -> Interface:
    """Read the YAML description at ``path``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise LoaderError(f"{path}: {exc.strerror or exc}") from exc
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise LoaderError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise LoaderError(f"{path}: interface description must be a mapping")
    iface = interface_from_dict(data)
    logger.debug("Loaded interface %s with %d method(s) from %s", iface.name, len(iface.methods), path)
    return iface


def interface_from_dict(data: Mapping[str, Any]) -> Interface:
    name = data.get("name")
    if not isinstance(name, str) or not name:
        raise LoaderError("interface description requires a 'name'")
    imports = data.get("imports") or {}
    if not isinstance(imports, dict):
        raise LoaderError(f"{name}: 'imports' must map aliases to import paths")
    imports = {str(alias): str(target) for alias, target in imports.items()}

    raw_methods = data.get("methods") or []
    if not isinstance(raw_methods, list):
        raise LoaderError(f"{name}: 'methods' must be a list")
    methods = [_method_from_entry(entry, imports) for entry in raw_methods]

    return Interface(
        name=name,
        methods=tuple(methods),
        docs=tuple(_string_list(data.get("docs"), f"{name}.docs")),
        package=str(data.get("package") or ""),
        import_path=str(data.get("import_path") or ""),
    )


def _method_from_entry(entry: Any, imports: Dict[str, str]) -> Signature:
    if isinstance(entry, str):
        return parse_signature(entry, imports)
    if not isinstance(entry, dict):
        raise LoaderError(f"unsupported method entry: {entry!r}")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise LoaderError(f"method entry without a name: {entry!r}")
    args = [parse_field(item, imports) for item in _string_list(entry.get("args"), f"{name}.args")]
    results = [
        parse_field(item, imports) for item in _string_list(entry.get("results"), f"{name}.results")
    ]
    return Signature(
        name=name,
        args=tuple(args),
        results=tuple(results),
        docs=tuple(_string_list(entry.get("docs"), f"{name}.docs")),
    )


def _string_list(value: Any, where: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(item, str) for item in value):
        return list(value)
    raise LoaderError(f"{where}: expected a list of strings")


def parse_signature(text: str, imports: Mapping[str, str] | None = None) -> Signature:
    """Parse ``Name(args) results`` as written inside a Go interface."""
    text = text.strip()
    open_at = text.find("(")
    if open_at <= 0:
        raise LoaderError(f"invalid method signature: {text!r}")
    name = text[:open_at].strip()
    if not _IDENT.match(name):
        raise LoaderError(f"invalid method name in {text!r}")
    close_at = _matching(text, open_at)
    args = _parse_fields(_split_top_level(text[open_at + 1 : close_at]), imports)
    rest = text[close_at + 1 :].strip()
    if rest.startswith("("):
        end = _matching(rest, 0)
        if rest[end + 1 :].strip():
            raise LoaderError(f"unexpected text after results in {text!r}")
        results = _parse_fields(_split_top_level(rest[1:end]), imports)
    elif rest:
        results = [Field("", parse_type(rest, imports))]
    else:
        results = []
    return Signature(name, tuple(args), tuple(results))


def parse_field(text: str, imports: Mapping[str, str] | None = None) -> Field:
    """Parse ``name Type`` or a bare ``Type`` (anonymous field)."""
    text = text.strip()
    if not text:
        raise LoaderError("empty field")
    head, _, tail = text.partition(" ")
    tail = tail.strip()
    if not tail or text.startswith(_TYPE_START) or not _IDENT.match(head):
        return Field("", parse_type(text, imports))
    return Field(head, parse_type(tail, imports))


def _parse_fields(parts: Sequence[str], imports: Mapping[str, str] | None) -> List[Field]:
    """Parse a parameter list, expanding grouped names such as ``a, b int``."""
    fields = [parse_field(part, imports) for part in parts]
    if not any(field.name for field in fields):
        return fields
    expanded: List[Field] = []
    pending: List[str] = []
    for field in fields:
        if field.name:
            expanded.extend(Field(name, field.type) for name in pending)
            expanded.append(field)
            pending = []
            continue
        if not isinstance(field.type, Named) or field.type.qualifier is not None:
            raise LoaderError(f"mixed named and unnamed parameters: {', '.join(parts)}")
        pending.append(field.type.name)
    if pending:
        raise LoaderError(f"parameters without a type: {', '.join(pending)}")
    return expanded


def parse_type(text: str, imports: Mapping[str, str] | None = None) -> TypeExpr:
    """Parse a Go type string into a type expression."""
    imports = imports or {}
    text = text.strip()
    if not text:
        raise LoaderError("empty type")

    if text.startswith("..."):
        return Variadic(parse_type(text[3:], imports))

    if text.startswith("*"):
        stripped = text.lstrip("*")
        return Pointer(parse_type(stripped, imports), len(text) - len(stripped))

    if text.startswith("["):
        end = _matching(text, 0)
        length = text[1:end].strip()
        inner = parse_type(text[end + 1 :], imports)
        if not length:
            return Slice(inner)
        if not length.isdigit():
            raise LoaderError(f"unsupported array length in {text!r}")
        return Array(int(length), inner)

    if text.startswith("map["):
        end = _matching(text, 3)
        return Map(parse_type(text[4:end], imports), parse_type(text[end + 1 :], imports))

    if text.startswith("interface"):
        body = text[len("interface") :].strip()
        if not body.startswith("{") or _matching(body, 0) != len(body) - 1:
            raise LoaderError(f"invalid interface type: {text!r}")
        parts = [part for part in re.split(r"[;\n]", body[1:-1]) if part.strip()]
        return InlineInterface(tuple(parse_signature(part, imports) for part in parts))

    match = _QUALIFIED.match(text)
    if not match:
        raise LoaderError(f"unsupported type expression: {text!r}")
    selector, name = match.groups()
    if selector is None:
        return Named(name)
    return Named(name, imports.get(selector, selector))


def _matching(text: str, open_at: int) -> int:
    depth = 0
    for index in range(open_at, len(text)):
        char = text[index]
        if char in _OPEN:
            depth += 1
        elif char in _CLOSE:
            depth -= 1
            if depth == 0:
                return index
    raise LoaderError(f"unbalanced brackets in {text!r}")


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char in _OPEN:
            depth += 1
        elif char in _CLOSE:
            depth -= 1
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    tail = "".join(current)
    if tail.strip():
        parts.append(tail)
    return [part.strip() for part in parts if part.strip()]


__all__ = [
    "interface_from_dict",
    "load_interface",
    "parse_field",
    "parse_signature",
    "parse_type",
]
