"""Go syntax rendering for type expressions.

``render_type`` is a single recursive descent over the closed type-expression
union so every template renders fields and parameters the same way.
Qualified names are resolved through an :class:`ImportSet`, which records the
import paths a generated file needs and hands out package aliases.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional, Set

from .models import (
    Array,
    Field,
    InlineInterface,
    Map,
    Named,
    Pointer,
    Signature,
    Slice,
    TypeExpr,
    Variadic,
)
from .naming import to_lower_first

_NON_IDENT = re.compile(r"[^A-Za-z0-9_]")
_VERSION_SUFFIX = re.compile(r"^v[0-9]+$")


def package_alias(path: str) -> str:
    """Return the conventional package name for an import path."""
    segments = [segment for segment in path.strip("/").split("/") if segment]
    if not segments:
        raise ValueError("import path must not be empty")
    name = segments[-1]
    # gopkg.in/yaml.v2 style and module major versions: github.com/x/y/v2
    if _VERSION_SUFFIX.match(name) and len(segments) > 1:
        name = segments[-2]
    name = name.split(".")[0]
    name = _NON_IDENT.sub("", name)
    return name or "pkg"


class ImportSet:
    """Collects import paths used by one generated file.

    ``present`` maps paths a file already imports to their aliases; they keep
    those aliases and are left out of ``new_lines``.
    """

    def __init__(
        self, local_path: str | None = None, present: Mapping[str, str] | None = None
    ) -> None:
        self._local_path = local_path or None
        self._aliases: Dict[str, str] = {}
        self._taken: Dict[str, str] = {}
        self._present: Set[str] = set()
        for path, alias in (present or {}).items():
            # Blank and dot imports cannot be referenced through a selector.
            if alias in ("_", "."):
                continue
            self._aliases[path] = alias
            self._taken[alias] = path
            self._present.add(path)

    def add(self, path: str, alias: str | None = None) -> Optional[str]:
        """Register ``path`` and return its alias; None for the file's own package."""
        if self._local_path is not None and path == self._local_path:
            return None
        existing = self._aliases.get(path)
        if existing is not None:
            return existing
        base = alias or package_alias(path)
        candidate = base
        counter = 1
        while candidate in self._taken:
            candidate = f"{base}{counter}"
            counter += 1
        self._aliases[path] = candidate
        self._taken[candidate] = path
        return candidate

    def alias(self, path: str) -> Optional[str]:
        return self._aliases.get(path)

    def paths(self) -> List[str]:
        return sorted(self._aliases)

    def __len__(self) -> int:
        return len(self._aliases)

    def __contains__(self, path: object) -> bool:
        return path in self._aliases

    def lines(self) -> List[str]:
        """Import specs sorted by path, aliased only when the alias differs from the package name."""
        return [self.spec(path) for path in self.paths()]

    def new_lines(self) -> List[str]:
        """Like ``lines`` but without the paths passed as ``present``."""
        return [self.spec(path) for path in self.paths() if path not in self._present]

    def spec(self, path: str) -> str:
        alias = self._aliases[path]
        if alias == package_alias(path):
            return f'"{path}"'
        return f'{alias} "{path}"'

    def render(self) -> str:
        specs = self.lines()
        if not specs:
            return ""
        if len(specs) == 1:
            return f"import {specs[0]}"
        body = "\n".join(f"\t{spec}" for spec in specs)
        return f"import (\n{body}\n)"


def render_type(
    expr: TypeExpr,
    use_ellipsis: bool = False,
    imports: ImportSet | None = None,
) -> str:
    """Render ``expr`` as Go syntax.

    ``use_ellipsis`` selects how a variadic type is spelled: ``...T`` in a
    parameter list, ``[]T`` when the same field is stored in a struct.
    """
    return _render(expr, use_ellipsis, imports, qualify=True)


def _render(
    expr: TypeExpr,
    use_ellipsis: bool,
    imports: ImportSet | None,
    *,
    qualify: bool,
) -> str:
    if isinstance(expr, Named):
        return _render_named(expr, imports, qualify=qualify)
    if isinstance(expr, Pointer):
        return "*" * expr.depth + _render(expr.inner, use_ellipsis, imports, qualify=qualify)
    if isinstance(expr, Slice):
        return "[]" + _render(expr.inner, use_ellipsis, imports, qualify=qualify)
    if isinstance(expr, Array):
        return f"[{expr.length}]" + _render(expr.inner, use_ellipsis, imports, qualify=qualify)
    if isinstance(expr, Map):
        key = _render(expr.key, False, imports, qualify=False)
        value = _render(expr.value, False, imports, qualify=qualify)
        return f"map[{key}]{value}"
    if isinstance(expr, InlineInterface):
        return _render_interface(expr, imports)
    if isinstance(expr, Variadic):
        marker = "..." if use_ellipsis else "[]"
        return marker + _render(expr.inner, use_ellipsis, imports, qualify=qualify)
    raise TypeError(f"unsupported type expression: {expr!r}")


def _render_named(expr: Named, imports: ImportSet | None, *, qualify: bool) -> str:
    if not expr.qualifier or not qualify:
        return expr.name
    alias = imports.add(expr.qualifier) if imports is not None else package_alias(expr.qualifier)
    if alias is None:
        return expr.name
    return f"{alias}.{expr.name}"


def _render_interface(expr: InlineInterface, imports: ImportSet | None) -> str:
    if not expr.methods:
        return "interface{}"
    methods = "; ".join(render_signature(method, imports) for method in expr.methods)
    return f"interface{{ {methods} }}"


def render_field(field: Field, use_ellipsis: bool = True, imports: ImportSet | None = None) -> str:
    """Render ``name type`` with the name unexported, as in a parameter list."""
    rendered = render_type(field.type, use_ellipsis, imports)
    if not field.name:
        return rendered
    return f"{to_lower_first(field.name)} {rendered}"


def render_params(fields: Iterable[Field], imports: ImportSet | None = None) -> str:
    """Render a parameter list body: ``ctx context.Context, text string``."""
    return ", ".join(render_field(field, True, imports) for field in fields)


def render_results(fields: Iterable[Field], imports: ImportSet | None = None) -> str:
    """Render a result list including parentheses, empty string for no results."""
    items = list(fields)
    if not items:
        return ""
    return f"({render_params(items, imports)})"


def render_signature(signature: Signature, imports: ImportSet | None = None) -> str:
    """Render ``Name(args) (results)``."""
    results = render_results(signature.results, imports)
    head = f"{signature.name}({render_params(signature.args, imports)})"
    return f"{head} {results}" if results else head


__all__ = [
    "ImportSet",
    "package_alias",
    "render_field",
    "render_params",
    "render_results",
    "render_signature",
    "render_type",
]
