"""Inspection and patching of Go files that already exist on disk.

Only top-level declarations and the import section are looked at, which is
all that appending generated methods to a file requires.
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, Set

from .types import package_alias

_FUNC = re.compile(
    r"^func\s+(?:\(\s*(?:[A-Za-z_]\w*\s+)?\*?\s*([A-Za-z_]\w*)\s*\)\s*)?([A-Za-z_]\w*)\s*\(",
    re.MULTILINE,
)
_PACKAGE = re.compile(r"^package\s+\w+[^\n]*(?:\n|$)", re.MULTILINE)
_IMPORT_BLOCK = re.compile(r"^import\s*\((.*?)^\)", re.MULTILINE | re.DOTALL)
_IMPORT_LINE = re.compile(r'^import\s+((?:[\w.]+\s+)?"[^"]+")[^\n]*(?:\n|$)', re.MULTILINE)
_IMPORT_SPEC = re.compile(r'^\s*(?:([\w.]+)\s+)?"([^"]+)"', re.MULTILINE)


def function_key(name: str, receiver: str | None = None) -> str:
    """``Name`` for a function, ``Type.Name`` for a method of ``Type``."""
    return f"{receiver}.{name}" if receiver else name


def declared_functions(source: str) -> Set[str]:
    """Keys (see ``function_key``) of every top-level func declaration."""
    return {function_key(name, receiver) for receiver, name in _FUNC.findall(source)}


def imported_paths(source: str) -> Dict[str, str]:
    """Map each imported path to the name it is referenced by."""
    imports: Dict[str, str] = {}
    for block in _IMPORT_BLOCK.findall(source):
        for alias, path in _IMPORT_SPEC.findall(block):
            imports[path] = alias or package_alias(path)
    for spec in _IMPORT_LINE.findall(source):
        match = _IMPORT_SPEC.match(spec)
        if match:
            alias, path = match.groups()
            imports[path] = alias or package_alias(path)
    return imports


def add_imports(source: str, specs: Iterable[str]) -> str:
    """Insert import ``specs`` (``"time"``, ``kitlog "github.com/..."``) into ``source``.

    Specs join the first import block; a lone ``import "x"`` line becomes a
    block; a file without imports gets a new declaration after its package
    clause. Raises ``ValueError`` when there is no package clause.
    """
    specs = list(specs)
    if not specs:
        return source
    lines = "".join(f"\t{spec}\n" for spec in specs)

    block = _IMPORT_BLOCK.search(source)
    if block:
        at = block.end(1)
        return source[:at] + lines + source[at:]

    single = _IMPORT_LINE.search(source)
    if single:
        merged = f"import (\n\t{single.group(1)}\n{lines})\n"
        return source[: single.start()] + merged + source[single.end() :]

    package = _PACKAGE.search(source)
    if package is None:
        raise ValueError("no package clause")
    head = source[: package.end()]
    if not head.endswith("\n"):
        head += "\n"
    if len(specs) == 1:
        declaration = f"\nimport {specs[0]}\n"
    else:
        declaration = f"\nimport (\n{lines})\n"
    return head + declaration + source[package.end() :]


__all__ = ["add_imports", "declared_functions", "function_key", "imported_paths"]
