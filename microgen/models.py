"""Interface model consumed by the generation engine.

Type expressions form a closed union of six variants. The model is produced
once by a front-end (see :mod:`microgen.loader`) and never mutated afterwards,
so every container is stored as a tuple.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

from .tags import Tags, parse_tags


@dataclass(frozen=True)
class Named:
    """Plain or import-qualified type name, e.g. ``string`` or ``entity.Visit``."""

    name: str
    qualifier: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("named type requires a name")


@dataclass(frozen=True)
class Pointer:
    inner: "TypeExpr"
    depth: int = 1

    def __post_init__(self) -> None:
        if self.depth < 1:
            raise ValueError(f"pointer depth must be >= 1, got {self.depth}")


@dataclass(frozen=True)
class Slice:
    inner: "TypeExpr"


@dataclass(frozen=True)
class Array:
    length: int
    inner: "TypeExpr"

    def __post_init__(self) -> None:
        if self.length < 0:
            raise ValueError(f"array length must be >= 0, got {self.length}")


@dataclass(frozen=True)
class Map:
    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(frozen=True)
class InlineInterface:
    methods: Tuple["Signature", ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", tuple(self.methods))


@dataclass(frozen=True)
class Variadic:
    """``...T``; only legal as the type of the last argument."""

    inner: "TypeExpr"


TypeExpr = Union[Named, Pointer, Slice, Array, Map, InlineInterface, Variadic]

TYPE_EXPR_VARIANTS = (Named, Pointer, Slice, Array, Map, InlineInterface, Variadic)


@dataclass(frozen=True)
class Field:
    """Named, typed argument, result or struct field."""

    name: str
    type: TypeExpr


@dataclass(frozen=True)
class Signature:
    """A single interface method with positional args and results."""

    name: str
    args: Tuple[Field, ...] = ()
    results: Tuple[Field, ...] = ()
    docs: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "results", tuple(self.results))
        object.__setattr__(self, "docs", tuple(self.docs))

    @property
    def tags(self) -> Tags:
        return parse_tags(self.docs)


@dataclass(frozen=True)
class Interface:
    """Service interface: the unit the whole engine operates over."""

    name: str
    methods: Tuple[Signature, ...] = ()
    docs: Tuple[str, ...] = ()
    package: str = ""
    import_path: str = ""
    _tags: Tags = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "methods", tuple(self.methods))
        object.__setattr__(self, "docs", tuple(self.docs))
        object.__setattr__(self, "_tags", parse_tags(self.docs))

    @property
    def tags(self) -> Tags:
        return self._tags

    def method(self, name: str) -> Signature | None:
        for signature in self.methods:
            if signature.name == name:
                return signature
        return None


__all__ = [
    "Array",
    "Field",
    "InlineInterface",
    "Interface",
    "Map",
    "Named",
    "Pointer",
    "Signature",
    "Slice",
    "TYPE_EXPR_VARIANTS",
    "TypeExpr",
    "Variadic",
]
