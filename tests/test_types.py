"""Tests for the type-expression model and its Go renderer."""

from __future__ import annotations

import pytest

from microgen.models import (
    Array,
    Field,
    InlineInterface,
    Interface,
    Map,
    Named,
    Pointer,
    Signature,
    Slice,
    Variadic,
)
from microgen.types import ImportSet, package_alias, render_params, render_signature, render_type

ENTITY = "github.com/acme/stringsvc/entity"


@pytest.mark.parametrize(
    ("expr", "expected"),
    [
        (Named("string"), "string"),
        (Named("Visit", ENTITY), "entity.Visit"),
        (Pointer(Named("Visit", ENTITY)), "*entity.Visit"),
        (Pointer(Named("int"), depth=3), "***int"),
        (Slice(Named("byte")), "[]byte"),
        (Array(4, Named("byte")), "[4]byte"),
        (Array(0, Named("int")), "[0]int"),
        (Map(Named("string"), Slice(Named("int"))), "map[string][]int"),
        (InlineInterface(), "interface{}"),
    ],
)
def test_render_type_covers_every_variant(expr, expected) -> None:
    assert render_type(expr) == expected


def test_render_type_nests_arbitrarily() -> None:
    expr = Slice(Pointer(Map(Named("string"), Named("Visit", ENTITY))))

    assert render_type(expr) == "[]*map[string]entity.Visit"


def test_variadic_spelling_depends_on_position() -> None:
    expr = Variadic(Named("string"))

    assert render_type(expr, use_ellipsis=True) == "...string"
    assert render_type(expr, use_ellipsis=False) == "[]string"


def test_map_key_is_rendered_without_qualifier() -> None:
    imports = ImportSet()
    expr = Map(Named("ID", ENTITY), Named("Visit", ENTITY))

    assert render_type(expr, False, imports) == "map[ID]entity.Visit"
    assert imports.paths() == [ENTITY]


def test_map_key_never_uses_ellipsis() -> None:
    expr = Variadic(Map(Named("string"), Variadic(Named("int"))))

    assert render_type(expr, use_ellipsis=True) == "...map[string][]int"


def test_inline_interface_with_methods_is_single_line() -> None:
    expr = InlineInterface(
        (
            Signature("Close", results=(Field("", Named("error")),)),
            Signature("Name"),
        )
    )

    assert render_type(expr) == "interface{ Close() (error); Name() }"


def test_render_type_rejects_unknown_variants() -> None:
    with pytest.raises(TypeError):
        render_type("string")  # type: ignore[arg-type]


def test_model_rejects_invalid_values() -> None:
    with pytest.raises(ValueError):
        Named("")
    with pytest.raises(ValueError):
        Pointer(Named("int"), depth=0)
    with pytest.raises(ValueError):
        Array(-1, Named("int"))


def test_model_is_immutable_and_hashable() -> None:
    signature = Signature("Ping", args=[Field("ctx", Named("Context", "context"))])

    assert isinstance(signature.args, tuple)
    assert hash(Slice(Named("int"))) == hash(Slice(Named("int")))
    with pytest.raises(AttributeError):
        signature.name = "Pong"  # type: ignore[misc]


def test_interface_exposes_tags_and_method_lookup() -> None:
    iface = Interface(
        "Svc",
        methods=(Signature("Ping"),),
        docs=("// Svc does things.", "// @microgen middleware, logging"),
    )

    assert iface.tags.contains("microgen", "logging")
    assert iface.method("Ping") is iface.methods[0]
    assert iface.method("Missing") is None


def test_import_set_assigns_unique_aliases() -> None:
    imports = ImportSet(local_path="github.com/acme/stringsvc")

    assert imports.add("github.com/acme/stringsvc") is None
    assert imports.add("github.com/acme/a/log") == "log"
    assert imports.add("github.com/go-kit/kit/log") == "log1"
    assert imports.add("github.com/acme/a/log") == "log"
    assert len(imports) == 2
    assert imports.render() == (
        "import (\n"
        '\t"github.com/acme/a/log"\n'
        '\tlog1 "github.com/go-kit/kit/log"\n'
        ")"
    )


def test_import_set_renders_single_import_inline() -> None:
    imports = ImportSet()
    imports.add("context")

    assert imports.render() == 'import "context"'
    assert ImportSet().render() == ""


@pytest.mark.parametrize(
    ("path", "alias"),
    [
        ("context", "context"),
        ("github.com/go-kit/kit/transport/grpc", "grpc"),
        ("gopkg.in/yaml.v2", "yaml"),
        ("github.com/jackc/pgx/v5", "pgx"),
        ("github.com/acme/go-utils", "goutils"),
    ],
)
def test_package_alias(path: str, alias: str) -> None:
    assert package_alias(path) == alias


def test_render_params_and_signature() -> None:
    signature = Signature(
        "Count",
        args=(
            Field("ctx", Named("Context", "context")),
            Field("Text", Named("string")),
            Field("opts", Variadic(Named("Option"))),
        ),
        results=(Field("count", Named("int")), Field("err", Named("error"))),
    )

    assert render_params(signature.args) == "ctx context.Context, text string, opts ...Option"
    assert render_signature(signature) == (
        "Count(ctx context.Context, text string, opts ...Option) (count int, err error)"
    )
