"""Rendering helpers shared by the Go templates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from ..gosource import declared_functions, function_key
from ..models import Field, Interface, Named, Signature, Variadic
from ..naming import last_upper_or_first, to_lower_first, to_snake_case, to_upper_first
from ..rules import (
    DEFAULT_ERROR_NAME,
    is_context_first,
    is_error_last,
    last_result_error_name,
    remove_context_if_first,
    remove_error_if_last,
)
from ..types import ImportSet, render_params, render_type

PACKAGE_PATH_CONTEXT = "context"
PACKAGE_PATH_NET_CONTEXT = "golang.org/x/net/context"
PACKAGE_PATH_GO_KIT_ENDPOINT = "github.com/go-kit/kit/endpoint"
PACKAGE_PATH_GO_KIT_LOG = "github.com/go-kit/kit/log"
PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC = "github.com/go-kit/kit/transport/grpc"
PACKAGE_PATH_GOOGLE_GRPC = "google.golang.org/grpc"
PACKAGE_PATH_EMPTY_PROTOBUF = "github.com/golang/protobuf/ptypes/empty"
PACKAGE_PATH_TIME = "time"
PACKAGE_PATH_FMT = "fmt"

ELLIPSIS_COMMENT = "// This field was defined with ellipsis (...)."


@dataclass
class MethodView:
    """Pre-rendered pieces of one interface method, ready for a Jinja layout."""

    name: str
    signature: Signature
    definition: str
    args: Tuple[Field, ...]
    results: Tuple[Field, ...]
    request: Tuple[Field, ...]
    response: Tuple[Field, ...]
    call_args: str
    has_context: bool
    context_name: str
    has_error: bool
    error_name: str


def request_struct_name(signature: Signature) -> str:
    return signature.name + "Request"


def response_struct_name(signature: Signature) -> str:
    return signature.name + "Response"


def endpoint_struct_name(method_name: str) -> str:
    return method_name + "Endpoint"


def struct_field_name(field: Field) -> str:
    return to_upper_first(field.name)


def name_results(results: Sequence[Field]) -> Tuple[Field, ...]:
    """Give anonymous results usable names so they can be logged and stored."""
    if all(result.name for result in results):
        return tuple(results)
    named: List[Field] = []
    last = len(results) - 1
    for index, result in enumerate(results):
        if result.name:
            named.append(result)
        elif index == last and is_error_last(results):
            named.append(Field(DEFAULT_ERROR_NAME, result.type))
        else:
            named.append(Field(f"res{index}", result.type))
    return tuple(named)


def align_columns(rows: Iterable[Sequence[str]]) -> List[str]:
    """Left-align columns the way gofmt aligns struct fields."""
    materialised = [list(row) for row in rows]
    if not materialised:
        return []
    width = max(len(row) for row in materialised)
    widths = [0] * width
    for row in materialised:
        for index, cell in enumerate(row[:-1]):
            widths[index] = max(widths[index], len(cell))
    lines: List[str] = []
    for row in materialised:
        cells = [cell.ljust(widths[index]) for index, cell in enumerate(row[:-1])]
        cells.append(row[-1])
        lines.append(" ".join(cell for cell in cells if cell != "").rstrip())
    return lines


def struct_fields(fields: Sequence[Field], imports: ImportSet) -> List[str]:
    """Render exchange struct fields with json tags.

        Visit *entity.Visit `json:"visit"`
    """
    rows = []
    for field in fields:
        row = [
            struct_field_name(field),
            render_type(field.type, False, imports),
            f'`json:"{to_snake_case(field.name)}"`',
        ]
        if isinstance(field.type, Variadic):
            row.append(ELLIPSIS_COMMENT)
        else:
            row.append("")
        rows.append(row)
    return align_columns(rows)


def param_names(fields: Sequence[Field]) -> str:
    """Call-site argument list: ``ctx, text, opts...``."""
    names = []
    for field in fields:
        name = to_lower_first(field.name)
        if isinstance(field.type, Variadic):
            name += "..."
        names.append(name)
    return ", ".join(names)


def dict_by_variables(fields: Sequence[Field], source: str = "") -> List[str]:
    """Composite literal entries ``Text: text`` (or ``Text: req.Text``), aligned."""
    rows = []
    for field in fields:
        value = f"{source}.{struct_field_name(field)}" if source else to_lower_first(field.name)
        rows.append([struct_field_name(field) + ":", value + ","])
    return align_columns(rows)


def function_definition(signature: Signature, imports: ImportSet) -> str:
    """``Count(ctx context.Context, text string) (count int, err error)``."""
    results = name_results(signature.results)
    rendered = f"{signature.name}({render_params(signature.args, imports)})"
    if results:
        rendered += f" ({render_params(results, imports)})"
    return rendered


def method_definition(receiver_type: str, signature: Signature, imports: ImportSet) -> str:
    """``func (e *Endpoints) Count(ctx context.Context, text string) (count int)``."""
    receiver = last_upper_or_first(receiver_type)
    return f"func ({receiver} *{receiver_type}) {function_definition(signature, imports)}"


def method_view(signature: Signature, imports: ImportSet, receiver_type: str | None = None) -> MethodView:
    results = name_results(signature.results)
    has_context = is_context_first(signature.args)
    has_error = is_error_last(results)
    error_name = last_result_error_name(Signature(signature.name, signature.args, results))
    if receiver_type:
        definition = method_definition(receiver_type, signature, imports)
    else:
        definition = function_definition(signature, imports)
    return MethodView(
        name=signature.name,
        signature=signature,
        definition=definition,
        args=signature.args,
        results=results,
        request=remove_context_if_first(signature.args),
        response=remove_error_if_last(results),
        call_args=param_names(signature.args),
        has_context=has_context,
        context_name=to_lower_first(signature.args[0].name) if has_context else "",
        has_error=has_error,
        # Parameter names are lowered on render; the error variable must match.
        error_name=to_lower_first(error_name),
    )


def service_type(iface: Interface, imports: ImportSet, import_path: str, package: str) -> str:
    """Qualified reference to the service interface from another package."""
    if not import_path:
        return iface.name
    alias = imports.add(import_path, alias=package)
    return f"{alias}.{iface.name}" if alias else iface.name


def context_type(imports: ImportSet, path: str = PACKAGE_PATH_CONTEXT) -> str:
    return render_type(Named("Context", path), False, imports)


def context_background(imports: ImportSet) -> str:
    """Expression used when a method has no context argument to forward."""
    alias = imports.add(PACKAGE_PATH_CONTEXT)
    return f"{alias}.Background()"


def missing_methods(existing: str, receiver_type: str, signatures: Iterable[Signature]) -> List[Signature]:
    """Signatures whose ``receiver_type`` method is not declared in ``existing`` Go source."""
    declared = declared_functions(existing)
    return [
        signature
        for signature in signatures
        if function_key(signature.name, receiver_type) not in declared
    ]


__all__ = [
    "ELLIPSIS_COMMENT",
    "MethodView",
    "align_columns",
    "context_background",
    "context_type",
    "dict_by_variables",
    "endpoint_struct_name",
    "function_definition",
    "method_definition",
    "method_view",
    "missing_methods",
    "name_results",
    "param_names",
    "request_struct_name",
    "response_struct_name",
    "service_type",
    "struct_field_name",
    "struct_fields",
]
