"""go-kit endpoints set (endpoints.go)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..models import Named, Variadic
from ..naming import last_upper_or_first, to_lower_first
from ..types import ImportSet, render_type
from .base import Template
from .common import (
    PACKAGE_PATH_GO_KIT_ENDPOINT,
    MethodView,
    align_columns,
    context_background,
    context_type,
    dict_by_variables,
    endpoint_struct_name,
    method_view,
    request_struct_name,
    response_struct_name,
    struct_field_name,
)

_RECEIVER_TYPE = "Endpoints"


@dataclass
class EndpointMethod:
    name: str
    endpoint: str
    definition: str
    client_body: List[str]
    server_body: List[str]


class EndpointsTemplate(Template):
    """Renders the ``Endpoints`` set.

    ``Endpoints`` implements the service interface on the client side by
    packing arguments into the request exchange, and ``<Method>Endpoint``
    adapts a service implementation into a go-kit endpoint on the server side.
    """

    name = "endpoints"

    def default_path(self) -> str:
        return "endpoints.go"

    def render(self) -> str:
        imports = ImportSet(local_path=self.info.service_import_path)
        endpoint_type = render_type(Named("Endpoint", PACKAGE_PATH_GO_KIT_ENDPOINT), False, imports)
        fields = align_columns(
            [endpoint_struct_name(signature.name), endpoint_type]
            for signature in self.info.interface.methods
        )
        methods = []
        for signature in self.info.interface.methods:
            view = method_view(signature, imports, receiver_type=_RECEIVER_TYPE)
            methods.append(
                EndpointMethod(
                    name=view.name,
                    endpoint=endpoint_struct_name(view.name),
                    definition=view.definition,
                    client_body=self._client_body(view, imports),
                    server_body=self._server_body(view),
                )
            )
        return self._render_file(
            "endpoints.go.j2",
            package=self.info.package_name,
            imports=imports,
            fields=fields,
            methods=methods,
            service=self.info.interface.name,
            endpoint_type=endpoint_type,
            context=context_type(imports),
        )

    @staticmethod
    def _client_body(view: MethodView, imports: ImportSet) -> List[str]:
        request_var = f"endpoint{view.name}Request"
        response_var = f"endpoint{view.name}Response"
        request_type = request_struct_name(view.signature)
        response_type = response_struct_name(view.signature)
        receiver = last_upper_or_first(_RECEIVER_TYPE)

        lines: List[str] = []
        if view.request:
            lines.append(f"{request_var} := {request_type}{{")
            lines.extend(f"\t{entry}" for entry in dict_by_variables(view.request))
            lines.append("}")
        else:
            lines.append(f"{request_var} := {request_type}{{}}")

        ctx = view.context_name or context_background(imports)
        call = f"{receiver}.{endpoint_struct_name(view.name)}({ctx}, &{request_var})"
        response_values = [
            f"{response_var}.(*{response_type}).{struct_field_name(field)}" for field in view.response
        ]

        if view.has_error:
            if view.response:
                lines.append(f"{response_var}, {view.error_name} := {call}")
                lines.append(f"if {view.error_name} != nil {{")
                lines.append("\treturn")
                lines.append("}")
                lines.append("return " + ", ".join(response_values + [view.error_name]))
            else:
                lines.append(f"_, {view.error_name} = {call}")
                lines.append("return")
        elif view.response:
            lines.append(f"{response_var}, _ := {call}")
            lines.append("return " + ", ".join(response_values))
        else:
            lines.append(call)
        return lines

    @staticmethod
    def _server_body(view: MethodView) -> List[str]:
        request_type = request_struct_name(view.signature)
        response_type = response_struct_name(view.signature)

        lines: List[str] = []
        if view.request:
            lines.append(f"req := request.(*{request_type})")

        arguments = []
        for index, field in enumerate(view.args):
            if index == 0 and view.has_context:
                arguments.append("ctx")
                continue
            value = f"req.{struct_field_name(field)}"
            if isinstance(field.type, Variadic):
                value += "..."
            arguments.append(value)
        call = f"svc.{view.name}({', '.join(arguments)})"

        if view.results:
            targets = ", ".join(to_lower_first(field.name) for field in view.results)
            lines.append(f"{targets} := {call}")
        else:
            lines.append(call)

        entries = ", ".join(
            f"{struct_field_name(field)}: {to_lower_first(field.name)}" for field in view.response
        )
        error_value = view.error_name if view.has_error else "nil"
        lines.append(f"return &{response_type}{{{entries}}}, {error_value}")
        return lines


__all__ = ["EndpointsTemplate"]
