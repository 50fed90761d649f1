"""go-kit gRPC server transport (transport/grpc/server.go)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..errors import ConfigError
from ..models import Named, Signature
from ..naming import last_upper_or_first, to_lower_first
from ..rules import remove_context_if_first, remove_error_if_last
from ..tags import GRPC_SERVER_TAG, GRPC_TAG
from ..types import ImportSet, render_type
from .base import Template
from .common import (
    PACKAGE_PATH_EMPTY_PROTOBUF,
    PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC,
    PACKAGE_PATH_NET_CONTEXT,
    align_columns,
    context_type,
    endpoint_struct_name,
    name_results,
    request_struct_name,
    response_struct_name,
)

TRANSPORT_GRPC_PACKAGE = "transportgrpc"
GO_KIT_GRPC_ALIAS = "grpckit"
CONVERTER_ALIAS = "converter"


def converter_path(service_import_path: str) -> str:
    return service_import_path.rstrip("/") + "/transport/converter/protobuf"


def request_decode_name(signature: Signature) -> str:
    return f"Decode{request_struct_name(signature)}"


def request_encode_name(signature: Signature) -> str:
    return f"Encode{request_struct_name(signature)}"


def response_encode_name(signature: Signature) -> str:
    return f"Encode{response_struct_name(signature)}"


def response_decode_name(signature: Signature) -> str:
    return f"Decode{response_struct_name(signature)}"


def protobuf_request_type(signature: Signature, protobuf_package: str, imports: ImportSet) -> str:
    """Protobuf request message; ``empty.Empty`` when nothing is left after stripping context."""
    if not remove_context_if_first(signature.args):
        return render_type(Named("Empty", PACKAGE_PATH_EMPTY_PROTOBUF), False, imports)
    return render_type(Named(request_struct_name(signature), protobuf_package), False, imports)


def protobuf_response_type(signature: Signature, protobuf_package: str, imports: ImportSet) -> str:
    if not remove_error_if_last(name_results(signature.results)):
        return render_type(Named("Empty", PACKAGE_PATH_EMPTY_PROTOBUF), False, imports)
    return render_type(Named(response_struct_name(signature), protobuf_package), False, imports)


@dataclass
class ServerMethod:
    name: str
    handler: str
    endpoint: str
    decode: str
    encode: str
    request_type: str
    response_type: str


class GRPCServerTemplate(Template):
    """Renders the gRPC server that serves the service endpoints.

        func (s *stringServiceServer) Count(ctx context.Context, req *stringsvc.CountRequest) (*stringsvc.CountResponse, error) {
            _, resp, err := s.count.ServeGRPC(ctx, req)
            if err != nil {
                return nil, err
            }
            return resp.(*stringsvc.CountResponse), nil
        }
    """

    name = "grpc-server"
    participation = (GRPC_TAG, GRPC_SERVER_TAG)
    force_categories = (GRPC_TAG, GRPC_SERVER_TAG)

    def configure(self) -> None:
        if not self.info.protobuf_package:
            raise ConfigError("protobuf package is empty: set it with --protobuf or a // @protobuf tag")

    def default_path(self) -> str:
        return "transport/grpc/server.go"

    def render(self) -> str:
        iface = self.info.interface
        protobuf = self.info.protobuf_package or ""
        imports = ImportSet()
        struct = to_lower_first(iface.name) + "Server"

        imports.add(PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC, alias=GO_KIT_GRPC_ALIAS)
        if self.info.service_import_path:
            imports.add(self.info.service_import_path, alias=self.info.package_name)
        handler_type = render_type(
            Named("Handler", PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC), False, imports
        )
        fields = align_columns(
            [to_lower_first(signature.name), handler_type] for signature in iface.methods
        )
        endpoints_type = render_type(Named("Endpoints", self.info.service_import_path), False, imports)
        converter = converter_path(self.info.service_import_path)
        imports.add(converter, alias=CONVERTER_ALIAS)

        methods: List[ServerMethod] = []
        for signature in iface.methods:
            methods.append(
                ServerMethod(
                    name=signature.name,
                    handler=to_lower_first(signature.name),
                    endpoint=endpoint_struct_name(signature.name),
                    decode=render_type(Named(request_decode_name(signature), converter), False, imports),
                    encode=render_type(Named(response_encode_name(signature), converter), False, imports),
                    request_type="*" + protobuf_request_type(signature, protobuf, imports),
                    response_type="*" + protobuf_response_type(signature, protobuf, imports),
                )
            )

        return self._render_file(
            "grpc_server.go.j2",
            package=TRANSPORT_GRPC_PACKAGE,
            imports=imports,
            struct=struct,
            receiver=last_upper_or_first(struct),
            fields=fields,
            endpoints_type=endpoints_type,
            server_option=render_type(
                Named("ServerOption", PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC), False, imports
            ),
            server_interface=render_type(Named(iface.name + "Server", protobuf), False, imports),
            new_server=render_type(Named("NewServer", PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC), False, imports),
            context=context_type(imports, PACKAGE_PATH_NET_CONTEXT),
            methods=methods,
        )


__all__ = [
    "CONVERTER_ALIAS",
    "GO_KIT_GRPC_ALIAS",
    "GRPCServerTemplate",
    "TRANSPORT_GRPC_PACKAGE",
    "converter_path",
]
