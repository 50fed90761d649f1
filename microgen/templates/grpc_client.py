"""go-kit gRPC client transport (transport/grpc/client.go)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..errors import ConfigError
from ..models import Named
from ..tags import GRPC_CLIENT_TAG, GRPC_TAG
from ..types import ImportSet, package_alias, render_type
from .base import Template
from .common import (
    PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC,
    PACKAGE_PATH_GOOGLE_GRPC,
    endpoint_struct_name,
)
from .grpc_server import (
    CONVERTER_ALIAS,
    GO_KIT_GRPC_ALIAS,
    TRANSPORT_GRPC_PACKAGE,
    converter_path,
    protobuf_response_type,
    request_encode_name,
    response_decode_name,
)


@dataclass
class ClientMethod:
    name: str
    endpoint: str
    encode: str
    decode: str
    reply: str


class GRPCClientTemplate(Template):
    """Renders ``NewGRPCClient``, which returns the endpoints set wired to gRPC."""

    name = "grpc-client"
    participation = (GRPC_TAG, GRPC_CLIENT_TAG)
    force_categories = (GRPC_TAG, GRPC_CLIENT_TAG)

    def configure(self) -> None:
        if not self.info.protobuf_package:
            raise ConfigError("protobuf package is empty: set it with --protobuf or a // @protobuf tag")

    def default_path(self) -> str:
        return "transport/grpc/client.go"

    def service_name(self) -> str:
        """Fully qualified gRPC service name used on the wire."""
        if self.info.grpc_addr:
            return self.info.grpc_addr
        return f"{package_alias(self.info.protobuf_package or '')}.{self.info.interface.name}"

    def render(self) -> str:
        iface = self.info.interface
        protobuf = self.info.protobuf_package or ""
        imports = ImportSet()
        imports.add(PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC, alias=GO_KIT_GRPC_ALIAS)
        if self.info.service_import_path:
            imports.add(self.info.service_import_path, alias=self.info.package_name)
        converter = converter_path(self.info.service_import_path)
        imports.add(converter, alias=CONVERTER_ALIAS)

        methods: List[ClientMethod] = []
        for signature in iface.methods:
            methods.append(
                ClientMethod(
                    name=signature.name,
                    endpoint=endpoint_struct_name(signature.name),
                    encode=render_type(Named(request_encode_name(signature), converter), False, imports),
                    decode=render_type(Named(response_decode_name(signature), converter), False, imports),
                    reply=protobuf_response_type(signature, protobuf, imports),
                )
            )

        return self._render_file(
            "grpc_client.go.j2",
            package=TRANSPORT_GRPC_PACKAGE,
            imports=imports,
            client_conn=render_type(Named("ClientConn", PACKAGE_PATH_GOOGLE_GRPC), False, imports),
            client_option=render_type(
                Named("ClientOption", PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC), False, imports
            ),
            service=render_type(Named(iface.name, self.info.service_import_path), False, imports),
            endpoints_type=render_type(Named("Endpoints", self.info.service_import_path), False, imports),
            new_client=render_type(Named("NewClient", PACKAGE_PATH_GO_KIT_TRANSPORT_GRPC), False, imports),
            service_name=self.service_name(),
            methods=methods,
        )


__all__ = ["GRPCClientTemplate"]
