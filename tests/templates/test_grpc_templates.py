"""Tests for the gRPC server and client transport templates."""

from __future__ import annotations

import pytest

from microgen.errors import ConfigError
from microgen.templates import GRPCClientTemplate, GRPCServerTemplate
from tests._fixtures.interfaces import adder

PROTOBUF = "github.com/acme/protobuf/adderpb"


def _render(template) -> str:
    template.prepare()
    return template.render()


def test_server_wires_endpoints_to_handlers(output, adder_interface) -> None:
    document = _render(GRPCServerTemplate(output.info(adder_interface, protobuf_package=PROTOBUF)))

    assert "package transportgrpc\n" in document
    assert '\tgrpckit "github.com/go-kit/kit/transport/grpc"\n' in document
    assert '\tconverter "github.com/acme/adder/transport/converter/protobuf"\n' in document
    assert '\t"golang.org/x/net/context"\n' in document
    assert "type adderServer struct {\n\tadd grpckit.Handler\n}\n" in document
    assert (
        "func NewGRPCServer(endpoints *adder.Endpoints, opts ...grpckit.ServerOption) adderpb.AdderServer {\n"
        "\treturn &adderServer{\n"
        "\t\tadd: grpckit.NewServer(\n"
        "\t\t\tendpoints.AddEndpoint,\n"
        "\t\t\tconverter.DecodeAddRequest,\n"
        "\t\t\tconverter.EncodeAddResponse,\n"
        "\t\t\topts...,\n"
        "\t\t),\n"
        "\t}\n"
        "}\n"
    ) in document
    assert (
        "func (s *adderServer) Add(ctx context.Context, req *adderpb.AddRequest) (*adderpb.AddResponse, error) {\n"
        "\t_, resp, err := s.add.ServeGRPC(ctx, req)\n"
        "\tif err != nil {\n"
        "\t\treturn nil, err\n"
        "\t}\n"
        "\treturn resp.(*adderpb.AddResponse), nil\n"
        "}\n"
    ) in document


def test_server_uses_empty_message_for_empty_exchanges(output, string_service_interface) -> None:
    document = _render(GRPCServerTemplate(output.info(string_service_interface)))

    assert '\t"github.com/golang/protobuf/ptypes/empty"\n' in document
    assert "Ping(ctx context.Context, req *empty.Empty) (*empty.Empty, error)" in document
    assert "Count(ctx context.Context, req *stringpb.CountRequest) (*stringpb.CountResponse, error)" in document


def test_client_builds_endpoints_from_connection(output, adder_interface) -> None:
    document = _render(GRPCClientTemplate(output.info(adder_interface, protobuf_package=PROTOBUF)))

    assert '\t"google.golang.org/grpc"\n' in document
    assert (
        "func NewGRPCClient(conn *grpc.ClientConn, opts ...grpckit.ClientOption) adder.Adder {\n"
        "\treturn &adder.Endpoints{\n"
        "\t\tAddEndpoint: grpckit.NewClient(\n"
        "\t\t\tconn,\n"
        '\t\t\t"adderpb.Adder",\n'
        '\t\t\t"Add",\n'
        "\t\t\tconverter.EncodeAddRequest,\n"
        "\t\t\tconverter.DecodeAddResponse,\n"
        "\t\t\tadderpb.AddResponse{},\n"
        "\t\t\topts...,\n"
        "\t\t).Endpoint(),\n"
        "\t}\n"
        "}\n"
    ) in document


def test_client_service_name_comes_from_grpc_addr_tag(output) -> None:
    iface = adder(docs=("// @microgen grpc-client", "// @grpc-addr acme.api.Adder"))

    document = _render(GRPCClientTemplate(output.info(iface, protobuf_package=PROTOBUF)))

    assert '\t\t\t"acme.api.Adder",\n' in document


@pytest.mark.parametrize("template_cls", [GRPCServerTemplate, GRPCClientTemplate])
def test_grpc_templates_require_protobuf_package(output, adder_interface, template_cls) -> None:
    template = template_cls(output.info(adder_interface))

    with pytest.raises(ConfigError, match="protobuf package is empty"):
        template.prepare()


def test_grpc_participation_and_force_categories(output) -> None:
    server_only = output.info(adder(docs=("// @microgen grpc-server", "// @force grpc")))

    assert GRPCServerTemplate.participates(server_only)
    assert not GRPCClientTemplate.participates(server_only)

    template = GRPCServerTemplate(server_only.copy())
    template.info.protobuf_package = PROTOBUF
    template.prepare()
    assert template.tag_force
