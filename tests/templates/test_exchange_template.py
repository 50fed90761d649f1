"""Tests for the exchange structs template."""

from __future__ import annotations

from microgen.models import Field, Interface, Named, Signature, Variadic
from microgen.templates import ExchangeTemplate
from tests._fixtures.interfaces import ctx_arg, err_result

HEADER = (
    '// This file was automatically generated by "microgen 0.6.0" utility.\n'
    "// Please, do not edit.\n"
)


def _render(template: ExchangeTemplate) -> str:
    template.prepare()
    return template.render()


def test_context_and_error_are_stripped(output, adder_interface) -> None:
    document = _render(ExchangeTemplate(output.info(adder_interface)))

    assert document == HEADER + (
        "package adder\n"
        "\n"
        "type AddRequest struct {\n"
        '\tA int `json:"a"`\n'
        '\tB int `json:"b"`\n'
        "}\n"
        "\n"
        "type AddResponse struct {\n"
        '\tSum int `json:"sum"`\n'
        "}\n"
    )


def test_empty_exchanges_keep_a_formal_type(output) -> None:
    iface = Interface(
        "Pinger",
        package="pinger",
        methods=(Signature("Ping", args=(ctx_arg(),), results=(err_result(),)),),
    )

    document = _render(ExchangeTemplate(output.info(iface)))

    assert "// Formal exchange type, please do not delete.\ntype PingRequest struct{}\n" in document
    assert "// Formal exchange type, please do not delete.\ntype PingResponse struct{}\n" in document


def test_fields_are_aligned_and_tagged(output, string_service_interface) -> None:
    document = _render(ExchangeTemplate(output.info(string_service_interface)))

    assert "type CountRequest struct {\n" '\tText   string `json:"text"`\n' '\tSymbol string `json:"symbol"`\n' "}" in document
    assert '\tCount     int   `json:"count"`\n\tPositions []int `json:"positions"`\n' in document


def test_foreign_types_are_imported_and_local_types_are_not(output) -> None:
    entity = "github.com/acme/stringsvc/entity"
    iface = Interface(
        "Visits",
        package="stringsvc",
        import_path="github.com/acme/stringsvc",
        methods=(
            Signature(
                "Record",
                args=(
                    ctx_arg(),
                    Field("visit", Named("Visit", entity)),
                    Field("owner", Named("Owner", "github.com/acme/stringsvc")),
                ),
            ),
        ),
    )

    document = _render(ExchangeTemplate(output.info(iface)))

    assert 'import "github.com/acme/stringsvc/entity"\n' in document
    assert '\tVisit entity.Visit `json:"visit"`\n' in document
    assert '\tOwner Owner        `json:"owner"`\n' in document
    assert '"context"' not in document


def test_variadic_arguments_are_stored_as_slices(output) -> None:
    iface = Interface(
        "Joiner",
        package="joiner",
        methods=(
            Signature(
                "Join",
                args=(ctx_arg(), Field("parts", Variadic(Named("string")))),
                results=(Field("joined", Named("string")),),
            ),
        ),
    )

    document = _render(ExchangeTemplate(output.info(iface)))

    assert '\tParts []string `json:"parts"` // This field was defined with ellipsis (...).\n' in document


def test_anonymous_results_get_generated_names(output) -> None:
    iface = Interface(
        "Getter",
        package="getter",
        methods=(
            Signature(
                "Get",
                args=(ctx_arg(),),
                results=(Field("", Named("string")), Field("", Named("error"))),
            ),
        ),
    )

    document = _render(ExchangeTemplate(output.info(iface)))

    assert '\tRes0 string `json:"res0"`\n' in document
