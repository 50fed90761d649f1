"""Tests for generation units."""

from __future__ import annotations

import io

import pytest

from microgen.errors import ConfigError, EmptyStrategyError, EmptyTemplateError, WriteError
from microgen.generator import GenerationUnit, new_generation_unit
from microgen.models import Field, Interface, Named, Signature, Slice
from microgen.strategy import NopStrategy, StrategyKind
from microgen.templates import ExchangeTemplate, GRPCServerTemplate, LoggingTemplate, MiddlewareTemplate
from tests._fixtures.interfaces import adder, ctx_arg, err_result

ENTITY = "github.com/acme/adder/entity"


def test_unbound_unit_raises_empty_errors(output, adder_interface) -> None:
    template = ExchangeTemplate(output.info(adder_interface))

    with pytest.raises(EmptyTemplateError):
        GenerationUnit(None, NopStrategy()).generate()
    with pytest.raises(EmptyStrategyError):
        GenerationUnit(template, None).generate()


def test_new_unit_writes_missing_file(output, adder_interface) -> None:
    unit = new_generation_unit(ExchangeTemplate(output.info(adder_interface)))

    result = unit.generate()

    assert result.kind is StrategyKind.CREATE_OR_OVERWRITE
    assert result.chars > 0
    assert output.read("exchanges.go").startswith("// This file was automatically generated")


def test_existing_file_is_skipped_without_rendering(output, adder_interface, monkeypatch) -> None:
    output.write({"exchanges.go": "package adder // hand written\n"})
    template = ExchangeTemplate(output.info(adder_interface))

    def _fail() -> str:
        raise AssertionError("render must not run for a skipped unit")

    monkeypatch.setattr(template, "render", _fail)
    result = new_generation_unit(template).generate()

    assert result.skipped
    assert result.chars == 0
    assert output.read("exchanges.go") == "package adder // hand written\n"


def test_run_force_overwrites_existing_file(output, adder_interface) -> None:
    output.write({"exchanges.go": "package adder // stale\n"})

    result = new_generation_unit(ExchangeTemplate(output.info(adder_interface, force=True))).generate()

    assert result.kind is StrategyKind.CREATE_OR_OVERWRITE
    assert "stale" not in output.read("exchanges.go")
    assert "type AddRequest struct" in output.read("exchanges.go")


def test_stream_unit_prints_instead_of_writing(output, adder_interface) -> None:
    sink = io.StringIO()

    result = new_generation_unit(ExchangeTemplate(output.info(adder_interface, stream=sink))).generate()

    assert result.kind is StrategyKind.EMIT_TO_STREAM
    assert "type AddResponse struct" in sink.getvalue()
    assert not (output.root / "exchanges.go").exists()


def test_prepare_errors_are_wrapped_with_the_artifact_path(output, adder_interface) -> None:
    template = GRPCServerTemplate(output.info(adder_interface))

    with pytest.raises(ConfigError, match=r"transport/grpc/server.go: prepare error: protobuf package is empty"):
        new_generation_unit(template)

    with pytest.raises(ConfigError):
        template.choose_strategy()


def test_write_errors_name_the_artifact(output, adder_interface) -> None:
    output.write({"middleware": "not a directory"})
    unit = new_generation_unit(MiddlewareTemplate(output.info(adder_interface)))

    with pytest.raises(WriteError, match=r"^middleware/middleware.go: write error"):
        unit.generate()


def _grown_adder() -> Interface:
    base = adder()
    visits = Signature(
        "Visits",
        args=(ctx_arg(),),
        results=(Field("visits", Slice(Named("Visit", ENTITY))), err_result()),
    )
    return Interface(
        base.name,
        methods=base.methods + (visits,),
        package=base.package,
        import_path=base.import_path,
    )


def test_existing_logging_file_receives_only_missing_methods(output) -> None:
    new_generation_unit(LoggingTemplate(output.info(adder()))).generate()
    original = output.read("middleware/logging.go")

    result = new_generation_unit(LoggingTemplate(output.info(_grown_adder()))).generate()

    merged = output.read("middleware/logging.go")
    assert result.kind is StrategyKind.APPEND_TO
    assert result.chars > 0
    assert merged.count("package middleware") == 1
    assert merged.count("// This file was automatically generated") == 1
    assert merged.count("func ServiceLogging(") == 1
    assert merged.count("func (l *serviceLogging) Add(") == 1
    assert "func (l *serviceLogging) Visits(ctx context.Context) (visits []entity.Visit, err error) {\n" in merged
    assert f'\t"{ENTITY}"\n)\n' in merged
    assert merged.replace(f'\t"{ENTITY}"\n', "", 1).startswith(original)


def test_complete_logging_file_is_left_untouched(output) -> None:
    new_generation_unit(LoggingTemplate(output.info(_grown_adder()))).generate()
    before = output.read("middleware/logging.go")

    result = new_generation_unit(LoggingTemplate(output.info(_grown_adder()))).generate()

    assert result.skipped
    assert result.chars == 0
    assert output.read("middleware/logging.go") == before


def test_append_is_not_offered_by_whole_file_templates(output, adder_interface) -> None:
    template = ExchangeTemplate(output.info(adder_interface))
    template.prepare()

    with pytest.raises(NotImplementedError):
        template.render_append("package adder\n")
