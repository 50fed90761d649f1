"""Tests for microgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from microgen.config import MicrogenConfig, build_generation_info, load_config
from microgen.errors import ConfigError
from tests._fixtures.interfaces import adder


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, MicrogenConfig)
    assert config.root == tmp_path.resolve()
    assert config.out is None
    assert config.force is False
    assert config.protobuf is None
    assert config.templates.enabled == []
    assert config.templates.disabled == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".microgen.yml").write_text(
        """
out: generated
force: "yes"
protobuf: github.com/acme/protobuf
grpc_addr: acme.Adder
templates:
  enabled: [Exchange, endpoints]
  disabled: logging
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.out == tmp_path.resolve() / "generated"
    assert config.force is True
    assert config.protobuf == "github.com/acme/protobuf"
    assert config.grpc_addr == "acme.Adder"
    assert config.templates.enabled == ["exchange", "endpoints"]
    assert config.templates.disabled == ["logging"]


def test_load_config_accepts_explicit_file(tmp_path: Path) -> None:
    config_file = tmp_path / "custom.yml"
    config_file.write_text("force: true\n", encoding="utf-8")

    assert load_config(config_file).force is True


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".microgen.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).force is False


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".microgen.yml").write_text("out: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".microgen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)


def test_build_generation_info_precedence(tmp_path: Path) -> None:
    iface = adder(docs=("// @protobuf github.com/acme/tagged", "// @grpc-addr tagged.Adder"))
    config = MicrogenConfig(
        root=tmp_path,
        out=tmp_path / "from-config",
        protobuf="github.com/acme/configured",
        grpc_addr="configured.Adder",
    )

    info = build_generation_info(iface, config)
    assert info.output_dir == tmp_path / "from-config"
    assert info.protobuf_package == "github.com/acme/tagged"
    assert info.grpc_addr == "tagged.Adder"
    assert info.service_import_path == "github.com/acme/adder"
    assert info.package_name == "adder"

    info = build_generation_info(
        iface, config, output_dir=tmp_path / "cli", protobuf_package="github.com/acme/cli"
    )
    assert info.output_dir == tmp_path / "cli"
    assert info.protobuf_package == "github.com/acme/cli"


def test_generation_info_copy_is_independent(tmp_path: Path) -> None:
    info = build_generation_info(adder(), output_dir=tmp_path)
    copied = info.copy()
    copied.force = True

    assert info.force is False
    assert copied.interface is info.interface
