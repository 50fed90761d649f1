"""Configuration loading for microgen (.microgen.yml) and per-run generation info."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

import yaml

from .errors import ConfigError
from .models import Interface
from .tags import GRPC_ADDR_TAG, PROTOBUF_TAG

CONFIG_FILENAME = ".microgen.yml"


@dataclass
class TemplateConfig:
    """Template allow/deny lists from .microgen.yml."""

    enabled: List[str] = field(default_factory=list)
    disabled: List[str] = field(default_factory=list)


@dataclass
class MicrogenConfig:
    """Represents the settings defined in .microgen.yml."""

    root: Path
    out: Optional[Path] = None
    force: bool = False
    protobuf: Optional[str] = None
    grpc_addr: Optional[str] = None
    templates: TemplateConfig = field(default_factory=TemplateConfig)


@dataclass
class GenerationInfo:
    """Per-run settings shared read-only by every generation unit.

    Templates call :meth:`copy` at construction so that ``prepare`` can flip
    template-local fields such as ``force`` without affecting siblings.
    """

    interface: Interface
    output_dir: Path
    service_import_path: str = ""
    force: bool = False
    stream: Optional[TextIO] = None
    protobuf_package: Optional[str] = None
    grpc_addr: Optional[str] = None
    source_file: Optional[Path] = None

    @property
    def package_name(self) -> str:
        return self.interface.package or self.interface.name.lower()

    def copy(self) -> "GenerationInfo":
        return replace(self)


def load_config(config_path: Path) -> MicrogenConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return MicrogenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    out_str = _as_str(data.get("out"))
    templates_data = _as_dict(data.get("templates"))
    templates = TemplateConfig()
    if templates_data:
        templates.enabled = [name.lower() for name in _as_str_list(templates_data.get("enabled"))]
        templates.disabled = [name.lower() for name in _as_str_list(templates_data.get("disabled"))]

    return MicrogenConfig(
        root=root,
        out=root / out_str if out_str else None,
        force=_as_bool(data.get("force")) or False,
        protobuf=_as_str(data.get("protobuf")),
        grpc_addr=_as_str(data.get("grpc_addr")),
        templates=templates,
    )


def build_generation_info(
    interface: Interface,
    config: MicrogenConfig | None = None,
    *,
    output_dir: Path | None = None,
    force: bool = False,
    stream: TextIO | None = None,
    protobuf_package: str | None = None,
    source_file: Path | None = None,
) -> GenerationInfo:
    """Merge CLI values, interface tags and the config file (in that precedence)."""
    config = config or MicrogenConfig(root=Path.cwd())
    tags = interface.tags

    resolved_out = output_dir or config.out or config.root
    protobuf = protobuf_package or tags.first(PROTOBUF_TAG) or config.protobuf
    grpc_addr = tags.first(GRPC_ADDR_TAG) or config.grpc_addr

    return GenerationInfo(
        interface=interface,
        output_dir=Path(resolved_out),
        service_import_path=interface.import_path,
        force=force or config.force,
        stream=stream,
        protobuf_package=protobuf,
        grpc_addr=grpc_addr,
        source_file=source_file,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "GenerationInfo",
    "MicrogenConfig",
    "TemplateConfig",
    "build_generation_info",
    "load_config",
]
