"""Template implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Dict, Iterable, List, Sequence, Set, Type

from .base import AppendFragment, Template, get_environment
from .endpoints import EndpointsTemplate
from .exchange import ExchangeTemplate
from .grpc_client import GRPCClientTemplate
from .grpc_server import GRPCServerTemplate
from .logging_middleware import LoggingTemplate
from .middleware import MiddlewareTemplate
from .recovering import RecoveringTemplate

_ENTRY_POINT_GROUP = "microgen.templates"

_BUILTIN_FACTORIES: Dict[str, Type[Template]] = {
    ExchangeTemplate.name: ExchangeTemplate,
    EndpointsTemplate.name: EndpointsTemplate,
    MiddlewareTemplate.name: MiddlewareTemplate,
    LoggingTemplate.name: LoggingTemplate,
    RecoveringTemplate.name: RecoveringTemplate,
    GRPCServerTemplate.name: GRPCServerTemplate,
    GRPCClientTemplate.name: GRPCClientTemplate,
}


def builtin_template_names() -> List[str]:
    return list(_BUILTIN_FACTORIES)


def discover_templates(enabled: Sequence[str] | None = None) -> Dict[str, Type[Template]]:
    """Return template classes by name, built-ins first, then entry-point plugins."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    discovered: Dict[str, Type[Template]] = {}

    def _add(name: str, template_cls: object) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in discovered:
            return
        if not (isinstance(template_cls, type) and issubclass(template_cls, Template)):
            raise TypeError(f"Template entry point '{name}' must be a Template subclass")
        discovered[key] = template_cls
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, template_cls in _BUILTIN_FACTORIES.items():
        _add(name, template_cls)

    for entry in _iter_entry_points():
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Failed to load template entry point '{entry.name}': {exc}") from exc
        _add(entry.name, loaded)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown templates requested: {missing}")

    return discovered


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points(group=_ENTRY_POINT_GROUP)


__all__ = [
    "AppendFragment",
    "EndpointsTemplate",
    "ExchangeTemplate",
    "GRPCClientTemplate",
    "GRPCServerTemplate",
    "LoggingTemplate",
    "MiddlewareTemplate",
    "RecoveringTemplate",
    "Template",
    "builtin_template_names",
    "discover_templates",
    "get_environment",
]
