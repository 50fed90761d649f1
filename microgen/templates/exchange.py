"""Request/response exchange structs (exchanges.go)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from ..models import Field
from ..rules import remove_context_if_first, remove_error_if_last
from ..types import ImportSet
from .base import Template
from .common import name_results, request_struct_name, response_struct_name, struct_fields


@dataclass
class ExchangeView:
    name: str
    fields: List[str]


class ExchangeTemplate(Template):
    """Renders one request and one response struct per interface method.

        type CreateVisitRequest struct {
            Visit *entity.Visit `json:"visit"`
        }

    A method whose request or response is empty after stripping the context
    argument and the error result still gets a formal, field-less struct.
    """

    name = "exchange"

    def default_path(self) -> str:
        return "exchanges.go"

    def render(self) -> str:
        imports = ImportSet(local_path=self.info.service_import_path)
        exchanges: List[ExchangeView] = []
        for signature in self.info.interface.methods:
            exchanges.append(
                self._exchange(
                    request_struct_name(signature),
                    remove_context_if_first(signature.args),
                    imports,
                )
            )
            exchanges.append(
                self._exchange(
                    response_struct_name(signature),
                    remove_error_if_last(name_results(signature.results)),
                    imports,
                )
            )
        return self._render_file(
            "exchange.go.j2",
            package=self.info.package_name,
            imports=imports,
            exchanges=exchanges,
        )

    @staticmethod
    def _exchange(name: str, fields: Sequence[Field], imports: ImportSet) -> ExchangeView:
        return ExchangeView(name=name, fields=struct_fields(fields, imports))


__all__ = ["ExchangeTemplate"]
