"""Logging middleware (middleware/logging.go)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from ..gosource import imported_paths
from ..models import Named, Signature
from ..naming import last_upper_or_first, to_lower_first
from ..tags import LOGGING_MIDDLEWARE_TAG
from ..types import ImportSet, render_type
from .base import AppendFragment, Template
from .common import (
    PACKAGE_PATH_GO_KIT_LOG,
    PACKAGE_PATH_TIME,
    method_view,
    missing_methods,
    service_type,
)
from .middleware import MIDDLEWARE_PACKAGE

_STRUCT_NAME = "serviceLogging"


@dataclass
class LoggedMethod:
    name: str
    definition: str
    call_args: str
    results: bool
    log_pairs: List[str]


class LoggingTemplate(Template):
    """Wraps every method with a deferred go-kit ``logger.Log`` call.

    Arguments (without the leading context) and all results, including the
    error, are logged together with the call duration. An existing file only
    receives the methods it does not declare yet.
    """

    name = "logging"
    participation = (LOGGING_MIDDLEWARE_TAG,)
    force_categories = (LOGGING_MIDDLEWARE_TAG,)
    append_when_exists = True

    def default_path(self) -> str:
        return "middleware/logging.go"

    def render(self) -> str:
        imports = ImportSet()
        service = service_type(
            self.info.interface, imports, self.info.service_import_path, self.info.package_name
        )
        logger_type = render_type(Named("Logger", PACKAGE_PATH_GO_KIT_LOG), False, imports)
        context = self._methods_context(self.info.interface.methods, imports)

        return self._render_file(
            "logging.go.j2",
            package=MIDDLEWARE_PACKAGE,
            imports=imports,
            constructor="ServiceLogging",
            struct=_STRUCT_NAME,
            service=service,
            logger_type=logger_type,
            **context,
        )

    def render_append(self, existing: str) -> Optional[AppendFragment]:
        missing = missing_methods(existing, _STRUCT_NAME, self.info.interface.methods)
        if not missing:
            return None
        imports = ImportSet(present=imported_paths(existing))
        return self._render_fragment(
            "logging_methods.go.j2",
            imports=imports,
            **self._methods_context(missing, imports),
        )

    @staticmethod
    def _methods_context(signatures: Sequence[Signature], imports: ImportSet) -> Dict[str, Any]:
        time_type = render_type(Named("Time", PACKAGE_PATH_TIME), False, imports)
        methods: List[LoggedMethod] = []
        for signature in signatures:
            view = method_view(signature, imports, receiver_type=_STRUCT_NAME)
            pairs = [
                f'"{field.name}", {to_lower_first(field.name)}'
                for field in (*view.request, *view.results)
            ]
            methods.append(
                LoggedMethod(
                    name=view.name,
                    definition=view.definition,
                    call_args=view.call_args,
                    results=bool(view.results),
                    log_pairs=pairs,
                )
            )
        return {
            "receiver": last_upper_or_first(_STRUCT_NAME),
            "time_type": time_type,
            "time_alias": imports.alias(PACKAGE_PATH_TIME),
            "methods": methods,
        }


__all__ = ["LoggingTemplate"]
