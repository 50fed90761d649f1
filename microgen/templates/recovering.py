"""Panic recovering middleware (middleware/recovering.go)."""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..gosource import imported_paths
from ..models import Named, Signature
from ..naming import last_upper_or_first
from ..tags import RECOVER_MIDDLEWARE_TAG
from ..types import ImportSet, render_type
from .base import AppendFragment, Template
from .common import (
    PACKAGE_PATH_FMT,
    PACKAGE_PATH_GO_KIT_LOG,
    method_view,
    missing_methods,
    service_type,
)
from .middleware import MIDDLEWARE_PACKAGE

_STRUCT_NAME = "serviceRecovering"


class RecoveringTemplate(Template):
    name = "recovering"
    participation = (RECOVER_MIDDLEWARE_TAG,)
    force_categories = (RECOVER_MIDDLEWARE_TAG,)
    append_when_exists = True

    def default_path(self) -> str:
        return "middleware/recovering.go"

    def render(self) -> str:
        imports = ImportSet()
        service = service_type(
            self.info.interface, imports, self.info.service_import_path, self.info.package_name
        )
        logger_type = render_type(Named("Logger", PACKAGE_PATH_GO_KIT_LOG), False, imports)

        return self._render_file(
            "recovering.go.j2",
            package=MIDDLEWARE_PACKAGE,
            imports=imports,
            constructor="ServiceRecovering",
            struct=_STRUCT_NAME,
            service=service,
            logger_type=logger_type,
            **self._methods_context(self.info.interface.methods, imports),
        )

    def render_append(self, existing: str) -> Optional[AppendFragment]:
        missing = missing_methods(existing, _STRUCT_NAME, self.info.interface.methods)
        if not missing:
            return None
        imports = ImportSet(present=imported_paths(existing))
        return self._render_fragment(
            "recovering_methods.go.j2",
            imports=imports,
            **self._methods_context(missing, imports),
        )

    @staticmethod
    def _methods_context(signatures: Sequence[Signature], imports: ImportSet) -> Dict[str, Any]:
        methods = [method_view(signature, imports, receiver_type=_STRUCT_NAME) for signature in signatures]
        # fmt is only referenced when a recovered panic is turned into an error.
        fmt_alias = imports.add(PACKAGE_PATH_FMT) if any(m.has_error for m in methods) else None
        return {
            "receiver": last_upper_or_first(_STRUCT_NAME),
            "fmt_alias": fmt_alias,
            "methods": methods,
        }


__all__ = ["RecoveringTemplate"]
