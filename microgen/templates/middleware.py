"""Middleware type declaration (middleware/middleware.go)."""

from __future__ import annotations

from ..tags import LOGGING_MIDDLEWARE_TAG, MIDDLEWARE_TAG, RECOVER_MIDDLEWARE_TAG
from ..types import ImportSet
from .base import Template
from .common import service_type

MIDDLEWARE_PACKAGE = "middleware"


class MiddlewareTemplate(Template):
    name = "middleware"
    participation = (MIDDLEWARE_TAG, LOGGING_MIDDLEWARE_TAG, RECOVER_MIDDLEWARE_TAG)
    force_categories = (MIDDLEWARE_TAG,)

    def default_path(self) -> str:
        return "middleware/middleware.go"

    def render(self) -> str:
        imports = ImportSet()
        service = service_type(
            self.info.interface, imports, self.info.service_import_path, self.info.package_name
        )
        return self._render_file(
            "middleware.go.j2",
            package=MIDDLEWARE_PACKAGE,
            imports=imports,
            service=service,
        )


__all__ = ["MIDDLEWARE_PACKAGE", "MiddlewareTemplate"]
