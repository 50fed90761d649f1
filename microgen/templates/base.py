"""Base class for generation templates."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, List, Optional, Tuple

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .. import FILE_HEADER
from ..config import GenerationInfo
from ..errors import ConfigError
from ..naming import to_lower_first, to_snake_case, to_upper_first
from ..strategy import WriteStrategy, decide_strategy
from ..tags import FORCE_TAG, MAIN_TAG
from ..types import ImportSet

_LAYOUT_DIR = Path(__file__).with_name("go")
_ENV: Optional[Environment] = None


def get_environment() -> Environment:
    """Return the shared Jinja environment over the bundled Go layouts."""
    global _ENV
    if _ENV is None:
        env = Environment(
            loader=FileSystemLoader(str(_LAYOUT_DIR)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        env.filters["lower_first"] = to_lower_first
        env.filters["upper_first"] = to_upper_first
        env.filters["snake"] = to_snake_case
        _ENV = env
    return _ENV


@dataclass
class AppendFragment:
    """Declarations to add to an existing file and the import specs they use."""

    body: str
    imports: List[str] = field(default_factory=list)


class Template(ABC):
    """Contract for generators that produce one artifact from an interface.

    Lifecycle: ``prepare`` validates and configures, ``choose_strategy``
    decides whether and where to write, ``render`` produces the document.
    When the target exists and ``append_when_exists`` is set, ``render_append``
    takes the place of ``render``.
    """

    name: ClassVar[str] = ""
    # Keywords of ``// @microgen`` that select this template; empty means always.
    participation: ClassVar[Tuple[str, ...]] = ()
    # Keywords of ``// @force`` that force regeneration of this template.
    force_categories: ClassVar[Tuple[str, ...]] = ()
    append_when_exists: ClassVar[bool] = False

    def __init__(self, info: GenerationInfo) -> None:
        self.info = info.copy()
        self.tag_force = False
        self._prepared = False
        self._prepare_error: Optional[ConfigError] = None

    @classmethod
    def participates(cls, info: GenerationInfo) -> bool:
        if not cls.participation:
            return True
        return info.interface.tags.contains(MAIN_TAG, *cls.participation)

    def prepare(self) -> None:
        try:
            self.configure()
        except ConfigError as exc:
            self._prepare_error = exc
            raise
        categories = self.force_categories or (self.name,)
        if self.info.interface.tags.contains(FORCE_TAG, *categories):
            self.tag_force = True
        self._prepared = True

    def configure(self) -> None:
        """Hook for template-specific configuration checks."""

    def choose_strategy(self) -> WriteStrategy:
        if self._prepare_error is not None:
            raise self._prepare_error
        self._ensure_prepared()
        return decide_strategy(
            self.info.output_dir,
            self.default_path(),
            run_force=self.info.force,
            tag_force=self.tag_force,
            stream=self.info.stream,
            append=self.append_when_exists,
        )

    @abstractmethod
    def default_path(self) -> str:
        """Artifact location relative to the output directory."""

    @abstractmethod
    def render(self) -> str:
        """Return the complete document for this artifact."""

    def render_append(self, existing: str) -> Optional[AppendFragment]:
        """Return what ``existing`` lacks, None when it is already complete.

        Only templates with ``append_when_exists`` implement this.
        """
        raise NotImplementedError(f"{self.name}: appending to existing files is not supported")

    def _ensure_prepared(self) -> None:
        if not self._prepared:
            raise RuntimeError(f"{self.name}: prepare() must succeed before this call")

    def _render_file(self, layout: str, *, package: str, imports: ImportSet, **context: Any) -> str:
        self._ensure_prepared()
        template = get_environment().get_template(layout)
        return template.render(
            header=[FILE_HEADER, "Please, do not edit."],
            package=package,
            imports=imports.render(),
            **context,
        )

    def _render_fragment(self, layout: str, *, imports: ImportSet, **context: Any) -> AppendFragment:
        self._ensure_prepared()
        body = get_environment().get_template(layout).render(**context)
        return AppendFragment(body, imports.new_lines())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.default_path()!r})"
