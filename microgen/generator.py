"""Generation units: a template bound to the strategy that persists its output."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .errors import (
    ConfigError,
    EmptyStrategyError,
    EmptyTemplateError,
    WriteError,
)
from .logging import get_artifact_logger
from .strategy import StrategyKind, WriteStrategy
from .templates.base import Template


@dataclass
class UnitResult:
    """What a single unit did with its artifact."""

    name: str
    rel_path: str
    kind: StrategyKind
    path: Optional[Path] = None
    chars: int = 0

    @property
    def skipped(self) -> bool:
        return self.kind is StrategyKind.SKIP


class GenerationUnit:
    def __init__(self, template: Template | None, strategy: WriteStrategy | None) -> None:
        self.template = template
        self.strategy = strategy

    @property
    def name(self) -> str:
        return self.template.name if self.template is not None else ""

    def generate(self) -> UnitResult:
        """Render the template and hand the document to the strategy.

        A skip strategy returns immediately without rendering. An append
        strategy only receives the declarations the existing file lacks, and
        the unit counts as skipped when there are none.
        """
        if self.template is None:
            raise EmptyTemplateError()
        if self.strategy is None:
            raise EmptyStrategyError()

        rel_path = self.template.default_path()
        log = get_artifact_logger("generator", rel_path)
        log.debug("generating (%s)", self.strategy.kind.value)
        if self.strategy.kind is StrategyKind.SKIP:
            log.info("skipped, file exists")
            return self._result(rel_path, StrategyKind.SKIP)

        try:
            if self.strategy.kind is StrategyKind.APPEND_TO:
                fragment = self.template.render_append(self.strategy.read())
                if fragment is None:
                    log.info("skipped, nothing to append")
                    return self._result(rel_path, StrategyKind.SKIP)
                chars = self.strategy.write(fragment.body, fragment.imports)
            else:
                chars = self.strategy.write(self.template.render())
        except WriteError as exc:
            raise WriteError(f"{rel_path}: write error: {exc}", exc.path) from exc
        except OSError as exc:
            raise WriteError(f"{rel_path}: write error: {exc}", self.strategy.path) from exc

        verb = "appended" if self.strategy.kind is StrategyKind.APPEND_TO else "wrote"
        log.info("%s %d chars", verb, chars)
        return self._result(rel_path, self.strategy.kind, chars)

    def _result(self, rel_path: str, kind: StrategyKind, chars: int = 0) -> UnitResult:
        return UnitResult(self.template.name, rel_path, kind, self.strategy.path, chars)

    def __repr__(self) -> str:
        return f"GenerationUnit({self.template!r}, {self.strategy!r})"


def new_generation_unit(template: Template) -> GenerationUnit:
    """Prepare ``template`` and bind the strategy it chooses."""
    try:
        template.prepare()
    except ConfigError as exc:
        raise ConfigError(f"{template.default_path()}: prepare error: {exc}") from exc
    return GenerationUnit(template, template.choose_strategy())


__all__ = ["GenerationUnit", "UnitResult", "new_generation_unit"]
