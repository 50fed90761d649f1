"""Concurrent fan-out of generation units and aggregation of their outcomes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Type

from .config import GenerationInfo
from .errors import ConfigError, EmptyTemplateOrStrategyError, GenerationError
from .generator import new_generation_unit
from .logging import get_logger
from .rules import validate_interface
from .templates import Template, discover_templates

STATUS_WRITTEN = "written"
STATUS_SKIPPED = "skipped"
STATUS_FAILED = "failed"


@dataclass
class UnitOutcome:
    """Result of one generation unit as seen by the caller."""

    name: str
    path: str
    status: str
    error: Optional[BaseException] = None
    target: Optional[Path] = None

    @property
    def failed(self) -> bool:
        return self.status == STATUS_FAILED


@dataclass
class GenerationReport:
    interface: str
    outcomes: List[UnitOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        # Units that were never bound are a programming slip, not a run failure.
        return not any(
            outcome.failed and not isinstance(outcome.error, EmptyTemplateOrStrategyError)
            for outcome in self.outcomes
        )

    @property
    def failures(self) -> List[UnitOutcome]:
        return [outcome for outcome in self.outcomes if outcome.failed]

    @property
    def written(self) -> List[UnitOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == STATUS_WRITTEN]

    @property
    def skipped(self) -> List[UnitOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status == STATUS_SKIPPED]


def select_template_classes(
    info: GenerationInfo,
    enabled: Sequence[str] | None = None,
    disabled: Iterable[str] = (),
    *,
    template_classes: Sequence[Type[Template]] | None = None,
) -> List[Type[Template]]:
    """Return the applicable template classes, in declaration order.

    The candidate set is static; interface tags only gate participation.
    """
    if template_classes is None:
        try:
            template_classes = list(discover_templates(enabled).values())
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
    blocked = {name.lower() for name in disabled}
    return [
        template_cls
        for template_cls in template_classes
        if template_cls.name.lower() not in blocked and template_cls.participates(info)
    ]


def list_templates_for_gen(
    info: GenerationInfo,
    enabled: Sequence[str] | None = None,
    disabled: Iterable[str] = (),
    *,
    template_classes: Sequence[Type[Template]] | None = None,
) -> List[Template]:
    """Return one template per applicable generator, in declaration order."""
    classes = select_template_classes(info, enabled, disabled, template_classes=template_classes)
    return [template_cls(info) for template_cls in classes]


class Orchestrator:
    """Runs every applicable template for an interface, one thread per unit."""

    def __init__(
        self,
        enabled: Sequence[str] | None = None,
        disabled: Iterable[str] = (),
        template_classes: Sequence[Type[Template]] | None = None,
    ) -> None:
        self.enabled = list(enabled) if enabled is not None else None
        self.disabled = list(disabled)
        self._template_classes = list(template_classes) if template_classes is not None else None
        self.logger = get_logger("orchestrator")

    def run(self, info: GenerationInfo) -> GenerationReport:
        """Generate all artifacts for ``info.interface`` and collect outcomes.

        Raises ``ValidationError`` before any unit starts when the interface is
        unusable. Unit failures never cancel siblings; they are returned in the
        report in template order.
        """
        validate_interface(info.interface)
        classes = select_template_classes(
            info,
            self.enabled,
            self.disabled,
            template_classes=self._template_classes,
        )
        self.logger.info(
            "Generating %d artifact(s) for %s into %s",
            len(classes),
            info.interface.name,
            info.output_dir,
        )

        outcomes: Dict[int, UnitOutcome] = {}
        threads: List[threading.Thread] = []
        for index, template_cls in enumerate(classes):
            thread = threading.Thread(
                target=self._worker,
                args=(index, template_cls, info, outcomes),
                name=f"microgen-{template_cls.name}",
                daemon=True,
            )
            threads.append(thread)
            thread.start()
        for thread in threads:
            thread.join()

        report = GenerationReport(info.interface.name, [outcomes[index] for index in range(len(classes))])
        for outcome in report.failures:
            self.logger.error("%s: %s", outcome.path or outcome.name, outcome.error)
        self.logger.debug(
            "Run finished: %d written, %d skipped, %d failed",
            len(report.written),
            len(report.skipped),
            len(report.failures),
        )
        return report

    def _worker(
        self,
        index: int,
        template_cls: Type[Template],
        info: GenerationInfo,
        outcomes: Dict[int, UnitOutcome],
    ) -> None:
        # Recorded in ``finally`` so the report has an entry even when the
        # thread dies on a BaseException.
        outcome = UnitOutcome(
            template_cls.name,
            "",
            STATUS_FAILED,
            error=GenerationError(f"{template_cls.name}: unit did not complete"),
        )
        try:
            template = template_cls(info)
            outcome.path = template.default_path()
            result = new_generation_unit(template).generate()
            outcome.status = STATUS_SKIPPED if result.skipped else STATUS_WRITTEN
            outcome.target = result.path
            outcome.error = None
        except Exception as exc:
            outcome.error = exc
        finally:
            outcomes[index] = outcome


__all__ = [
    "GenerationReport",
    "Orchestrator",
    "STATUS_FAILED",
    "STATUS_SKIPPED",
    "STATUS_WRITTEN",
    "UnitOutcome",
    "list_templates_for_gen",
    "select_template_classes",
]
