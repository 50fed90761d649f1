"""Error taxonomy shared by templates, strategies and the orchestrator."""

from __future__ import annotations

from pathlib import Path
from typing import List, Sequence


class GenerationError(RuntimeError):
    """Base error for all generation-related failures."""


class ConfigError(GenerationError):
    """Raised when required configuration is missing or cannot be parsed."""


class WriteError(GenerationError):
    """Raised when a rendered artifact cannot be persisted."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class ValidationError(GenerationError):
    """Raised when an interface cannot be used as a generation source."""

    def __init__(self, message: str, issues: Sequence[str]) -> None:
        super().__init__(message)
        self.issues: List[str] = list(issues)


class LoaderError(GenerationError):
    """Raised when an interface description cannot be loaded."""


class EmptyTemplateOrStrategyError(GenerationError):
    """A generation unit was used without a template or a strategy bound."""


class EmptyTemplateError(EmptyTemplateOrStrategyError):
    def __init__(self) -> None:
        super().__init__("empty template")


class EmptyStrategyError(EmptyTemplateOrStrategyError):
    def __init__(self) -> None:
        super().__init__("empty strategy")


__all__ = [
    "ConfigError",
    "EmptyStrategyError",
    "EmptyTemplateError",
    "EmptyTemplateOrStrategyError",
    "GenerationError",
    "LoaderError",
    "ValidationError",
    "WriteError",
]
