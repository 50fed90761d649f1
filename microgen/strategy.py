"""Write strategies: what happens to a rendered artifact.

The decision (``decide_strategy``) only peeks at the filesystem; the chosen
strategy object performs the write later. Substituting ``NopStrategy`` turns
any template into a dry run.
"""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol, Sequence, TextIO

from .errors import WriteError
from .gosource import add_imports


class StrategyKind(str, Enum):
    SKIP = "skip"
    CREATE_OR_OVERWRITE = "create_or_overwrite"
    APPEND_TO = "append_to"
    EMIT_TO_STREAM = "emit_to_stream"


class WriteStrategy(Protocol):
    """Protocol implemented by every write strategy."""

    kind: StrategyKind

    @property
    def path(self) -> Optional[Path]:
        """Absolute target path, None when nothing is written to disk."""

    def write(self, document: str) -> int:
        """Persist ``document`` and return the number of characters written."""


class NopStrategy:
    """Skip: the target exists and regeneration was not forced."""

    kind = StrategyKind.SKIP

    def __init__(self, root: Path | None = None, rel_path: str | None = None) -> None:
        self._path = Path(root) / rel_path if root is not None and rel_path else None

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def write(self, document: str) -> int:
        return 0

    def __repr__(self) -> str:
        return f"NopStrategy({self._path})"


class CreateFileStrategy:
    """Create the target file, replacing any previous content."""

    kind = StrategyKind.CREATE_OR_OVERWRITE

    def __init__(self, root: Path, rel_path: str) -> None:
        self._path = Path(root) / rel_path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, document: str) -> int:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "w", encoding="utf-8") as handle:
                return handle.write(document)
        except OSError as exc:
            raise WriteError(f"{self._path}: {exc.strerror or exc}", self._path) from exc

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._path})"


class AppendFileStrategy(CreateFileStrategy):
    """Add declarations to the end of an existing file.

    Import specs the new declarations need are merged into the file's import
    section; everything already in the file is kept as it is.
    """

    kind = StrategyKind.APPEND_TO

    def read(self) -> str:
        try:
            return self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise WriteError(f"{self._path}: {exc.strerror or exc}", self._path) from exc

    def write(self, document: str, imports: Sequence[str] = ()) -> int:
        existing = self.read()
        try:
            merged = add_imports(existing, imports)
        except ValueError as exc:
            raise WriteError(f"{self._path}: cannot add imports: {exc}", self._path) from exc
        if merged and not merged.endswith("\n"):
            merged += "\n"
        super().write(merged + document)
        return len(document)


class StreamStrategy:
    """Emit the document to a text stream instead of the filesystem."""

    kind = StrategyKind.EMIT_TO_STREAM
    # Units run concurrently; whole documents must not interleave on a shared sink.
    _lock = threading.Lock()

    def __init__(self, stream: TextIO, label: str | None = None) -> None:
        self._stream = stream
        self._label = label

    @property
    def path(self) -> None:
        return None

    def write(self, document: str) -> int:
        with self._lock:
            try:
                written = self._stream.write(document)
                self._stream.flush()
            except (OSError, ValueError) as exc:
                raise WriteError(f"{self._label or 'stream'}: {exc}") from exc
        return written if isinstance(written, int) else len(document)

    def __repr__(self) -> str:
        return f"StreamStrategy({self._label!r})"


def decide_strategy(
    root: Path,
    rel_path: str,
    *,
    run_force: bool = False,
    tag_force: bool = False,
    stream: TextIO | None = None,
    append: bool = False,
) -> WriteStrategy:
    """Choose a strategy for ``root / rel_path``.

    Precedence: an explicit stream wins, then either force flag, then the
    existence of the target (existing files are skipped, or appended to when
    ``append`` is set).
    """
    if stream is not None:
        return StreamStrategy(stream, label=rel_path)
    if run_force or tag_force:
        return CreateFileStrategy(root, rel_path)
    if (Path(root) / rel_path).exists():
        if append:
            return AppendFileStrategy(root, rel_path)
        return NopStrategy(root, rel_path)
    return CreateFileStrategy(root, rel_path)


__all__ = [
    "AppendFileStrategy",
    "CreateFileStrategy",
    "NopStrategy",
    "StrategyKind",
    "StreamStrategy",
    "WriteStrategy",
    "decide_strategy",
]
