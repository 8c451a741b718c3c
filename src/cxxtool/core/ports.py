"""Core ports (interfaces) for cxxtool.

These protocols separate the controller from where sources live and from
how results are shown, so both can be swapped in tests.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Iterable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ..tool_options import Tool
    from .controller import RunResult


@runtime_checkable
class SourceStore(Protocol):
    """Access to the source files of a project."""

    def iter_sources(self, root: Path) -> Iterable[Path]:
        """Yield every source file below root."""

    def read(self, path: Path) -> str:
        """Return file contents with line terminators untouched."""

    def write(self, path: Path, text: str) -> None:
        """Replace file contents."""


@runtime_checkable
class Reporter(Protocol):
    """User-visible progress and results."""

    def file_changed(self, path: Path, tools: list[Tool]) -> None:
        """A file was (or would be) rewritten by the given tools."""

    def file_failed(self, path: Path, error: Exception) -> None:
        """A file could not be processed."""

    def summary(self, result: RunResult) -> None:
        """The run finished."""
