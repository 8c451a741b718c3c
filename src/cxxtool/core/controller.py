"""Core orchestration for cxxtool.

Keeps the walk -> read -> filter -> write/report pipeline in one place,
decoupled from the filesystem and the console via ports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING

from .errors import SourceDirectoryError, TemplateError
from .ports import Reporter, SourceStore

if TYPE_CHECKING:
    from ..text_processor import TextProcessor
    from ..tool_options import Tool
    from .config_model import ProjectConfig

logger = logging.getLogger(__name__)


class FileOutcome(Enum):
    UNCHANGED = auto()
    CHANGED = auto()
    FAILED = auto()


@dataclass
class RunResult:
    """Outcome of a run over the source directory."""

    checked: int = 0
    changed: list[Path] = field(default_factory=list)
    failed: dict[Path, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def clean(self) -> bool:
        return self.ok and not self.changed


class SourceController:
    """Applies the configured tools to every source file of a project."""

    def __init__(
        self,
        project: ProjectConfig,
        processor: TextProcessor,
        store: SourceStore,
        reporter: Reporter,
    ):
        self._project = project
        self._processor = processor
        self._store = store
        self._reporter = reporter
        self._errors: dict[Path, str] = {}

    def _changed_by(self, text: str, path: Path) -> list[Tool]:
        """Tools that change ``text`` when run on their own."""
        context = self._processor.context(self._project, path)
        return [
            tool
            for tool in self._processor.tools
            if self._processor.process(text, context, only=tool) != text
        ]

    def process_file(self, path: Path, write: bool = True) -> FileOutcome:
        """Process one file.

        Args:
            path: File to process.
            write: Write the result back. When False the file is only checked.

        Returns:
            FileOutcome for the file. Errors are reported, not raised.
        """
        try:
            text = self._store.read(path)
            context = self._processor.context(self._project, path)
            result = self._processor.process(text, context)
            if result == text:
                logger.debug("Unchanged: %s", path)
                return FileOutcome.UNCHANGED

            # Empty only if no single filter changes the text on its own
            tools = self._changed_by(text, path) or list(self._processor.tools)
            if write:
                self._store.write(path, result)
                logger.info("Rewrote %s (%s)", path, ", ".join(tool.key for tool in tools))
        except (TemplateError, UnicodeDecodeError, OSError) as e:
            logger.warning("Failed to process %s: %s", path, e)
            self._errors[path] = str(e)
            self._reporter.file_failed(path, e)
            return FileOutcome.FAILED

        self._reporter.file_changed(path, tools)
        return FileOutcome.CHANGED

    def run(self, write: bool = True) -> RunResult:
        """Process every source file below the project's source directory.

        Raises:
            SourceDirectoryError: if the source directory does not exist.
        """
        source_dir = self._project.source_dir
        if not source_dir.is_dir():
            raise SourceDirectoryError(f"source directory not found: {source_dir}")

        result = RunResult()
        for path in sorted(self._store.iter_sources(source_dir)):
            result.checked += 1
            outcome = self.process_file(path, write=write)
            if outcome is FileOutcome.CHANGED:
                result.changed.append(path)
            elif outcome is FileOutcome.FAILED:
                result.failed[path] = self._errors[path]

        self._reporter.summary(result)
        return result
