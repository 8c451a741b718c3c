"""Console reporter."""

from __future__ import annotations

import logging
from pathlib import Path

from ..core.controller import RunResult
from ..tool_options import Tool

logger = logging.getLogger(__name__)


class ConsoleReporter:
    def __init__(self, check: bool = False, root: Path | None = None):
        self.check = check
        self.root = root

    def _display(self, path: Path) -> str:
        if self.root is not None:
            try:
                return str(Path(path).relative_to(self.root))
            except ValueError:
                pass
        return str(path)

    def file_changed(self, path: Path, tools: list[Tool]) -> None:
        verb = "would fix" if self.check else "fixed"
        names = ", ".join(tool.key for tool in tools)
        print(f"{verb} {self._display(path)} [{names}]")

    def file_failed(self, path: Path, error: Exception) -> None:
        print(f"error {self._display(path)}: {error}")

    def summary(self, result: RunResult) -> None:
        verb = "would be changed" if self.check else "changed"
        print(
            f"{result.checked} file(s) checked, {len(result.changed)} {verb}, "
            f"{len(result.failed)} failed"
        )
        logger.info(
            "Run finished: checked=%d changed=%d failed=%d",
            result.checked,
            len(result.changed),
            len(result.failed),
        )
