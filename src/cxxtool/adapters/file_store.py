"""Filesystem adapter for project sources."""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = frozenset({".h", ".hh", ".hpp", ".hxx", ".c", ".cc", ".cpp", ".cxx", ".inl"})


class FileSystemStore:
    def __init__(self, extensions: frozenset[str] | set[str] = DEFAULT_EXTENSIONS):
        self.extensions = frozenset(ext.lower() for ext in extensions)

    def iter_sources(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            # Prune hidden directories (.git, .vscode, ...) in place
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            for name in sorted(filenames):
                path = Path(dirpath) / name
                if path.suffix.lower() in self.extensions:
                    yield path

    def read(self, path: Path) -> str:
        # newline="" keeps CRLF/CR so the filters can see them
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, path: Path, text: str) -> None:
        """Write atomically via a temp file in the same directory."""
        path = Path(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if path.exists():
                os.chmod(tmp_name, path.stat().st_mode & 0o7777)
            os.replace(tmp_name, path)
        except BaseException:
            with contextlib.suppress(OSError):
                os.unlink(tmp_name)
            raise
        logger.debug("Wrote %s", path)
