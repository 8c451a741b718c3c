"""Template blocks for generated source regions.

A template block is delimited by two marker comments::

    // [@VERSION{@]
    #define MPSL_VERSION_MAJOR 1
    ...
    // [@VERSION}@]

The body between the markers is owned by the tool and is regenerated from
the template with the same name. Templates are plain text using
``string.Template`` placeholders (``${PREFIX}``, ``${VERSION}``, ...).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from string import Template
from typing import TYPE_CHECKING

from .core.errors import TemplateError

if TYPE_CHECKING:
    from .core.config_model import ProjectConfig

logger = logging.getLogger(__name__)

_MARKER_RE = re.compile(r"^[ \t]*//[ \t]*\[@([A-Z0-9_]+)([{}])@\][ \t]*$")

TEMPLATE_SUFFIXES = (".h", ".in")

BUILTIN_TEMPLATES: dict[str, str] = {
    "VERSION": (
        "#define ${PREFIX}_VERSION_MAJOR ${VERSION_MAJOR}\n"
        "#define ${PREFIX}_VERSION_MINOR ${VERSION_MINOR}\n"
        "#define ${PREFIX}_VERSION_PATCH ${VERSION_PATCH}\n"
        '#define ${PREFIX}_VERSION_STRING "${VERSION}"\n'
    ),
}


@dataclass(frozen=True)
class TemplateBlock:
    """A template region; ``begin``/``end`` are 0-based marker line indices."""

    name: str
    begin: int
    end: int
    body: str


_LINE_RE = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")


def split_lines(text: str) -> list[str]:
    """Split on CR, LF and CRLF only, keeping terminators."""
    return _LINE_RE.findall(text)


def dominant_eol(text: str) -> str:
    """Most common line terminator in ``text``; LF on ties or no lines."""
    crlf = text.count("\r\n")
    lf = text.count("\n") - crlf
    cr = text.count("\r") - crlf
    if crlf > lf and crlf >= cr:
        return "\r\n"
    if cr > lf and cr > crlf:
        return "\r"
    return "\n"


def find_blocks(text: str) -> list[TemplateBlock]:
    """Locate all template blocks in ``text``.

    Raises:
        TemplateError: on unclosed, unopened, mismatched or nested markers.
    """
    blocks: list[TemplateBlock] = []
    lines = split_lines(text)
    open_name: str | None = None
    open_line = 0

    for index, line in enumerate(lines):
        match = _MARKER_RE.match(line.rstrip("\r\n"))
        if not match:
            continue
        name, brace = match.groups()

        if brace == "{":
            if open_name is not None:
                raise TemplateError(
                    f"template {name!r} opened inside {open_name!r}", line=index + 1
                )
            open_name, open_line = name, index
        else:
            if open_name is None:
                raise TemplateError(f"closing marker for {name!r} without opener", line=index + 1)
            if name != open_name:
                raise TemplateError(
                    f"closing marker {name!r} does not match {open_name!r}", line=index + 1
                )
            blocks.append(
                TemplateBlock(
                    name=name,
                    begin=open_line,
                    end=index,
                    body="".join(lines[open_line + 1 : index]),
                )
            )
            open_name = None

    if open_name is not None:
        raise TemplateError(f"template {open_name!r} is never closed", line=open_line + 1)

    return blocks


class TemplateLibrary:
    """Named templates available for expansion."""

    def __init__(self, templates: dict[str, str] | None = None):
        self._templates: dict[str, str] = dict(templates or {})

    @classmethod
    def builtin(cls) -> TemplateLibrary:
        return cls(BUILTIN_TEMPLATES)

    @classmethod
    def from_directory(cls, directory: Path | str, include_builtin: bool = True) -> TemplateLibrary:
        """Load every NAME.h / NAME.in file in ``directory``.

        Directory templates take precedence over builtin ones.
        """
        library = cls.builtin() if include_builtin else cls()
        directory = Path(directory)
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix in TEMPLATE_SUFFIXES:
                library.add(path.stem, path.read_text(encoding="utf-8"))
                logger.debug("Loaded template %s from %s", path.stem, path)
        return library

    def add(self, name: str, body: str) -> None:
        self._templates[name] = body

    def names(self) -> list[str]:
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def render(self, name: str, project: ProjectConfig) -> str | None:
        """Render template ``name`` for ``project``; None if it is unknown."""
        body = self._templates.get(name)
        if body is None:
            return None
        major, minor, patch = project.version_info
        return Template(body).safe_substitute(
            PREFIX=project.prefix,
            PRODUCT=project.product,
            VERSION=project.version,
            VERSION_MAJOR=major,
            VERSION_MINOR=minor,
            VERSION_PATCH=patch,
        )


def expand(text: str, library: TemplateLibrary, project: ProjectConfig) -> str:
    """Regenerate the body of every known template block in ``text``."""
    blocks = find_blocks(text)
    if not blocks:
        return text

    eol = dominant_eol(text)
    lines = split_lines(text)
    out: list[str] = []
    cursor = 0

    for block in blocks:
        rendered = library.render(block.name, project)
        if rendered is None:
            logger.debug("No template named %s; block left as is", block.name)
            continue

        body_lines = [line.rstrip("\r\n") for line in split_lines(rendered)]
        # The body always ends in exactly one terminator
        while body_lines and not body_lines[-1].strip():
            body_lines.pop()
        out.extend(lines[cursor : block.begin + 1])
        out.extend(line + eol for line in body_lines)
        cursor = block.end

    out.extend(lines[cursor:])
    return "".join(out)
