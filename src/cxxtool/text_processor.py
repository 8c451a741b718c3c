"""Source filters applied to C/C++ files by cxxtool.

Every filter takes the full file text and a FilterContext and returns the new
text. Filters only look at lines, never at C++ syntax.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .core.config_model import ProjectConfig, ToolOptions
from .templates import TemplateLibrary, dominant_eol, expand, split_lines
from .tool_options import PIPELINE_ORDER, Tool

DEFAULT_TAB_SIZE = 2

_INCLUDE_RE = re.compile(r'^[ \t]*#[ \t]*include[ \t]*([<"])([^>"]*)[>"]')
_TRAILING_WS_RE = re.compile(r"[ \t]+(?=\r\n|\n|\r|\Z)")


@dataclass(frozen=True)
class FilterContext:
    """What a filter may know besides the text itself."""

    project: ProjectConfig
    path: Path | None = None
    tab_size: int = DEFAULT_TAB_SIZE
    templates: TemplateLibrary | None = None


SourceFilter = Callable[[str, FilterContext], str]


def expand_tabs(text: str, ctx: FilterContext) -> str:
    """Replace tabs with spaces up to the next tab stop."""
    if "\t" not in text:
        return text
    return "".join(line.expandtabs(ctx.tab_size) for line in split_lines(text))


def unix_eol(text: str, ctx: FilterContext) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_trailing_spaces(text: str, ctx: FilterContext) -> str:
    return _TRAILING_WS_RE.sub("", text)


def strip_trailing_lines(text: str, ctx: FilterContext) -> str:
    """Drop blank lines at EOF and end the file with a single line break."""
    lines = split_lines(text)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        return ""

    # Measured on the kept lines only, so a second pass picks the same ending
    eol = dominant_eol("".join(lines))
    lines[-1] = lines[-1].rstrip("\r\n") + eol
    return "".join(lines)


def _include_key(line: str) -> tuple[int, str, str]:
    match = _INCLUDE_RE.match(line)
    delimiter, path = match.groups()
    return (0 if delimiter == "<" else 1, path.casefold(), path)


def sort_includes(text: str, ctx: FilterContext) -> str:
    """Sort each run of consecutive #include lines.

    Any other line, blank ones included, ends a run, so manual grouping is
    preserved.
    """
    lines = split_lines(text)
    out: list[str] = []
    run: list[str] = []

    def flush() -> None:
        if run:
            out.extend(_sort_run(run))
            run.clear()

    for line in lines:
        if _INCLUDE_RE.match(line):
            run.append(line)
        else:
            flush()
            out.append(line)
    flush()

    return "".join(out)


def _sort_run(run: list[str]) -> list[str]:
    eols = [line[len(line.rstrip("\r\n")) :] for line in run]
    ordered = sorted((line.rstrip("\r\n") for line in run), key=_include_key)
    # Terminators stay in position so a final line without one stays last
    return [line + eol for line, eol in zip(ordered, eols)]


def expand_templates(text: str, ctx: FilterContext) -> str:
    library = ctx.templates if ctx.templates is not None else TemplateLibrary.builtin()
    return expand(text, library, ctx.project)


FILTERS: dict[Tool, SourceFilter] = {
    Tool.NO_TABS: expand_tabs,
    Tool.NO_TRAILING_LINES: strip_trailing_lines,
    Tool.NO_TRAILING_SPACES: strip_trailing_spaces,
    Tool.UNIX_EOL: unix_eol,
    Tool.SORT_INCLUDES: sort_includes,
    Tool.EXPAND_TEMPLATES: expand_templates,
}


class TextProcessor:
    """Run the enabled source filters over file contents."""

    def __init__(
        self,
        tools: ToolOptions | list[Tool],
        templates: TemplateLibrary | None = None,
        tab_size: int = DEFAULT_TAB_SIZE,
    ):
        """Initialize the text processor.

        Args:
            tools: ToolOptions from the project, or an explicit list of tools.
            templates: Template library for ExpandTemplates. Defaults to the
                builtin templates.
            tab_size: Tab stop width used by NoTabs.
        """
        if tab_size < 1:
            raise ValueError(f"tab_size must be positive, got {tab_size}")
        enabled = set(tools.enabled() if isinstance(tools, ToolOptions) else tools)
        self.tools: list[Tool] = [tool for tool in PIPELINE_ORDER if tool in enabled]
        self.templates = templates if templates is not None else TemplateLibrary.builtin()
        self.tab_size = tab_size

    @property
    def filters(self) -> list[tuple[Tool, SourceFilter]]:
        return [(tool, FILTERS[tool]) for tool in self.tools]

    def context(self, project: ProjectConfig, path: Path | None = None) -> FilterContext:
        return FilterContext(
            project=project, path=path, tab_size=self.tab_size, templates=self.templates
        )

    def process(self, text: str, context: FilterContext, only: Tool | None = None) -> str:
        """Process text with the enabled filters in pipeline order.

        Args:
            text: Full file contents.
            context: Filter context for the file.
            only: Run just this tool, if it is enabled.

        Returns:
            The processed text.
        """
        result = text
        for tool, source_filter in self.filters:
            if only is not None and tool is not only:
                continue
            result = source_filter(result, context)
        return result
