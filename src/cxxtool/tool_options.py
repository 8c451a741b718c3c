"""Formatting tools that can be toggled from the project configuration.

Each tool corresponds to one boolean key under ``tools`` in cxxconfig and
to one source filter in the text processor.
"""

from enum import Enum


class Tool(Enum):
    """A formatting tool, valued by its configuration key."""

    NO_TABS = "NoTabs"
    NO_TRAILING_LINES = "NoTrailingLines"
    NO_TRAILING_SPACES = "NoTrailingSpaces"
    UNIX_EOL = "UnixEOL"
    SORT_INCLUDES = "SortIncludes"
    EXPAND_TEMPLATES = "ExpandTemplates"

    @property
    def key(self) -> str:
        """Key used in the ``tools`` mapping of cxxconfig."""
        return self.value

    @property
    def attribute(self) -> str:
        """Attribute name on ToolOptions."""
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> "Tool":
        for tool in cls:
            if tool.value == key:
                return tool
        raise KeyError(key)


# Templates expand first so generated code gets normalized along with the rest
PIPELINE_ORDER: tuple[Tool, ...] = (
    Tool.EXPAND_TEMPLATES,
    Tool.SORT_INCLUDES,
    Tool.NO_TABS,
    Tool.UNIX_EOL,
    Tool.NO_TRAILING_SPACES,
    Tool.NO_TRAILING_LINES,
)

TOOL_DESCRIPTIONS: dict[Tool, str] = {
    Tool.NO_TABS: "Expand tabs to spaces",
    Tool.NO_TRAILING_LINES: "Remove blank lines at end of file",
    Tool.NO_TRAILING_SPACES: "Remove trailing whitespace",
    Tool.UNIX_EOL: "Convert line endings to LF",
    Tool.SORT_INCLUDES: "Sort consecutive #include lines",
    Tool.EXPAND_TEMPLATES: "Regenerate // [@NAME{@] template blocks",
}


def get_tool_description(tool: Tool) -> str:
    return TOOL_DESCRIPTIONS.get(tool, "")
