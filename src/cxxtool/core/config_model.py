"""Core configuration model (structured view of a cxxconfig record)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, fields
from pathlib import Path, PurePosixPath
from typing import Any, Mapping

from ..tool_options import PIPELINE_ORDER, Tool
from .errors import ConfigError, ConfigValidationError

# MAJOR.MINOR.PATCH with optional -prerelease and +build parts
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$"
)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_REQUIRED_KEYS = ("product", "version", "prefix", "source")
_KNOWN_KEYS = frozenset(_REQUIRED_KEYS + ("tools",))


@dataclass(frozen=True)
class ToolOptions:
    no_tabs: bool = False
    no_trailing_lines: bool = False
    no_trailing_spaces: bool = False
    unix_eol: bool = False
    sort_includes: bool = False
    expand_templates: bool = False

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> ToolOptions:
        problems = _tool_problems(mapping)
        if problems:
            raise ConfigValidationError(problems)
        return cls._build(mapping)

    @classmethod
    def _build(cls, mapping: Mapping[str, Any]) -> ToolOptions:
        return cls(**{Tool.from_key(key).attribute: value for key, value in mapping.items()})

    def is_enabled(self, tool: Tool) -> bool:
        return getattr(self, tool.attribute)

    def enabled(self) -> list[Tool]:
        """Enabled tools in the order the processor runs them."""
        return [tool for tool in PIPELINE_ORDER if self.is_enabled(tool)]

    def to_mapping(self) -> dict[str, bool]:
        return {Tool[f.name.upper()].key: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ProjectConfig:
    """A validated project record.

    ``root`` is the directory the record was loaded from. It is not part of
    the record itself and is left out of ``to_mapping()``.
    """

    product: str
    version: str
    prefix: str
    source: str
    tools: ToolOptions = field(default_factory=ToolOptions)
    root: Path | None = field(default=None, compare=False)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any], root: Path | str | None = None) -> ProjectConfig:
        """Validate a raw mapping and build a ProjectConfig from it.

        Args:
            mapping: The record as read from cxxconfig.
            root: Directory the record belongs to, used to resolve ``source``.

        Raises:
            ConfigValidationError: listing every problem in the record.
        """
        if not isinstance(mapping, Mapping):
            raise ConfigValidationError([f"record must be a mapping, got {type(mapping).__name__}"])

        problems: list[str] = []

        for key in sorted(set(mapping) - _KNOWN_KEYS, key=str):
            problems.append(f"{key}: unknown key")

        for key in _REQUIRED_KEYS:
            if key not in mapping:
                problems.append(f"{key}: missing required key")
                continue
            value = mapping[key]
            if not isinstance(value, str):
                problems.append(f"{key}: expected string, got {type(value).__name__}")
            elif not value.strip():
                problems.append(f"{key}: must not be empty")

        version = mapping.get("version")
        if isinstance(version, str) and version.strip() and not _SEMVER_RE.match(version):
            problems.append(f"version: {version!r} is not a semantic version (MAJOR.MINOR.PATCH)")

        prefix = mapping.get("prefix")
        if isinstance(prefix, str) and prefix.strip() and not _IDENTIFIER_RE.match(prefix):
            problems.append(f"prefix: {prefix!r} is not a valid C identifier")

        source = mapping.get("source")
        if isinstance(source, str) and source.strip():
            problems.extend(_source_problems(source))

        tools = mapping.get("tools", {})
        if not isinstance(tools, Mapping):
            problems.append(f"tools: expected mapping, got {type(tools).__name__}")
        else:
            problems.extend(_tool_problems(tools))

        if problems:
            raise ConfigValidationError(problems)

        return cls(
            product=mapping["product"],
            version=mapping["version"],
            prefix=mapping["prefix"],
            source=mapping["source"],
            tools=ToolOptions._build(tools),
            root=Path(root) if root is not None else None,
        )

    def to_mapping(self) -> dict[str, Any]:
        return {
            "product": self.product,
            "version": self.version,
            "prefix": self.prefix,
            "source": self.source,
            "tools": self.tools.to_mapping(),
        }

    @property
    def version_info(self) -> tuple[int, int, int]:
        match = _SEMVER_RE.match(self.version)
        return int(match.group(1)), int(match.group(2)), int(match.group(3))

    @property
    def source_dir(self) -> Path:
        if self.root is None:
            raise ConfigError("project root is unknown; cannot resolve source directory")
        return self.root.joinpath(*PurePosixPath(self.source.replace("\\", "/")).parts)


def _tool_problems(tools: Mapping[str, Any]) -> list[str]:
    problems = []
    for key, value in tools.items():
        try:
            Tool.from_key(key)
        except KeyError:
            problems.append(f"tools.{key}: unknown tool")
            continue
        # bool only; 0/1 and "true" are not toggles
        if type(value) is not bool:
            problems.append(f"tools.{key}: expected boolean, got {type(value).__name__}")
    return problems


def _source_problems(source: str) -> list[str]:
    path = PurePosixPath(source.replace("\\", "/"))
    if path.is_absolute() or re.match(r"^[A-Za-z]:", source):
        return [f"source: {source!r} must be relative to the project root"]
    if ".." in path.parts:
        return [f"source: {source!r} must not leave the project root"]
    return []


@dataclass(frozen=True)
class RunSettings:
    """Process-level settings (environment and CLI), separate from the record."""

    config_path: Path
    templates_dir: Path | None
    tab_size: int
    debug: bool
    verbose: bool
