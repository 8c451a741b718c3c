"""File adapter producing a validated ProjectConfig from cxxconfig.

Supported formats:
    cxxconfig.js    CommonJS module exporting an object literal
    cxxconfig.json  plain JSON
    cxxconfig.yaml  YAML (also .yml)

The JavaScript form is not evaluated. Comments and the ``module.exports``
wrapper are stripped and the object literal is read as a YAML flow mapping,
which accepts unquoted keys and trailing commas.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

import yaml

from ..core.config_model import ProjectConfig
from ..core.errors import ConfigError, ConfigFormatError, ConfigNotFoundError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("cxxconfig.js", "cxxconfig.json", "cxxconfig.yaml", "cxxconfig.yml")

_EXPORT_RE = re.compile(r"^\s*(?:module\.exports\s*=|export\s+default)\s*")


def find_config(directory: Path | str) -> Path:
    """Locate the configuration file in a project directory.

    Raises:
        ConfigNotFoundError: if none of CONFIG_FILENAMES exists.
    """
    directory = Path(directory)
    for name in CONFIG_FILENAMES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    raise ConfigNotFoundError(
        f"no configuration file found in {directory} (looked for {', '.join(CONFIG_FILENAMES)})"
    )


def strip_js_comments(source: str) -> str:
    """Remove // and /* */ comments that are not inside string literals."""
    out: list[str] = []
    i = 0
    length = len(source)
    quote: str | None = None

    while i < length:
        ch = source[i]
        if quote:
            out.append(ch)
            if ch == "\\" and i + 1 < length:
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue

        if ch in "\"'`":
            quote = ch
            out.append(ch)
            i += 1
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = length if end == -1 else end
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                raise ConfigFormatError("unterminated /* comment")
            # Keep line numbers stable for parser error messages
            out.append("\n" * source.count("\n", i, end))
            i = end + 2
        else:
            out.append(ch)
            i += 1

    return "".join(out)


def space_after_colons(source: str) -> str:
    """Put a space after every ``:`` outside string literals.

    YAML only treats ``:`` as a key separator when whitespace follows it,
    while JavaScript also accepts ``{product:"mpsl"}``.
    """
    out: list[str] = []
    quote: str | None = None
    i = 0
    length = len(source)

    while i < length:
        ch = source[i]
        out.append(ch)
        if quote:
            if ch == "\\" and i + 1 < length:
                out.append(source[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in "\"'`":
            quote = ch
        elif ch == ":" and i + 1 < length and not source[i + 1].isspace():
            out.append(" ")
        i += 1

    return "".join(out)


def _parse_js(text: str) -> Any:
    body = strip_js_comments(text)
    match = _EXPORT_RE.match(body)
    if not match:
        raise ConfigFormatError("expected 'module.exports = { ... }' in JavaScript config")
    body = body[match.end():].strip()
    if body.endswith(";"):
        body = body[:-1].rstrip()
    if not body.startswith("{"):
        raise ConfigFormatError("JavaScript config must export an object literal")
    return yaml.safe_load(space_after_colons(body))


def read_config_mapping(path: Path | str) -> dict[str, Any]:
    """Read the raw record from a configuration file without validating it."""
    path = Path(path)
    suffix = path.suffix.lower()

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigNotFoundError(f"configuration file not found: {path}") from e
    except UnicodeDecodeError as e:
        raise ConfigFormatError(f"{path}: not valid UTF-8: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read configuration file {path}: {e}") from e

    try:
        if suffix == ".json":
            data = json.loads(text)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        elif suffix == ".js":
            data = _parse_js(text)
        else:
            raise ConfigFormatError(f"{path}: unsupported configuration format {suffix!r}")
    except json.JSONDecodeError as e:
        raise ConfigFormatError(f"{path}: invalid JSON: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigFormatError(f"{path}: cannot parse configuration: {e}") from e

    if not isinstance(data, dict):
        raise ConfigFormatError(
            f"{path}: configuration must be a mapping, got {type(data).__name__}"
        )

    logger.debug("Read configuration from %s", path)
    return data


def load_project_config(path: Path | str) -> ProjectConfig:
    """Load and validate a project configuration.

    Args:
        path: A configuration file, or a directory containing one.

    Returns:
        ProjectConfig rooted at the configuration file's directory.
    """
    path = Path(path)
    if path.is_dir():
        path = find_config(path)

    mapping = read_config_mapping(path)
    project = ProjectConfig.from_mapping(mapping, root=path.resolve().parent)
    logger.info("Loaded configuration for %s %s from %s", project.product, project.version, path)
    return project
