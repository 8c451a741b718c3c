"""Exceptions raised by cxxtool."""

from __future__ import annotations


class CxxToolError(Exception):
    """Base class for all cxxtool errors."""


class ConfigError(CxxToolError):
    """The project configuration could not be used."""


class ConfigNotFoundError(ConfigError):
    pass


class ConfigFormatError(ConfigError):
    """The configuration file could not be parsed."""


class ConfigValidationError(ConfigError):
    """The configuration record does not match the schema.

    Carries every problem found, not just the first one.
    """

    def __init__(self, problems: list[str]):
        self.problems = list(problems)
        super().__init__("invalid configuration: " + "; ".join(self.problems))


class TemplateError(CxxToolError):
    """Malformed template markers in a source file."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class SourceDirectoryError(CxxToolError):
    pass
