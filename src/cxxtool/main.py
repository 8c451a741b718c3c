#!/usr/bin/env python3
"""cxxtool: validate a cxxconfig record and apply its formatting tools"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .adapters.config_env import load_run_settings
from .adapters.config_file import load_project_config
from .adapters.file_store import FileSystemStore
from .adapters.reporter import ConsoleReporter
from .core.config_model import ProjectConfig, RunSettings
from .core.controller import SourceController
from .core.errors import ConfigError, CxxToolError
from .templates import TemplateLibrary
from .text_processor import TextProcessor
from .tool_options import get_tool_description

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CHANGES = 1
EXIT_CONFIG_ERROR = 2
EXIT_FAILURES = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cxxtool",
        description="Validate a cxxconfig record and apply its formatting tools to C/C++ sources",
    )
    parser.add_argument(
        "--config",
        help="cxxconfig file or project directory (default: $CXXTOOL_CONFIG or .)",
    )
    parser.add_argument(
        "--templates",
        help="directory with extra NAME.h / NAME.in templates (default: $CXXTOOL_TEMPLATES_DIR)",
    )
    parser.add_argument("--tab-size", type=int, help="tab stop width for NoTabs (default: 2)")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="more logging (-vv for debug)"
    )

    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("validate", help="validate the configuration and print it as JSON")
    sub.add_parser("check", help="report files that would change; exit 1 if any")
    sub.add_parser("fix", help="rewrite files in place")
    sub.add_parser("show", help="list enabled tools in the order they run")
    return parser


def _configure_logging(settings: RunSettings) -> None:
    if settings.debug:
        level = logging.DEBUG
    elif settings.verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _build_processor(project: ProjectConfig, settings: RunSettings) -> TextProcessor:
    if settings.templates_dir is not None:
        if not settings.templates_dir.is_dir():
            raise ConfigError(f"templates directory not found: {settings.templates_dir}")
        templates = TemplateLibrary.from_directory(settings.templates_dir)
    else:
        templates = TemplateLibrary.builtin()
    return TextProcessor(project.tools, templates=templates, tab_size=settings.tab_size)


def _show(project: ProjectConfig) -> None:
    print(f"{project.product} {project.version} (prefix {project.prefix}, source {project.source})")
    enabled = project.tools.enabled()
    if not enabled:
        print("No tools enabled")
    for tool in enabled:
        print(f"  {tool.key:<18} {get_tool_description(tool)}")


def run(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""
    args = build_parser().parse_args(argv)
    settings = load_run_settings(
        config_path=args.config,
        templates_dir=args.templates,
        tab_size=args.tab_size,
        verbosity=args.verbose,
    )
    _configure_logging(settings)

    try:
        if settings.tab_size < 1:
            raise ConfigError(f"tab size must be positive, got {settings.tab_size}")
        project = load_project_config(settings.config_path)

        if args.command == "validate":
            print(json.dumps(project.to_mapping(), indent=2))
            return EXIT_OK
        if args.command == "show":
            _show(project)
            return EXIT_OK

        check = args.command == "check"
        controller = SourceController(
            project,
            _build_processor(project, settings),
            FileSystemStore(),
            ConsoleReporter(check=check, root=project.root),
        )
        result = controller.run(write=not check)
    except ConfigError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except CxxToolError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILURES

    if not result.ok:
        return EXIT_FAILURES
    if check and result.changed:
        return EXIT_CHANGES
    return EXIT_OK


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
