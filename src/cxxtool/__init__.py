"""cxxtool - Formatting and template maintenance for C/C++ source trees"""

__version__ = "1.0.0"
__description__ = "Formatting and template maintenance for C/C++ source trees"

__all__ = ["main", "ProjectConfig", "load_project_config", "__version__"]


def __getattr__(name: str):
    """Lazy import so that importing cxxtool.config does not pull in the CLI."""
    if name == "main":
        from .main import main

        return main
    if name == "ProjectConfig":
        from .core.config_model import ProjectConfig

        return ProjectConfig
    if name == "load_project_config":
        from .adapters.config_file import load_project_config

        return load_project_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
