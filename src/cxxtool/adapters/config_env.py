"""Env configuration adapter producing structured RunSettings."""

from __future__ import annotations

from pathlib import Path

from ..config import config as env_config
from ..core.config_model import RunSettings


def load_run_settings(
    config_path: str | None = None,
    templates_dir: str | None = None,
    tab_size: int | None = None,
    verbosity: int = 0,
) -> RunSettings:
    """Merge CLI overrides over environment values."""
    templates = templates_dir if templates_dir is not None else env_config.TEMPLATES_DIR
    return RunSettings(
        config_path=Path(config_path) if config_path else env_config.CONFIG_PATH,
        templates_dir=Path(templates) if templates else None,
        tab_size=tab_size if tab_size is not None else env_config.TAB_SIZE,
        debug=env_config.DEBUG or verbosity >= 2,
        verbose=verbosity >= 1,
    )
