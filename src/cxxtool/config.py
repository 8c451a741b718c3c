"""Process settings for cxxtool, read from the environment and .env"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw) if raw.strip() else default
    except ValueError:
        return default


class Config:
    """Environment configuration; CLI flags take precedence"""

    # Project record: a cxxconfig file or the directory holding it
    CONFIG_PATH = Path(os.getenv("CXXTOOL_CONFIG", "."))

    # Extra NAME.h / NAME.in templates for ExpandTemplates
    TEMPLATES_DIR = os.getenv("CXXTOOL_TEMPLATES_DIR", "")

    # Tab stop width used by NoTabs
    TAB_SIZE = _int_env("CXXTOOL_TAB_SIZE", 2)

    DEBUG = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def reload(cls):
        """Re-read the environment (used by tests)."""
        cls.CONFIG_PATH = Path(os.getenv("CXXTOOL_CONFIG", "."))
        cls.TEMPLATES_DIR = os.getenv("CXXTOOL_TEMPLATES_DIR", "")
        cls.TAB_SIZE = _int_env("CXXTOOL_TAB_SIZE", 2)
        cls.DEBUG = os.getenv("DEBUG", "false").lower() == "true"


config = Config()
