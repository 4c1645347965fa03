# src/lambdalog/util/paths.py: Configuration path resolution.
# This module resolves where the logging configuration file lives. An explicit
# environment variable wins; otherwise the platform's user config directory is
# used, so the same lookup works on Linux, macOS and Windows.

import os
from pathlib import Path
from typing import Optional

import platformdirs

CONFIG_ENV_VAR = "LAMBDALOG_CONFIG"
CONFIG_FILE_NAME = "logging.yaml"

def get_config_home() -> Path:
    """Get the user config directory for the application."""
    return Path(platformdirs.user_config_dir("lambdalog"))

def expand_path(path: str | Path) -> Path:
    """Expand environment variables and user home directory in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path)))).resolve()

def get_default_config_path() -> Optional[Path]:
    """
    Return the configuration file to use when none is given explicitly.

    Returns None when neither the environment override nor the per-user file
    exists, in which case built-in defaults apply.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return expand_path(override)

    candidate = get_config_home() / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None
