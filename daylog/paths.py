"""Path helpers for locating the project root, config file and log directory."""

import os
import sys

CONFIG_DIR = "config"
CONFIG_FILENAME = "logs.yaml"


def current_dir(argv0: str | None = None) -> str:
    """Absolute directory of the running program."""
    return os.path.dirname(os.path.abspath(argv0 or sys.argv[0]))


def root_path(argv0: str | None = None) -> str:
    """Project root: the parent of the program's directory."""
    return os.path.dirname(current_dir(argv0))


def default_config_path(root: str | None = None) -> str:
    return os.path.join(root or root_path(), CONFIG_DIR, CONFIG_FILENAME)


def resolve_log_dir(log_dir: str, relative: bool, root: str | None = None) -> str:
    if relative:
        return os.path.join(root or root_path(), log_dir)
    return log_dir
