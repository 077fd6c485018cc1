"""Configuration — the ``log`` section of a YAML file, as a frozen dataclass."""

import os
import logging
from dataclasses import dataclass

import yaml

from daylog.errors import ConfigError
from daylog.paths import default_config_path, resolve_log_dir

logger = logging.getLogger(__name__)

SECTION = "log"


@dataclass(frozen=True)
class Config:
    log_dir: str
    log_filename: str
    prefix: str = ""
    level: str = "DEBUG"
    queue_size: int = 8000
    check_interval_seconds: float = 30.0
    console_levels: tuple = ("DEBUG", "INFO", "WARN", "ERROR")
    max_task_restarts: int = 3


def load_yaml_config(path: str) -> dict:
    """Load the YAML file at *path*. Raises ConfigError if it is missing or invalid."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Config file {path} not found") from None
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data


def _fetch(section: dict, key: str, expected, default=None, required: bool = False):
    if key not in section:
        if required:
            raise ConfigError(f"Missing required key {SECTION}.{key}")
        return default
    value = section[key]
    # bool is an int subclass
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        raise ConfigError(f"{SECTION}.{key} has unexpected type {type(value).__name__}")
    return value


def build_config(data: dict, root: str | None = None) -> Config:
    """Build Config from parsed YAML data plus environment overrides."""
    section = data.get(SECTION)
    if not isinstance(section, dict):
        raise ConfigError(f"Missing [{SECTION}] section")

    log_dir = _fetch(section, "dir", str, required=True)
    relative = _fetch(section, "relative", bool, default=False)
    console_levels = _fetch(section, "console_levels", list,
                            default=list(Config.console_levels))

    queue_size = _fetch(section, "queue_size", int, default=Config.queue_size)
    check_interval = _fetch(section, "check_interval", (int, float),
                            default=Config.check_interval_seconds)
    max_task_restarts = _fetch(section, "max_task_restarts", int,
                               default=Config.max_task_restarts)
    if queue_size <= 0:
        raise ConfigError(f"{SECTION}.queue_size must be positive, got {queue_size}")
    if check_interval <= 0:
        raise ConfigError(f"{SECTION}.check_interval must be positive, got {check_interval}")
    if max_task_restarts < 0:
        raise ConfigError(f"{SECTION}.max_task_restarts must not be negative, got {max_task_restarts}")

    return Config(
        log_dir=resolve_log_dir(log_dir, relative, root),
        log_filename=_fetch(section, "name", str, required=True),
        prefix=_fetch(section, "prefix", str, default=Config.prefix),
        level=os.environ.get("LOG_LEVEL", _fetch(section, "level", str, default=Config.level)),
        queue_size=queue_size,
        check_interval_seconds=float(check_interval),
        console_levels=tuple(str(name) for name in console_levels),
        max_task_restarts=max_task_restarts,
    )


def load_config(path: str | None = None) -> Config:
    """Load Config from *path*, ``CONFIG_PATH``, or ``{root}/config/logs.yaml``."""
    path = path or os.environ.get("CONFIG_PATH") or default_config_path()
    return build_config(load_yaml_config(path))
