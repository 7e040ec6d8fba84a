"""Configuration loading from CLI args, env vars, and optional YAML file.

Precedence per field: explicit CLI value > env var > YAML key > default.
"""

import logging
import os
from dataclasses import dataclass

import yaml

logger = logging.getLogger(__name__)

DEFAULT_WTMP_FILE = "/var/log/wtmp"


def _parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class Config:
    wtmp_file: str = DEFAULT_WTMP_FILE
    show_system_events: bool = False
    time_format: str = "short"
    utc: bool = False
    users: tuple[str, ...] = ()
    log_level: str = "WARNING"


def load_yaml_config(path: str | None) -> dict:
    """Load report settings from a YAML file. Returns empty dict if no path."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise yaml.YAMLError(f"{path}: top level must be a mapping")
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def _pick(cli_value, env_name: str, yaml_data: dict, yaml_key: str, default):
    if cli_value is not None:
        return cli_value
    env_value = os.environ.get(env_name)
    if env_value is not None:
        return env_value
    return yaml_data.get(yaml_key, default)


def load_config(cli_args, yaml_data: dict) -> Config:
    """Build Config from CLI args, env vars, and parsed YAML data."""
    # store_true flags only count as explicit when set
    system_flag = True if getattr(cli_args, "system", False) else None
    utc_flag = True if getattr(cli_args, "utc", False) else None

    users = getattr(cli_args, "users", None) or yaml_data.get("users") or ()
    if isinstance(users, str):
        users = [users]

    return Config(
        wtmp_file=str(_pick(getattr(cli_args, "file", None), "LAST_WTMP_FILE",
                            yaml_data, "file", Config.wtmp_file)),
        show_system_events=_parse_bool(_pick(system_flag, "LAST_SYSTEM",
                                             yaml_data, "system", Config.show_system_events)),
        time_format=str(_pick(getattr(cli_args, "time_format", None), "LAST_TIME_FORMAT",
                              yaml_data, "time_format", Config.time_format)),
        utc=_parse_bool(_pick(utc_flag, "LAST_UTC", yaml_data, "utc", Config.utc)),
        users=tuple(str(u) for u in users),
        log_level=str(_pick(None, "LOG_LEVEL", yaml_data, "log_level", Config.log_level)).upper(),
    )
