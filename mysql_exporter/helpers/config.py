"""
==========================
Helpers - Configurations
==========================

This module provides configurations for the exporter: the MySQL connection setting, the exporter name and the logging folder.

Features:
- Loads configuration from a YAML file (`.config.yml` in the working directory by default).
- Falls back to built-in defaults for every missing key, or for a missing file.
- Builds the `SinkConnectionConfig` used by the export worker.


Usage:
>>> import mysql_exporter.helpers.config as cfg
>>> print(cfg.EXPORTER_NAME)  # Access the exporter name
>>> settings = cfg.load_config("path/to/.config.yml")
>>> sink = cfg.sink_config_from(settings)

*Created: 2026-10-19*
"""

import copy
import logging
import os
from pathlib import Path

import yaml

from mysql_exporter.exceptions import ConfigurationError
from mysql_exporter.models import DEFAULT_DATABASE, DEFAULT_HOST, DEFAULT_PORT, SinkConnectionConfig

# =========================
# CONFIG
# =========================

CONFIG_FILE = ".config.yml"

DEFAULTS = {
    "exporter": {
        "name": "MySQLExporter",
    },
    "mysql": {
        "host": DEFAULT_HOST,
        "port": DEFAULT_PORT,
        "user": "root",
        "password": "root",
        "database": DEFAULT_DATABASE,
    },
    "logging": {
        "folder": "Logs",
        "level": "INFO",
    },
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path=CONFIG_FILE) -> dict:
    """
    Load the YAML configuration and merge it over the defaults.
    A missing file is not an error; the defaults are returned.

    Args:
        path (str | Path, optional): Path to the YAML file. Defaults to `.config.yml`.

    Raises:
        ConfigurationError: If the file exists but cannot be parsed.

    Returns:
        dict: The merged configuration.
    """
    if not os.path.isfile(path):
        return copy.deepcopy(DEFAULTS)

    try:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Top level of {path} must be a mapping")

    return _merge(DEFAULTS, loaded)


def sink_config_from(cfg: dict) -> SinkConnectionConfig:
    """
    Build the sink connection setting from a loaded configuration.

    Args:
        cfg (dict): Configuration as returned by `load_config`.

    Raises:
        ConfigurationError: If the port is not an integer or the host is empty.

    Returns:
        SinkConnectionConfig: The resolved connection setting.
    """
    mysql = cfg.get("mysql") or {}

    host = str(mysql.get("host") or "").strip()
    if not host:
        raise ConfigurationError("mysql.host must not be empty")

    try:
        port = int(mysql.get("port", DEFAULT_PORT))
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"mysql.port must be an integer, got {mysql.get('port')!r}") from e

    user = mysql.get("user")
    password = mysql.get("password")

    return SinkConnectionConfig(
        host=host,
        port=port,
        user=str(user) if user is not None else None,
        password=str(password) if password is not None else None,
        database=str(mysql.get("database") or DEFAULT_DATABASE),
    )


def log_level_from(cfg: dict) -> int:
    level_name = str((cfg.get("logging") or {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging.level {level_name!r}")
    return level


# Load the configuration from a YAML file if it exists
cfg = load_config(CONFIG_FILE)

# Exporter Name
EXPORTER_NAME = cfg["exporter"]["name"]

# Log Folder
LOG_FOLDER = Path(cfg["logging"]["folder"])
