"""Configuration helpers for oauth-flow-engine."""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml

from . import settings
from .core.storage import DirectoryFlowStore, FlowStore, MemoryFlowStore

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
LOCAL_CONFIG_PATH = PROJECT_ROOT / "config.local.yaml"

CONFIG_PATH_ENV = "OAUTH_FLOW_ENGINE_CONFIG"
DEFINITIONS_DIR_ENV = "OAUTH_FLOW_ENGINE_DEFINITIONS_DIR"
STORAGE_MODE_ENV = "OAUTH_FLOW_ENGINE_STORAGE_MODE"

STORAGE_MODES = ("file", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG = {
    # None -> bundled definitions shipped with the package
    "definitions_dir": None,
    "server": {
        "host": settings.server_host,
        "port": settings.server_port,
    },
    "storage": {
        "mode": settings.storage_mode,
    },
    "logging": {
        "level": settings.log_level,
    },
}


def config_defaults() -> dict:
    """Return default configuration values."""
    return copy.deepcopy(DEFAULT_CONFIG)


def config_schema() -> dict:
    """Return JSON Schema for configuration."""
    return {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "type": "object",
        "properties": {
            "definitions_dir": {"type": ["string", "null"]},
            "server": {
                "type": "object",
                "properties": {
                    "host": {"type": "string"},
                    "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                },
                "additionalProperties": False,
            },
            "storage": {
                "type": "object",
                "properties": {
                    "mode": {"type": "string", "enum": list(STORAGE_MODES)},
                },
                "additionalProperties": False,
            },
            "logging": {
                "type": "object",
                "properties": {
                    "level": {"type": "string", "enum": list(LOG_LEVELS)},
                },
                "additionalProperties": False,
            },
        },
        "additionalProperties": False,
    }


def _deep_merge(base: dict, update: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in update.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _load_config_file(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring unreadable config file %s: %s", path, e)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config file %s: top level must be a mapping", path)
        return {}
    return data


def default_config_path() -> Path:
    """Config file location: $OAUTH_FLOW_ENGINE_CONFIG or config.local.yaml."""
    env_path = os.environ.get(CONFIG_PATH_ENV)
    return Path(env_path) if env_path else LOCAL_CONFIG_PATH


def load_config(config_path: Optional[Path] = None) -> dict:
    """Load resolved configuration (defaults merged with config file and environment)."""
    path = config_path or default_config_path()
    config = _deep_merge(config_defaults(), _load_config_file(path))

    env_definitions = os.environ.get(DEFINITIONS_DIR_ENV)
    if env_definitions:
        config["definitions_dir"] = env_definitions

    env_mode = os.environ.get(STORAGE_MODE_ENV)
    if env_mode:
        config["storage"]["mode"] = env_mode

    return config


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _check_section(data: dict, name: str, allowed: set[str], errors: list[str]) -> dict:
    if name not in data:
        return {}
    section = data[name]
    if not isinstance(section, dict):
        errors.append(f"{name} must be an object")
        return {}
    for key in section:
        if key not in allowed:
            errors.append(f"Unknown {name} key: {key}")
    return section


def validate_config_dict(data: Any) -> list[str]:
    """Validate a config dict against the schema."""
    errors: list[str] = []
    if not isinstance(data, dict):
        return ["Config must be a mapping/object"]

    allowed_top = {"definitions_dir", "server", "storage", "logging"}
    for key in data:
        if key not in allowed_top:
            errors.append(f"Unknown config key: {key}")

    definitions_dir = data.get("definitions_dir")
    if definitions_dir is not None and not isinstance(definitions_dir, str):
        errors.append("definitions_dir must be a string")

    server = _check_section(data, "server", {"host", "port"}, errors)
    port = server.get("port")
    if port is not None and not (_is_int(port) and 1 <= port <= 65535):
        errors.append("server.port must be between 1 and 65535")

    storage = _check_section(data, "storage", {"mode"}, errors)
    mode = storage.get("mode")
    if mode is not None and mode not in STORAGE_MODES:
        errors.append(f"storage.mode must be one of: {', '.join(STORAGE_MODES)}")

    log_config = _check_section(data, "logging", {"level"}, errors)
    level = log_config.get("level")
    if level is not None and str(level).upper() not in LOG_LEVELS:
        errors.append(f"logging.level must be one of: {', '.join(LOG_LEVELS)}")

    return errors


def validate_config_file(config_path: Optional[Path] = None) -> list[str]:
    """Validate the config file. Returns list of errors (empty = valid)."""
    path = config_path or default_config_path()
    if not path.exists():
        return []
    data = _load_config_file(path)
    return validate_config_dict(data)


def resolve_definitions_dir(config: dict) -> Path:
    """
    Directory holding ``{id}.json`` definitions.

    Order: ``definitions_dir`` from config/environment, then the per-user data
    directory if it exists, then the definitions bundled with the package.
    """
    configured = config.get("definitions_dir")
    if configured:
        return Path(configured).expanduser()
    if settings.user_definitions_dir.is_dir():
        return settings.user_definitions_dir
    return settings.bundled_definitions_dir


def create_store(config: dict) -> FlowStore:
    """Build the flow store selected by ``storage.mode``."""
    definitions_dir = resolve_definitions_dir(config)
    mode = config.get("storage", {}).get("mode", settings.storage_mode)
    if mode == "memory":
        logger.info("Using in-memory flow storage seeded from %s", definitions_dir)
        return MemoryFlowStore.seeded_from(definitions_dir)
    return DirectoryFlowStore(definitions_dir)
