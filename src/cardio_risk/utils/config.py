"""YAML configuration loader."""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://cardio-vascular-backend.onrender.com"
BASE_URL_ENV_VAR = "API_BASE_URL"


class ClientSettings(BaseModel):
    """Typed view of the merged client configuration."""

    model_config = ConfigDict(protected_namespaces=())

    base_url: str = DEFAULT_BASE_URL
    predict_path: str = "/predict"
    timeout: float | None = None
    storage_key: str = "predictionHistory"
    token_key: str = "token"
    max_entries: int = 50
    default_limit: int = 10
    model_version: str = "v2.1.0"
    user_id: str = "user-1"
    date_format: str = "%m/%d/%Y"
    storage_path: str | None = None


def load_config(config_path: str | Path) -> dict[str, Any]:
    """Load a YAML configuration file.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML config file.

    Returns
    -------
    dict
        Parsed configuration dictionary.
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        config = yaml.safe_load(f)

    return config or {}


def load_all_configs(config_dir: str | Path = "configs") -> dict[str, Any]:
    """Load all YAML configs from the config directory and merge them.

    Parameters
    ----------
    config_dir : str or Path
        Directory containing YAML config files.

    Returns
    -------
    dict
        Merged configuration dictionary.
    """
    config_dir = Path(config_dir)
    merged = {}

    for config_file in sorted(config_dir.glob("*.yaml")):
        config = load_config(config_file)
        merged.update(config)

    return merged


def settings_from_config(config: dict[str, Any]) -> ClientSettings:
    """Flatten the sectioned YAML layout into :class:`ClientSettings`.

    ``API_BASE_URL`` in the environment overrides ``api.base_url``.
    """
    api_cfg = config.get("api", {})
    history_cfg = config.get("history", {})
    model_cfg = config.get("model", {})
    export_cfg = config.get("export", {})
    storage_cfg = config.get("storage", {})

    values = {
        "base_url": api_cfg.get("base_url"),
        "predict_path": api_cfg.get("predict_path"),
        "timeout": api_cfg.get("timeout"),
        "storage_key": history_cfg.get("storage_key"),
        "max_entries": history_cfg.get("max_entries"),
        "default_limit": history_cfg.get("default_limit"),
        "token_key": storage_cfg.get("token_key"),
        "storage_path": storage_cfg.get("path"),
        "model_version": model_cfg.get("version"),
        "user_id": model_cfg.get("user_id"),
        "date_format": export_cfg.get("date_format"),
    }

    env_base_url = os.environ.get(BASE_URL_ENV_VAR)
    if env_base_url:
        logger.info("Using %s from environment: %s", BASE_URL_ENV_VAR, env_base_url)
        values["base_url"] = env_base_url

    return ClientSettings(**{k: v for k, v in values.items() if v is not None})


def load_client_settings(config_dir: str | Path = "configs") -> ClientSettings:
    """Load client settings from ``config_dir``, falling back to defaults if it is missing."""
    config_dir = Path(config_dir)
    if not config_dir.is_dir():
        logger.info("Config directory %s not found, using defaults.", config_dir)
        return settings_from_config({})
    return settings_from_config(load_all_configs(config_dir))
