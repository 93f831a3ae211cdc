# printify_check/config/loader.py
"""
Config file discovery and loading.

The file lives in the platformdirs user config directory unless
PRINTIFY_CHECK_CONFIG points elsewhere. A missing file is written out with
defaults so users have something to edit.
"""

import logging
import os
from pathlib import Path

import yaml
from platformdirs import user_config_path

from .schema import PrintifyCheckConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PRINTIFY_CHECK_CONFIG"


def get_config_path() -> Path:
    """Config file location: $PRINTIFY_CHECK_CONFIG, else <user config dir>/config.yaml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return user_config_path("printify-check", ensure_exists=True) / "config.yaml"


def _write_defaults(path: Path) -> PrintifyCheckConfig:
    config = PrintifyCheckConfig()
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(config.model_dump(mode="json"), f, default_flow_style=False, sort_keys=False)
    logger.info(f"Wrote default config to {path}")
    return config


def load_config(path: Path | None = None) -> PrintifyCheckConfig:
    """
    Load and validate the config file, creating it on first use.

    Args:
        path: Explicit file (default: get_config_path())

    Raises:
        pydantic.ValidationError: If a value is out of range (e.g. interval <= 0)
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        return _write_defaults(config_path)

    with config_path.open("r") as f:
        data = yaml.safe_load(f) or {}

    config = PrintifyCheckConfig.model_validate(data)
    logger.debug(f"Loaded config from {config_path}")
    return config
