# printify_check/config/__init__.py
"""Configuration system for printify-check."""

from .loader import get_config_path, load_config
from .schema import (
    ApiConfig,
    OutputConfig,
    PollingConfig,
    PrintifyCheckConfig,
    WizardConfig,
)

__all__ = [
    "PrintifyCheckConfig",
    "ApiConfig",
    "PollingConfig",
    "WizardConfig",
    "OutputConfig",
    "load_config",
    "get_config_path",
]
