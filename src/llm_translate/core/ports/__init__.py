"""
Ports - Abstract interfaces for external dependencies.

Ports define the contracts that adapters must implement.
This enables dependency inversion and easy testing.
"""

from .config_provider import (
    DEFAULT_DEBOUNCE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_SETTLE_DELAY,
    DEFAULT_TIMEOUT,
    KEY_FILE_NAME,
    AppConfig,
    ConfigProviderPort,
    TranslateConfig,
    WatchConfig,
    default_key_path,
)
from .transformation_client import DEFAULT_MAX_TOKENS, TransformationClientPort


__all__ = [
    "DEFAULT_DEBOUNCE",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_SETTLE_DELAY",
    "DEFAULT_TIMEOUT",
    "KEY_FILE_NAME",
    "AppConfig",
    "ConfigProviderPort",
    "TransformationClientPort",
    "TranslateConfig",
    "WatchConfig",
    "default_key_path",
]
