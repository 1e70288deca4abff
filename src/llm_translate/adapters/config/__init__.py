"""
Configuration adapters.
"""

from .environment import KEY_FILE_HINT, EnvironmentConfigProvider, read_api_key
from .file_config import CONFIG_FILE_NAMES, FileConfigProvider


__all__ = [
    "CONFIG_FILE_NAMES",
    "KEY_FILE_HINT",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "read_api_key",
]
