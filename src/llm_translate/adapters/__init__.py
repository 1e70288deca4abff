"""
Adapters - Concrete implementations of the core ports.

- llm/: Transformation clients (Anthropic)
- config/: Configuration providers (key file + env vars, YAML/TOML files)
"""

from .config import EnvironmentConfigProvider, FileConfigProvider, read_api_key
from .llm import AnthropicTransformationClient


__all__ = [
    "AnthropicTransformationClient",
    "EnvironmentConfigProvider",
    "FileConfigProvider",
    "read_api_key",
]
