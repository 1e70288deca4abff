"""
Configuration Provider Port - Abstract interface for configuration.

Implementations:
- EnvironmentConfigProvider: API key file, env vars and CLI overrides
- FileConfigProvider: Load from YAML/TOML config files
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..domain.enums import ModelName
from .transformation_client import DEFAULT_MAX_TOKENS


# Location of the API key, relative to the user's home directory
KEY_FILE_NAME = ".llm-translate-key"

# Seconds to keep the gate closed after a transformation finishes
DEFAULT_SETTLE_DELAY = 0.1

# Seconds a file must stay quiet before a change is reported
DEFAULT_DEBOUNCE = 0.2

# Seconds before an external transformation call is abandoned
DEFAULT_TIMEOUT = 120.0

# Retries performed by the SDK on transient API failures
DEFAULT_MAX_RETRIES = 2


def default_key_path() -> Path:
    """Default API key location (~/.llm-translate-key)."""
    return Path.home() / KEY_FILE_NAME


@dataclass
class TranslateConfig:
    """Configuration for the transformation client."""

    api_key: str = ""
    model: str = field(default_factory=lambda: ModelName.default().value)
    max_tokens: int = DEFAULT_MAX_TOKENS
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES


@dataclass
class WatchConfig:
    """Configuration for the watch loop."""

    settle_delay: float = DEFAULT_SETTLE_DELAY
    debounce: float = DEFAULT_DEBOUNCE


@dataclass
class AppConfig:
    """Complete application configuration."""

    translate: TranslateConfig
    watch: WatchConfig = field(default_factory=WatchConfig)

    # Paths
    key_path: Path = field(default_factory=default_key_path)
    config_file: Path | None = None

    def validate(self) -> list[str]:
        """
        Validate configuration.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not self.translate.api_key:
            errors.append(f"Missing API key ({self.key_path})")
        if self.translate.model not in ModelName.choices():
            errors.append(
                f"Unknown model: {self.translate.model} "
                f"(choose from: {', '.join(ModelName.choices())})"
            )
        if self.translate.timeout <= 0:
            errors.append("Timeout must be a positive number of seconds")
        if self.watch.settle_delay < 0:
            errors.append("Settle delay cannot be negative")
        if self.watch.debounce < 0:
            errors.append("Debounce cannot be negative")

        return errors


class ConfigProviderPort(ABC):
    """
    Abstract interface for configuration providers.

    Configuration can come from various sources:
    - The API key file in the home directory
    - Environment variables
    - YAML/TOML config files
    - Command line arguments
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the provider name."""
        ...

    @abstractmethod
    def load(self) -> AppConfig:
        """
        Load configuration from source.

        Returns:
            Complete application configuration
        """
        ...

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a specific configuration value.

        Args:
            key: Configuration key (dot notation supported)
            default: Default value if not found

        Returns:
            Configuration value
        """
        ...

    @abstractmethod
    def validate(self) -> list[str]:
        """
        Validate loaded configuration.

        Returns:
            List of validation errors
        """
        ...
