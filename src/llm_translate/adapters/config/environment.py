"""
Environment Configuration Provider - API key file, env vars and CLI overrides.

Precedence (highest first):
1. CLI arguments (``cli_overrides``)
2. Environment variables (``LLM_TRANSLATE_*``)
3. Config file (see FileConfigProvider)
4. Built-in defaults

The API key always comes from the key file (``~/.llm-translate-key`` or
the path in ``LLM_TRANSLATE_KEY_FILE``).
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from llm_translate.core.exceptions import ConfigFileError, MissingCredentialsError
from llm_translate.core.ports.config_provider import (
    KEY_FILE_NAME,
    AppConfig,
    ConfigProviderPort,
    default_key_path,
)

from .file_config import FileConfigProvider


ENV_PREFIX = "LLM_TRANSLATE_"
ENV_KEY_FILE = f"{ENV_PREFIX}KEY_FILE"
ENV_MODEL = f"{ENV_PREFIX}MODEL"
ENV_TIMEOUT = f"{ENV_PREFIX}TIMEOUT"
ENV_SETTLE_DELAY = f"{ENV_PREFIX}SETTLE_DELAY"
ENV_DEBOUNCE = f"{ENV_PREFIX}DEBOUNCE"

KEY_FILE_HINT = f"Please create ~/{KEY_FILE_NAME} with your Anthropic API key"


def read_api_key(key_path: Path) -> str:
    """
    Read the API key from ``key_path``.

    The file holds a single line; surrounding whitespace is ignored.

    Raises:
        MissingCredentialsError: If the file is missing, unreadable or empty.
    """
    try:
        key = key_path.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise MissingCredentialsError(
            f"Error reading API key from {key_path}", key_path=str(key_path), cause=e
        ) from e

    if not key:
        raise MissingCredentialsError(f"API key file {key_path} is empty", key_path=str(key_path))
    return key


class EnvironmentConfigProvider(ConfigProviderPort):
    """
    Configuration provider combining the key file, env vars and CLI flags.

    Example:
        >>> provider = EnvironmentConfigProvider(cli_overrides={"model": None})
        >>> errors = provider.validate()
        >>> config = provider.load()
    """

    def __init__(
        self,
        config_file: Path | None = None,
        cli_overrides: Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
        key_path: Path | None = None,
    ):
        """
        Initialize the provider.

        Args:
            config_file: Explicit config file; searched for when None.
            cli_overrides: Parsed CLI arguments (``vars(args)``). None values are ignored.
            env: Environment mapping (defaults to ``os.environ``).
            key_path: API key file; defaults to $LLM_TRANSLATE_KEY_FILE or ~/.llm-translate-key.
        """
        self.logger = logging.getLogger("EnvironmentConfigProvider")
        self._env = env if env is not None else os.environ
        self._cli = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
        self._file_provider = FileConfigProvider(config_path=config_file)

        if key_path is None:
            env_key = self._env.get(ENV_KEY_FILE)
            key_path = Path(env_key).expanduser() if env_key else default_key_path()
        self.key_path = Path(key_path)

    @property
    def name(self) -> str:
        return "environment"

    @property
    def config_file_path(self) -> Path | None:
        return self._file_provider.config_file_path

    def _env_values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if self._env.get(ENV_MODEL):
            values["model"] = self._env[ENV_MODEL].strip()
        for name, var in (
            ("timeout", ENV_TIMEOUT),
            ("settle_delay", ENV_SETTLE_DELAY),
            ("debounce", ENV_DEBOUNCE),
        ):
            raw = self._env.get(var)
            if not raw:
                continue
            try:
                values[name] = float(raw)
            except ValueError as e:
                raise ConfigFileError(f"Invalid value for {var}: {raw!r}", cause=e) from e
        return values

    def _merged_values(self) -> dict[str, Any]:
        """File values, then env, then CLI, later sources winning."""
        values = self._file_provider.values()
        values.update(self._env_values())
        for key in ("model", "timeout", "settle_delay", "debounce"):
            if key in self._cli:
                values[key] = self._cli[key]
        return values

    def get(self, key: str, default: Any = None) -> Any:
        if key == "key_path":
            return self.key_path
        return self._merged_values().get(key, default)

    def load(self) -> AppConfig:
        """
        Load the complete configuration, including the API key.

        Raises:
            MissingCredentialsError: If the key file cannot be read.
            ConfigFileError: If the config file or an env var is invalid.
        """
        config = self._file_provider.load()
        values = self._merged_values()

        if "model" in values:
            config.translate.model = values["model"]
        if "timeout" in values:
            config.translate.timeout = float(values["timeout"])
        if "settle_delay" in values:
            config.watch.settle_delay = float(values["settle_delay"])
        if "debounce" in values:
            config.watch.debounce = float(values["debounce"])

        config.key_path = self.key_path
        config.translate.api_key = read_api_key(self.key_path)

        self.logger.debug(
            f"Loaded config: model={config.translate.model}, "
            f"timeout={config.translate.timeout}s, "
            f"config_file={config.config_file}"
        )
        return config

    def validate(self) -> list[str]:
        """
        Validate all configuration sources.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = self._file_provider.validate()
        if errors:
            return errors

        try:
            config = self.load()
        except MissingCredentialsError as e:
            return [f"{e.message}. {KEY_FILE_HINT}"]
        except ConfigFileError as e:
            return [str(e)]

        return config.validate()
