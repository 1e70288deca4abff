"""
File Configuration Provider - Load settings from YAML or TOML files.

Looked up in order (first match wins) when no explicit path is given:
- .llm-translate.yaml / .llm-translate.yml / .llm-translate.toml
- pyproject.toml with a [tool.llm-translate] table

Each location is searched in the current directory, then the home directory.

Example (.llm-translate.yaml):

    model: claude-3-5-haiku-20241022
    timeout: 60
    watch:
      settle_delay: 0.1
      debounce: 0.2
"""

import logging
from pathlib import Path
from typing import Any

import yaml


try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for older Python

from llm_translate.core.exceptions import ConfigFileError
from llm_translate.core.ports.config_provider import (
    AppConfig,
    ConfigProviderPort,
    TranslateConfig,
    WatchConfig,
)


CONFIG_FILE_NAMES = (
    ".llm-translate.yaml",
    ".llm-translate.yml",
    ".llm-translate.toml",
)
PYPROJECT_SECTION = "llm-translate"

# Flat keys accepted at top level, and their nested aliases
NUMERIC_KEYS = {
    "timeout": ("timeout",),
    "settle_delay": ("settle_delay", "watch.settle_delay"),
    "debounce": ("debounce", "watch.debounce"),
}


class FileConfigProvider(ConfigProviderPort):
    """Configuration provider that reads a YAML or TOML file."""

    def __init__(
        self,
        config_path: Path | None = None,
        search_paths: list[Path] | None = None,
    ):
        """
        Initialize the provider.

        Args:
            config_path: Explicit file to load. Must exist if given.
            search_paths: Directories searched when no path is given.
        """
        self.logger = logging.getLogger("FileConfigProvider")
        self._explicit = config_path is not None
        self._search_paths = search_paths or [Path.cwd(), Path.home()]
        self._path = Path(config_path) if config_path else self._find_config_file()
        self._data: dict[str, Any] | None = None

    @property
    def name(self) -> str:
        return "file"

    @property
    def config_file_path(self) -> Path | None:
        """The file being used, or None when no config file was found."""
        return self._path

    def _find_config_file(self) -> Path | None:
        for directory in self._search_paths:
            for file_name in CONFIG_FILE_NAMES:
                candidate = directory / file_name
                if candidate.is_file():
                    return candidate
            pyproject = directory / "pyproject.toml"
            if pyproject.is_file() and self._has_pyproject_section(pyproject):
                return pyproject
        return None

    @staticmethod
    def _has_pyproject_section(path: Path) -> bool:
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            return False
        return PYPROJECT_SECTION in data.get("tool", {})

    def _load_data(self) -> dict[str, Any]:
        """Parse the config file once and cache the result."""
        if self._data is not None:
            return self._data

        if self._path is None:
            self._data = {}
            return self._data

        path = self._path
        if not path.is_file():
            raise ConfigFileError(f"Config file not found: {path}", file_path=str(path))

        try:
            if path.suffix in (".yaml", ".yml"):
                with open(path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
            else:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
                if path.name == "pyproject.toml":
                    data = data.get("tool", {}).get(PYPROJECT_SECTION, {})
        except yaml.YAMLError as e:
            raise ConfigFileError(
                f"Invalid YAML syntax in {path}", file_path=str(path), cause=e
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigFileError(
                f"Invalid TOML syntax in {path}", file_path=str(path), cause=e
            ) from e
        except OSError as e:
            raise ConfigFileError(f"Cannot read {path}", file_path=str(path), cause=e) from e

        if not isinstance(data, dict):
            raise ConfigFileError(
                f"Config file {path} must contain a mapping", file_path=str(path)
            )

        self.logger.debug(f"Loaded config from {path}")
        self._data = data
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key (e.g. ``watch.debounce``)."""
        node: Any = self._load_data()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def values(self) -> dict[str, Any]:
        """
        Recognized settings present in the file.

        Returns:
            Dict with any of ``model``, ``timeout``, ``settle_delay``, ``debounce``.

        Raises:
            ConfigFileError: If the file is unreadable or a value has the wrong type.
        """
        result: dict[str, Any] = {}

        model = self.get("model")
        if model is not None:
            result["model"] = str(model)

        for name, keys in NUMERIC_KEYS.items():
            for key in keys:
                value = self.get(key)
                if value is None:
                    continue
                try:
                    result[name] = float(value)
                except (TypeError, ValueError) as e:
                    raise ConfigFileError(
                        f"Invalid value for '{key}' in {self._path}: {value!r}",
                        file_path=str(self._path),
                        cause=e,
                    ) from e
                break

        return result

    def load(self) -> AppConfig:
        """Build an AppConfig from the file alone (no API key)."""
        values = self.values()
        translate = TranslateConfig()
        watch = WatchConfig()

        if "model" in values:
            translate.model = values["model"]
        if "timeout" in values:
            translate.timeout = values["timeout"]
        if "settle_delay" in values:
            watch.settle_delay = values["settle_delay"]
        if "debounce" in values:
            watch.debounce = values["debounce"]

        return AppConfig(translate=translate, watch=watch, config_file=self._path)

    def validate(self) -> list[str]:
        """Check that the file can be read and its values parsed."""
        if self._explicit and self._path is not None and not self._path.is_file():
            return [f"Config file not found: {self._path}"]
        try:
            self.values()
        except ConfigFileError as e:
            return [str(e)]
        return []
