"""
Exceptions - Centralized exception hierarchy for llm-translate.

Hierarchy:

    TranslateError
    ├── ConfigError
    │   ├── MissingCredentialsError
    │   ├── InvalidModelError
    │   └── ConfigFileError
    ├── SnapshotError
    │   ├── SnapshotReadError
    │   └── SnapshotWriteError
    └── TransformationError
        ├── UnexpectedResponseError
        └── TransformationTimeoutError

ConfigError subclasses are startup-fatal. SnapshotWriteError and the
TransformationError family are recoverable per transformation: the watch
loop reports them and keeps running.
"""

from __future__ import annotations


__all__ = [
    "ConfigError",
    "ConfigFileError",
    "InvalidModelError",
    "MissingCredentialsError",
    "SnapshotError",
    "SnapshotReadError",
    "SnapshotWriteError",
    "TransformationError",
    "TransformationTimeoutError",
    "TranslateError",
    "UnexpectedResponseError",
]


class TranslateError(Exception):
    """
    Base exception for all llm-translate errors.

    Attributes:
        message: Human-readable error message.
        cause: Underlying exception, if any.
    """

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} (caused by {type(self.cause).__name__}: {self.cause})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigError(TranslateError):
    """Invalid or missing configuration. Fatal at startup."""


class MissingCredentialsError(ConfigError):
    """The API key file is absent, unreadable or empty."""

    def __init__(
        self,
        message: str,
        key_path: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.key_path = key_path


class InvalidModelError(ConfigError):
    """An unknown model identifier was requested."""

    def __init__(self, model: str, valid: list[str] | None = None):
        super().__init__(f"Unknown model: {model}")
        self.model = model
        self.valid = valid or []


class ConfigFileError(ConfigError):
    """A configuration file could not be read or parsed."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.file_path = file_path


# =============================================================================
# Snapshot (filesystem) Errors
# =============================================================================


class SnapshotError(TranslateError):
    """A watched file could not be read or written."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.path = path


class SnapshotReadError(SnapshotError):
    """Reading a watched file failed."""


class SnapshotWriteError(SnapshotError):
    """Overwriting a target file failed."""


# =============================================================================
# Transformation Errors
# =============================================================================


class TransformationError(TranslateError):
    """The external text-transformation call failed."""

    def __init__(
        self,
        message: str,
        model: str | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause=cause)
        self.model = model


class UnexpectedResponseError(TransformationError):
    """The model answered with something other than a single text segment."""


class TransformationTimeoutError(TransformationError):
    """The external call did not complete within the configured timeout."""
