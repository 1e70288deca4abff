"""
Tests for the exception hierarchy.
"""

import pytest

from llm_translate.core.exceptions import (
    ConfigError,
    ConfigFileError,
    InvalidModelError,
    MissingCredentialsError,
    SnapshotError,
    SnapshotReadError,
    SnapshotWriteError,
    TransformationError,
    TransformationTimeoutError,
    TranslateError,
    UnexpectedResponseError,
)


class TestHierarchy:
    """Every error is catchable through its family and the root."""

    @pytest.mark.parametrize(
        ("error_cls", "family"),
        [
            (MissingCredentialsError, ConfigError),
            (InvalidModelError, ConfigError),
            (ConfigFileError, ConfigError),
            (SnapshotReadError, SnapshotError),
            (SnapshotWriteError, SnapshotError),
            (UnexpectedResponseError, TransformationError),
            (TransformationTimeoutError, TransformationError),
        ],
    )
    def test_subclass_relationships(self, error_cls, family):
        assert issubclass(error_cls, family)
        assert issubclass(error_cls, TranslateError)


class TestTranslateError:
    """Tests for message and cause formatting."""

    def test_str_without_cause(self):
        error = TranslateError("Something failed")

        assert str(error) == "Something failed"
        assert error.cause is None

    def test_str_with_cause(self):
        cause = OSError("disk full")
        error = SnapshotWriteError("Cannot write out.md", path="out.md", cause=cause)

        assert str(error) == "Cannot write out.md (caused by OSError: disk full)"
        assert error.path == "out.md"
        assert error.message == "Cannot write out.md"

    def test_transformation_error_keeps_model(self):
        error = TransformationTimeoutError("timed out", model="claude-3-5-haiku-20241022")

        assert error.model == "claude-3-5-haiku-20241022"


class TestInvalidModelError:
    def test_message_and_valid_names(self):
        error = InvalidModelError("gpt-4", valid=["a", "b"])

        assert str(error) == "Unknown model: gpt-4"
        assert error.model == "gpt-4"
        assert error.valid == ["a", "b"]

    def test_valid_defaults_to_empty(self):
        assert InvalidModelError("x").valid == []


class TestMissingCredentialsError:
    def test_key_path(self):
        error = MissingCredentialsError("API key file is empty", key_path="/home/u/.key")

        assert error.key_path == "/home/u/.key"
        assert isinstance(error, ConfigError)
