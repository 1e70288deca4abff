"""
Domain enums - Gate states, change outcomes and supported models.
"""

from __future__ import annotations

from enum import Enum, auto

from ..exceptions import InvalidModelError


class GateState(Enum):
    """State of the single in-flight transformation gate."""

    IDLE = auto()
    PROCESSING = auto()


class ChangeOutcome(Enum):
    """What the propagation loop did with one change notification."""

    TRANSLATED = "translated"
    FAILED = "failed"
    UNCHANGED = "unchanged"
    DROPPED_BUSY = "dropped_busy"
    IGNORED = "ignored"


class ModelName(Enum):
    """Model identifiers accepted by --model."""

    CLAUDE_3_5_SONNET = "claude-3-5-sonnet-20241022"
    CLAUDE_3_5_HAIKU = "claude-3-5-haiku-20241022"
    CLAUDE_3_7_SONNET = "claude-3-7-sonnet-20250219"
    CLAUDE_SONNET_4 = "claude-sonnet-4-20250514"
    CLAUDE_OPUS_4 = "claude-opus-4-20250514"

    @classmethod
    def default(cls) -> ModelName:
        """Model used when none is requested."""
        return cls.CLAUDE_3_5_SONNET

    @classmethod
    def choices(cls) -> list[str]:
        """All accepted identifiers, in declaration order."""
        return [m.value for m in cls]

    @classmethod
    def from_string(cls, value: str) -> ModelName:
        """
        Parse a model identifier.

        Raises:
            InvalidModelError: If the identifier is not supported.
        """
        value = value.strip()
        for model in cls:
            if model.value == value:
                return model
        raise InvalidModelError(value, valid=cls.choices())
