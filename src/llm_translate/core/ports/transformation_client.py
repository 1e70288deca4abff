"""
Transformation Client Port - Abstract interface for the text-generation service.

Implementations:
- AnthropicTransformationClient: Anthropic Messages API
"""

from abc import ABC, abstractmethod


# Maximum output tokens requested per transformation
DEFAULT_MAX_TOKENS = 4096


class TransformationClientPort(ABC):
    """
    Abstract interface for a request/response text-generation client.

    The caller gets a single complete result, never a stream. Any failure,
    including a response that is not plain text, is raised as a
    TransformationError subclass.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Get the client/provider name."""
        ...

    @abstractmethod
    def submit(self, model: str, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        """
        Submit one prompt and wait for the answer.

        Args:
            model: Opaque model identifier.
            prompt: Full instruction text.
            max_tokens: Upper bound on the response length.

        Returns:
            The response text.

        Raises:
            TransformationError: If the call fails.
            UnexpectedResponseError: If the response is not a single text segment.
            TransformationTimeoutError: If the call times out.
        """
        ...
