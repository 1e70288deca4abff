"""
Anthropic Client - TransformationClientPort backed by the Anthropic Messages API.

Uses the official ``anthropic`` SDK in non-streaming mode, so each call is
a single request/response. The SDK's timeout and retry settings bound how
long one transformation may block the watch loop.
"""

import logging
import time
from typing import Any

import anthropic

from llm_translate.core.exceptions import (
    TransformationError,
    TransformationTimeoutError,
    UnexpectedResponseError,
)
from llm_translate.core.ports.config_provider import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    TranslateConfig,
)
from llm_translate.core.ports.transformation_client import (
    DEFAULT_MAX_TOKENS,
    TransformationClientPort,
)


class AnthropicTransformationClient(TransformationClientPort):
    """
    Transformation client for Anthropic models.

    Example:
        >>> client = AnthropicTransformationClient(api_key="sk-ant-...")
        >>> text = client.submit("claude-3-5-sonnet-20241022", "Translate ...")
    """

    def __init__(
        self,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        client: Any = None,
    ):
        """
        Initialize the client.

        Args:
            api_key: Anthropic API key.
            timeout: Request timeout in seconds.
            max_retries: SDK retries for transient failures.
            client: Pre-built SDK client (mainly for tests).
        """
        self.timeout = timeout
        self.max_retries = max_retries
        self.logger = logging.getLogger("AnthropicTransformationClient")
        self._client = client or anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
        )

    @classmethod
    def from_config(cls, config: TranslateConfig) -> "AnthropicTransformationClient":
        """Create a client from loaded configuration."""
        return cls(
            api_key=config.api_key,
            timeout=config.timeout,
            max_retries=config.max_retries,
        )

    @property
    def name(self) -> str:
        return "Anthropic"

    def submit(self, model: str, prompt: str, max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        """Send one user message and return the text of the reply."""
        self.logger.debug(f"Submitting {len(prompt)} chars to {model} (max_tokens={max_tokens})")
        start = time.monotonic()

        try:
            message = self._client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APITimeoutError as e:
            raise TransformationTimeoutError(
                f"Request to {model} timed out after {self.timeout:.0f}s",
                model=model,
                cause=e,
            ) from e
        except anthropic.APIError as e:
            raise TransformationError(f"Request to {model} failed", model=model, cause=e) from e

        text = self._extract_text(message, model)
        self.logger.debug(
            f"Received {len(text)} chars from {model} in {time.monotonic() - start:.2f}s"
        )
        return text

    def _extract_text(self, message: Any, model: str) -> str:
        """Return the text of a single-text-segment reply."""
        content = getattr(message, "content", None) or []
        if len(content) != 1:
            raise UnexpectedResponseError(
                f"Unexpected response from API: expected 1 content segment, got {len(content)}",
                model=model,
            )

        block = content[0]
        block_type = getattr(block, "type", None)
        if block_type != "text":
            raise UnexpectedResponseError(
                f"Unexpected response type from API: {block_type}",
                model=model,
            )
        return block.text
