"""
Transformation Step - One source -> target translation.

Shared by the startup auto-sync and by change handling:
1. Build the instruction from both snapshots
2. Submit it to the transformation client
3. Strip a wrapping code fence from the answer
4. Overwrite the target file
5. Record the new content in the target snapshot

A failure at any stage leaves the target file and its snapshot exactly as
they were; the step reports it in the returned result instead of raising.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime

from llm_translate.core.domain.entities import FileSnapshot
from llm_translate.core.exceptions import TranslateError
from llm_translate.core.ports.transformation_client import (
    DEFAULT_MAX_TOKENS,
    TransformationClientPort,
)
from llm_translate.core.prompts import build_translation_prompt
from llm_translate.core.sanitizer import strip_code_fence


logger = logging.getLogger("TransformationStep")


@dataclass
class TransformationResult:
    """Outcome of one transformation step."""

    source_name: str
    target_name: str
    success: bool = False
    content: str | None = None
    error: str | None = None
    started_at: datetime = field(default_factory=datetime.now)
    duration: float = 0.0

    def __str__(self) -> str:
        status = "ok" if self.success else f"failed: {self.error}"
        return f"{self.source_name} -> {self.target_name} ({status})"


class TransformationStep:
    """
    Translate one snapshot into the other and write the result.

    Example:
        >>> step = TransformationStep(client, model="claude-3-5-sonnet-20241022")
        >>> result = step.run(source=polish, target=english)
        >>> result.success
        True
    """

    def __init__(
        self,
        client: TransformationClientPort,
        model: str,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ):
        """
        Initialize the step.

        Args:
            client: Transformation client used for the external call.
            model: Model identifier passed through to the client.
            max_tokens: Response length bound for every call.
        """
        self.client = client
        self.model = model
        self.max_tokens = max_tokens

    def run(self, source: FileSnapshot, target: FileSnapshot) -> TransformationResult:
        """
        Run the full step for ``source`` -> ``target``.

        Returns:
            TransformationResult with ``success`` and either ``content`` or ``error``.
        """
        result = TransformationResult(source_name=source.name, target_name=target.name)
        start = time.monotonic()

        try:
            prompt = build_translation_prompt(source, target)
            logger.debug(
                f"Translating {source.name} ({len(source.content)} chars) -> {target.name} "
                f"({'empty' if not target.has_content else f'{len(target.content)} chars'})"
            )
            response = self.client.submit(self.model, prompt, max_tokens=self.max_tokens)
            translated = strip_code_fence(response)
            target.write_disk(translated)
        except TranslateError as e:
            result.error = str(e)
            result.duration = time.monotonic() - start
            logger.error(f"Translation error ({source.name} -> {target.name}): {e}")
            return result

        target.update(translated)

        result.success = True
        result.content = translated
        result.duration = time.monotonic() - start
        logger.info(f"Updated {target.name} in {result.duration:.2f}s")
        return result
