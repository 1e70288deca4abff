"""
LLM adapters - Transformation clients for text-generation services.
"""

from .anthropic_client import AnthropicTransformationClient


__all__ = ["AnthropicTransformationClient"]
