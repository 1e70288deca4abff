"""
llm-translate - Keep two files in sync through an LLM translator.

Watches a pair of files; whenever one changes, its content is rewritten by
the model to match the other file's style, language or format, and the
result overwrites the other file.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
