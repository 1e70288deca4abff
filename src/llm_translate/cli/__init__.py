"""
CLI module - Command line interface for llm-translate.
"""

from .app import main, run
from .exit_codes import ExitCode


__all__ = ["ExitCode", "main", "run"]
