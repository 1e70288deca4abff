"""
Core module - Pure domain logic with no external dependencies.

This module contains:
- domain/: Snapshots, the file pair and domain enums
- ports/: Abstract interfaces that adapters must implement
- exceptions: Centralized exception hierarchy
- sanitizer: Code-fence stripping for model output
- prompts: Instruction construction
"""

from .domain import *
from .exceptions import *
from .ports import *
from .prompts import build_translation_prompt
from .sanitizer import strip_code_fence
