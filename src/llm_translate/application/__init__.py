"""
Application Layer - Use cases and orchestration.

This layer contains:
- gate: The single in-flight transformation gate
- transform: One source -> target transformation step
- propagation: The change-propagation loop and startup auto-sync
- watch: File watching and watch-session statistics
"""

from .gate import ProcessingGate
from .propagation import DEFAULT_POLL_INTERVAL, ChangePropagationLoop
from .transform import TransformationResult, TransformationStep
from .watch import FileChange, FileWatcher, WatchEvent, WatchStats


__all__ = [
    "DEFAULT_POLL_INTERVAL",
    "ChangePropagationLoop",
    "FileChange",
    "FileWatcher",
    "ProcessingGate",
    "TransformationResult",
    "TransformationStep",
    "WatchEvent",
    "WatchStats",
]
