"""
Domain layer - Snapshots, the file pair, and domain enums.
"""

from .entities import ENCODING, FilePair, FileSnapshot
from .enums import ChangeOutcome, GateState, ModelName


__all__ = [
    "ENCODING",
    "ChangeOutcome",
    "FilePair",
    "FileSnapshot",
    "GateState",
    "ModelName",
]
