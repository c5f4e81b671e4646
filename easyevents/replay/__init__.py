"""
Replay of the stored event log through handlers and processors.
"""

from .controller import ReplayController, ReplayResult

__all__ = [
    "ReplayController",
    "ReplayResult",
]
