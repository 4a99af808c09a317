"""
Dump sessions and their output backends.
"""

from .backends import DumpBackend, FileBackend, MemoryBackend, iter_blocks
from .buffer import GrowableBuffer
from .dump_session import DumpResult, DumpSession, SessionState

__all__ = [
    "DumpBackend",
    "FileBackend",
    "MemoryBackend",
    "iter_blocks",
    "GrowableBuffer",
    "DumpResult",
    "DumpSession",
    "SessionState",
]
