"""
wavedump: incremental RIFF/WAVE writer for streamed PCM audio.
"""

from .config import DumpConfig
from .exceptions import (
    AllocationError,
    EncodingError,
    FormatError,
    OpenError,
    SessionStateError,
    WaveDumpError,
    WriteError,
)
from .session import DumpResult, DumpSession

__all__ = [
    "DumpConfig",
    "DumpResult",
    "DumpSession",
    "AllocationError",
    "EncodingError",
    "FormatError",
    "OpenError",
    "SessionStateError",
    "WaveDumpError",
    "WriteError",
]
