"""
Custom exception classes for wave dumping.
"""


class WaveDumpError(Exception):
    """Base exception for all wave dumping errors."""
    pass


class AllocationError(WaveDumpError):
    """Raised when the output buffer cannot be created or grown."""
    pass


class OpenError(WaveDumpError):
    """Raised when the dump destination cannot be created."""
    pass


class WriteError(WaveDumpError):
    """Raised on a short write or an I/O error while writing output."""
    pass


class SessionStateError(WaveDumpError):
    """Raised when a session operation is called in the wrong state."""
    pass


class EncodingError(WaveDumpError):
    """Raised when a value does not fit its on-wire field."""
    pass


class FormatError(WaveDumpError):
    """Raised for invalid PCM format parameters or a malformed container."""
    pass


__all__ = [
    'WaveDumpError',
    'AllocationError',
    'OpenError',
    'WriteError',
    'SessionStateError',
    'EncodingError',
    'FormatError',
]
