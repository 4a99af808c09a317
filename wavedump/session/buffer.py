"""
GrowableBuffer: owned byte store backing the non-seekable dump backend.
"""

import math

from wavedump.exceptions import AllocationError, SessionStateError
from wavedump.utils.logger import get_logger

logger = get_logger(__name__)


class GrowableBuffer:
    """
    Byte buffer with an explicit capacity that grows geometrically.

    Capacity is allocated up front; a write that would not fit first grows
    the capacity by ``growth_factor`` (repeatedly, until it fits), then copies.
    """

    def __init__(self, capacity: int, growth_factor: float = 1.5):
        if capacity <= 0:
            raise AllocationError(f"Buffer capacity must be positive, got {capacity}")
        self.growth_factor = growth_factor
        self._length = 0
        try:
            self._data = bytearray(capacity)
        except MemoryError:
            logger.error(f"Could not allocate output buffer of {capacity} bytes")
            raise AllocationError(f"Could not allocate output buffer of {capacity} bytes")

    def __len__(self) -> int:
        return self._length

    @property
    def capacity(self) -> int:
        return 0 if self._data is None else len(self._data)

    @property
    def released(self) -> bool:
        return self._data is None

    def _require_data(self) -> bytearray:
        if self._data is None:
            raise SessionStateError("Buffer has been released")
        return self._data

    def _grow(self, required: int) -> None:
        data = self._require_data()
        capacity = len(data)
        while capacity < required:
            capacity = max(capacity + 1, math.floor(capacity * self.growth_factor))
        try:
            data.extend(bytes(capacity - len(data)))
        except MemoryError:
            logger.error(f"Could not grow output buffer to {capacity} bytes")
            raise AllocationError(f"Could not grow output buffer to {capacity} bytes")
        logger.debug(f"Output buffer grown to {capacity} bytes")

    def write(self, chunk: bytes) -> None:
        data = self._require_data()
        end = self._length + len(chunk)
        if end > len(data):
            self._grow(end)
        data[self._length:end] = chunk
        self._length = end

    def overwrite(self, offset: int, chunk: bytes) -> None:
        """Replace bytes in place; the region must already be written."""
        data = self._require_data()
        if offset < 0 or offset + len(chunk) > self._length:
            raise ValueError(
                f"Overwrite of {len(chunk)} bytes at {offset} exceeds buffer length {self._length}"
            )
        data[offset:offset + len(chunk)] = chunk

    def view(self) -> memoryview:
        """Read-only view of the written region."""
        return memoryview(self._require_data())[:self._length].toreadonly()

    def release(self) -> None:
        self._data = None
        self._length = 0
