"""
Dump backends: where session bytes go.

FileBackend writes straight to a seekable file and patches the header by
seeking back. MemoryBackend keeps the whole container in a GrowableBuffer
and only touches the (non-seekable) stream when flushed.
"""

from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Protocol

from wavedump.exceptions import OpenError, WriteError
from wavedump.session.buffer import GrowableBuffer
from wavedump.utils.logger import get_logger

logger = get_logger(__name__)


class DumpBackend(Protocol):
    """Backend protocol used by DumpSession."""

    def write(self, data: bytes) -> None:
        """Append bytes at the current end of output."""
        raise NotImplementedError

    def size(self) -> int:
        """Bytes written so far, including the header placeholder."""
        raise NotImplementedError

    def write_header(self, header: bytes) -> None:
        """Overwrite the placeholder at offset 0."""
        raise NotImplementedError

    def flush(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def discard(self) -> None:
        """Release without producing output."""
        raise NotImplementedError


class FileBackend:
    """Seekable file output."""

    def __init__(self, path: Path):
        self.path = path
        try:
            self._file: Optional[BinaryIO] = open(path, "wb")
        except OSError as e:
            logger.error(f"Could not open dump file {path}: {e}")
            raise OpenError(f"Could not open dump file {path}: {e}")
        logger.debug(f"Opened dump file {path}")

    def _handle(self) -> BinaryIO:
        if self._file is None:
            raise WriteError(f"Dump file {self.path} is closed")
        return self._file

    def write(self, data: bytes) -> None:
        try:
            self._handle().write(data)
        except (OSError, ValueError) as e:
            logger.error(f"Failed writing {self.path}: {e}")
            raise WriteError(f"Failed writing {self.path}: {e}")

    def size(self) -> int:
        try:
            return self._handle().tell()
        except (OSError, ValueError) as e:
            logger.error(f"Failed reading position of {self.path}: {e}")
            raise WriteError(f"Failed reading position of {self.path}: {e}")

    def write_header(self, header: bytes) -> None:
        f = self._handle()
        try:
            end = f.tell()
            f.seek(0)
            f.write(header)
            f.seek(end)
        except (OSError, ValueError) as e:
            logger.error(f"Failed writing header of {self.path}: {e}")
            raise WriteError(f"Failed writing header of {self.path}: {e}")

    def flush(self) -> None:
        try:
            self._handle().flush()
        except (OSError, ValueError) as e:
            logger.error(f"Failed flushing {self.path}: {e}")
            raise WriteError(f"Failed flushing {self.path}: {e}")

    def close(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            except (OSError, ValueError) as e:
                logger.error(f"Failed closing {self.path}: {e}")
                raise WriteError(f"Failed closing {self.path}: {e}")
            finally:
                self._file = None

    def discard(self) -> None:
        if self._file is not None:
            try:
                self._file.close()
            finally:
                self._file = None
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning(f"Could not remove partial dump file {self.path}: {e}")
            return
        logger.info(f"Removed partial dump file {self.path}")


def iter_blocks(view: memoryview, block_size: int) -> Iterator[memoryview]:
    """
    Split ``view`` into ``len // block_size`` full blocks and one trailing
    partial block of ``len % block_size`` bytes (omitted when empty).
    """
    full_blocks, remainder = divmod(len(view), block_size)
    end = full_blocks * block_size
    for start in range(0, end, block_size):
        yield view[start:start + block_size]
    if remainder:
        yield view[end:end + remainder]


class MemoryBackend:
    """Buffered output for non-seekable streams such as stdout."""

    def __init__(
        self,
        stream: BinaryIO,
        initial_size: int,
        growth_factor: float,
        block_size: int,
    ):
        self.stream = stream
        self.block_size = block_size
        self._buffer = GrowableBuffer(initial_size, growth_factor)
        logger.debug(f"Allocated {initial_size} byte output buffer")

    @property
    def buffer(self) -> GrowableBuffer:
        return self._buffer

    def write(self, data: bytes) -> None:
        self._buffer.write(data)

    def size(self) -> int:
        return len(self._buffer)

    def write_header(self, header: bytes) -> None:
        self._buffer.overwrite(0, header)

    def flush(self) -> None:
        """
        Transfer the buffer to the stream block by block.

        Raises:
            WriteError: on an OS error or a short write; later blocks are not written
        """
        written = 0
        for block in iter_blocks(self._buffer.view(), self.block_size):
            try:
                count = self.stream.write(block)
            except (OSError, ValueError) as e:
                logger.error(f"Failed writing output after {written} bytes: {e}")
                raise WriteError(f"Failed writing output after {written} bytes: {e}")
            if count is not None and count != len(block):
                logger.error(f"Short write: {count} of {len(block)} bytes after {written} bytes")
                raise WriteError(f"Short write: {count} of {len(block)} bytes after {written} bytes")
            written += len(block)
        try:
            self.stream.flush()
        except (OSError, ValueError) as e:
            logger.error(f"Failed flushing output: {e}")
            raise WriteError(f"Failed flushing output: {e}")
        logger.debug(f"Flushed {written} bytes to output stream")

    def close(self) -> None:
        self._buffer.release()

    def discard(self) -> None:
        self._buffer.release()
