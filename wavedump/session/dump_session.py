"""
DumpSession: stream PCM samples into a RIFF/WAVE container.
"""

import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

import numpy as np
from pydub import AudioSegment

from wavedump.config import DumpConfig
from wavedump.exceptions import FormatError, SessionStateError, WaveDumpError
from wavedump.riff.chunks import encode_cue_chunk, encode_label_chunk, encode_wave_header
from wavedump.riff.types import U32_MAX, WAVE_HEADER_SIZE
from wavedump.session.backends import DumpBackend, FileBackend, MemoryBackend
from wavedump.utils.logger import get_logger, log_performance
from wavedump.utils.paths import derive_path

logger = get_logger(__name__)


class SessionState(Enum):
    UNOPENED = "unopened"
    OPEN = "open"
    FINISHED = "finished"
    ABORTED = "aborted"


@dataclass
class DumpResult:
    """Summary of a finished dump."""
    path: Optional[Path]
    data_size: int
    file_size: int
    loop_sample: int
    sample_rate: int
    bits_per_sample: int
    channels: int


def validate_pcm_format(sample_rate: int, bits_per_sample: int, channels: int) -> None:
    if sample_rate <= 0:
        raise FormatError(f"sample_rate must be positive, got {sample_rate}")
    if bits_per_sample <= 0 or bits_per_sample % 8:
        raise FormatError(f"bits_per_sample must be a positive multiple of 8, got {bits_per_sample}")
    if channels < 1:
        raise FormatError(f"channels must be at least 1, got {channels}")


class DumpSession:
    """
    Incremental WAV writer.

    Lifecycle: ``open -> append* -> set_loop? -> finish``. The header is written
    as a zero placeholder on open and filled in by ``finish`` once the sizes
    are known. A destination equal to ``config.stdout_token`` is buffered in
    memory and flushed to the output stream at finish; anything else is a
    file path.

    A session is not safe to share across threads without external locking.
    """

    def __init__(self, config: Optional[DumpConfig] = None):
        self.config = config or DumpConfig()
        self.state = SessionState.UNOPENED
        self.path: Optional[Path] = None
        self.data_size = 0
        self.loop_sample = 0
        self._backend: Optional[DumpBackend] = None

    @classmethod
    def create(
        cls,
        destination: Union[str, Path],
        config: Optional[DumpConfig] = None,
        stream: Optional[BinaryIO] = None,
    ) -> 'DumpSession':
        """Construct and open a session in one step."""
        session = cls(config)
        session.open(destination, stream=stream)
        return session

    @property
    def is_buffered(self) -> bool:
        return isinstance(self._backend, MemoryBackend)

    def _require_open(self, operation: str) -> DumpBackend:
        if self.state is not SessionState.OPEN or self._backend is None:
            raise SessionStateError(f"Cannot {operation}: session is {self.state.value}")
        return self._backend

    def open(self, destination: Union[str, Path], stream: Optional[BinaryIO] = None) -> None:
        """
        Open the destination and write the header placeholder.

        Args:
            destination: stdout token for buffered stream output, else a file path
            stream: Binary stream used instead of stdout by the buffered backend

        Raises:
            OpenError: if the file cannot be created
            AllocationError: if the output buffer cannot be allocated
        """
        if self.state is not SessionState.UNOPENED:
            raise SessionStateError(f"Cannot open: session is {self.state.value}")

        if str(destination) == self.config.stdout_token:
            backend: DumpBackend = MemoryBackend(
                stream if stream is not None else sys.stdout.buffer,
                initial_size=self.config.initial_buffer_size,
                growth_factor=self.config.growth_factor,
                block_size=self.config.flush_block_size,
            )
            logger.info("Dumping to output stream (buffered)")
        else:
            self.path = derive_path(destination, self.config.extension)
            backend = FileBackend(self.path)
            logger.info(f"Dumping to {self.path}")

        try:
            backend.write(bytes(WAVE_HEADER_SIZE))
        except WaveDumpError:
            backend.discard()
            raise

        self._backend = backend
        self.data_size = 0
        self.loop_sample = 0
        self.state = SessionState.OPEN

    def set_loop(self, sample_offset: int) -> None:
        """Mark the loop sample. A later call replaces it; 0 clears it."""
        self._require_open("set loop")
        if sample_offset < 0 or sample_offset > U32_MAX:
            raise FormatError(f"Loop sample out of range: {sample_offset}")
        self.loop_sample = sample_offset
        logger.debug(f"Loop point set at sample {sample_offset}")

    def append(self, data: bytes) -> None:
        """
        Write sample bytes verbatim.

        The bytes must already be in the target format. They are not
        byte-swapped: on big-endian hosts callers must supply little-endian
        samples themselves, or use ``append_samples``.
        """
        backend = self._require_open("append")
        if not data:
            return
        if self.data_size + len(data) > U32_MAX:
            raise FormatError(f"Data size would exceed {U32_MAX} bytes")
        backend.write(data)
        self.data_size += len(data)

    def append_samples(self, samples: np.ndarray) -> None:
        """Append an integer sample array, converted to little-endian."""
        samples = np.asarray(samples)
        if samples.dtype.kind not in ("i", "u"):
            raise FormatError(f"Samples must be integer PCM, got dtype {samples.dtype}")
        little = samples.astype(samples.dtype.newbyteorder("<"), copy=False)
        self.append(np.ascontiguousarray(little).tobytes())

    def append_segment(self, segment: AudioSegment) -> None:
        """Append the raw PCM frames of a pydub AudioSegment."""
        self.append(segment.raw_data)

    @log_performance
    def finish(self, sample_rate: int, bits_per_sample: int, channels: int) -> DumpResult:
        """
        Write trailing chunks, fill in the header and flush.

        The backend is released whether or not this succeeds; the session
        cannot be used afterwards.

        Raises:
            FormatError: for invalid format parameters (session stays open)
            WriteError: if the output cannot be written
        """
        backend = self._require_open("finish")
        validate_pcm_format(sample_rate, bits_per_sample, channels)

        completed = False
        try:
            # RIFF chunks are word aligned; the pad byte is not part of the data size.
            if self.data_size & 1:
                backend.write(b"\x00")

            if self.loop_sample:
                backend.write(encode_cue_chunk(self.loop_sample))
                backend.write(encode_label_chunk(0, self.config.loop_label))

            file_size = backend.size()
            header = encode_wave_header(
                self.data_size, file_size, sample_rate, bits_per_sample, channels
            )
            backend.write_header(header)
            backend.flush()
            completed = True
        finally:
            self.state = SessionState.FINISHED
            self._release(discard=not completed and self.path is not None)

        logger.info(
            f"Finished dump: {self.data_size} data bytes, {file_size} bytes total"
            + (f", loop at sample {self.loop_sample}" if self.loop_sample else "")
        )
        return DumpResult(
            path=self.path,
            data_size=self.data_size,
            file_size=file_size,
            loop_sample=self.loop_sample,
            sample_rate=sample_rate,
            bits_per_sample=bits_per_sample,
            channels=channels,
        )

    def abort(self) -> None:
        """Release an open session without writing a header. Partial files are removed."""
        backend = self._require_open("abort")
        self._backend = None
        self.state = SessionState.ABORTED
        backend.discard()
        logger.warning("Dump aborted")

    def _release(self, discard: bool) -> None:
        backend, self._backend = self._backend, None
        if backend is None:
            return
        if discard:
            backend.discard()
        else:
            backend.close()

    def __enter__(self) -> 'DumpSession':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.state is SessionState.OPEN:
            self.abort()
