"""
RIFF/WAVE record types and their fixed on-wire layouts.

All layouts are little-endian with no implicit padding, so each ``struct``
format starts with ``<``.
"""

import struct
from dataclasses import dataclass

WAVE_FORMAT_PCM = 1

CHUNK_HEADER = struct.Struct("<4sI")
WAVE_FORMAT = struct.Struct("<HHIIHH")
CUE_POINT = struct.Struct("<II4sIII")
U32 = struct.Struct("<I")

CHUNK_HEADER_SIZE = CHUNK_HEADER.size  # 8
WAVE_FORMAT_SIZE = WAVE_FORMAT.size  # 16
CUE_POINT_SIZE = CUE_POINT.size  # 24

# RIFF header + "WAVE" + fmt chunk + data chunk header
WAVE_HEADER_SIZE = CHUNK_HEADER_SIZE + 4 + CHUNK_HEADER_SIZE + WAVE_FORMAT_SIZE + CHUNK_HEADER_SIZE

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

TAG_RIFF = b"RIFF"
TAG_WAVE = b"WAVE"
TAG_FMT = b"fmt "
TAG_DATA = b"data"
TAG_CUE = b"cue "
TAG_LIST = b"LIST"
TAG_ADTL = b"adtl"
TAG_LABL = b"labl"


@dataclass(frozen=True)
class WaveFormatPcm:
    """The 16-byte PCM ``fmt `` payload."""
    channels: int
    sample_rate: int
    bits_per_sample: int
    format_tag: int = WAVE_FORMAT_PCM

    @property
    def block_align(self) -> int:
        return (self.channels * self.bits_per_sample) // 8

    @property
    def avg_bytes_per_sec(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class CuePoint:
    point_id: int
    position: int
    chunk_tag: bytes
    chunk_start: int
    block_start: int
    sample_offset: int


@dataclass(frozen=True)
class RiffChunk:
    """A chunk located inside a RIFF container."""
    tag: bytes
    offset: int
    size: int
    payload: bytes
