"""
RIFF/WAVE chunk encoding and decoding.
"""

from .chunks import (
    encode_cue_chunk,
    encode_label_chunk,
    encode_riff_chunk_header,
    encode_wave_format,
    encode_wave_header,
)
from .reader import WaveInfo, iter_chunks, read_wave
from .types import WAVE_HEADER_SIZE, CuePoint, RiffChunk, WaveFormatPcm

__all__ = [
    "encode_cue_chunk",
    "encode_label_chunk",
    "encode_riff_chunk_header",
    "encode_wave_format",
    "encode_wave_header",
    "iter_chunks",
    "read_wave",
    "WaveInfo",
    "WAVE_HEADER_SIZE",
    "CuePoint",
    "RiffChunk",
    "WaveFormatPcm",
]
