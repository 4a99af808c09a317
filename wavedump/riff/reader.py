"""
Read back RIFF/WAVE containers: chunk walking and payload decoding.
"""

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from wavedump.exceptions import FormatError
from wavedump.riff.types import (
    CHUNK_HEADER,
    CHUNK_HEADER_SIZE,
    CUE_POINT,
    TAG_ADTL,
    TAG_CUE,
    TAG_DATA,
    TAG_FMT,
    TAG_LABL,
    TAG_LIST,
    TAG_RIFF,
    TAG_WAVE,
    U32,
    WAVE_FORMAT,
    CuePoint,
    RiffChunk,
    WaveFormatPcm,
)


@dataclass
class WaveInfo:
    riff_size: int
    file_size: int
    fmt: WaveFormatPcm
    data_size: int
    data_offset: int
    cue_points: List[CuePoint]
    labels: List[Tuple[int, str]]
    chunk_tags: List[bytes]


def iter_chunks(data: bytes, start: int = 12, end: Optional[int] = None) -> Iterator[RiffChunk]:
    """Yield each chunk between ``start`` and ``end``, skipping pad bytes after odd sizes."""
    end = len(data) if end is None else end
    pos = start
    while pos + CHUNK_HEADER_SIZE <= end:
        tag, size = CHUNK_HEADER.unpack_from(data, pos)
        payload_start = pos + CHUNK_HEADER_SIZE
        if payload_start + size > end:
            raise FormatError(f"Chunk {tag!r} at {pos} overruns container ({size} bytes)")
        yield RiffChunk(tag=tag, offset=pos, size=size, payload=bytes(data[payload_start:payload_start + size]))
        pos = payload_start + size
        if size % 2 == 1:
            pos += 1


def decode_wave_format(payload: bytes) -> WaveFormatPcm:
    if len(payload) < WAVE_FORMAT.size:
        raise FormatError(f"fmt payload too short: {len(payload)} bytes")
    format_tag, channels, sample_rate, avg_bytes, block_align, bits = WAVE_FORMAT.unpack_from(payload)
    fmt = WaveFormatPcm(
        channels=channels,
        sample_rate=sample_rate,
        bits_per_sample=bits,
        format_tag=format_tag,
    )
    if fmt.block_align != block_align or fmt.avg_bytes_per_sec != avg_bytes:
        raise FormatError(
            f"Inconsistent fmt chunk: block_align={block_align}, avg_bytes_per_sec={avg_bytes}"
        )
    return fmt


def decode_cue_points(payload: bytes) -> List[CuePoint]:
    if len(payload) < U32.size:
        raise FormatError("cue payload too short")
    (count,) = U32.unpack_from(payload)
    expected = U32.size + count * CUE_POINT.size
    if len(payload) < expected:
        raise FormatError(f"cue payload holds {len(payload)} bytes, {count} points need {expected}")
    return [
        CuePoint(*CUE_POINT.unpack_from(payload, U32.size + i * CUE_POINT.size))
        for i in range(count)
    ]


def decode_label(payload: bytes) -> Tuple[int, str]:
    """Decode a ``labl`` payload into (point id, text)."""
    if len(payload) < U32.size + 1:
        raise FormatError("labl payload too short")
    (point_id,) = U32.unpack_from(payload)
    text = payload[U32.size:]
    if not text.endswith(b"\x00"):
        raise FormatError("labl text is not NUL-terminated")
    return point_id, text[:-1].decode("utf-8")


def read_wave(data: bytes) -> WaveInfo:
    """
    Parse a complete RIFF/WAVE byte string.

    Raises:
        FormatError: if the container is malformed or lacks fmt/data chunks
    """
    if len(data) < 12 or data[0:4] != TAG_RIFF or data[8:12] != TAG_WAVE:
        raise FormatError("Not a RIFF/WAVE container")
    (riff_size,) = U32.unpack_from(data, 4)
    end = min(len(data), riff_size + CHUNK_HEADER_SIZE)

    fmt = None
    data_chunk = None
    cue_points: List[CuePoint] = []
    labels: List[Tuple[int, str]] = []
    tags: List[bytes] = []

    for chunk in iter_chunks(data, 12, end):
        tags.append(chunk.tag)
        if chunk.tag == TAG_FMT:
            fmt = decode_wave_format(chunk.payload)
        elif chunk.tag == TAG_DATA:
            data_chunk = chunk
        elif chunk.tag == TAG_CUE:
            cue_points.extend(decode_cue_points(chunk.payload))
        elif chunk.tag == TAG_LIST and chunk.payload[:4] == TAG_ADTL:
            for sub in iter_chunks(chunk.payload, 4):
                if sub.tag == TAG_LABL:
                    labels.append(decode_label(sub.payload))

    if fmt is None or data_chunk is None:
        raise FormatError("Missing fmt or data chunk")

    return WaveInfo(
        riff_size=riff_size,
        file_size=len(data),
        fmt=fmt,
        data_size=data_chunk.size,
        data_offset=data_chunk.offset + CHUNK_HEADER_SIZE,
        cue_points=cue_points,
        labels=labels,
        chunk_tags=tags,
    )
