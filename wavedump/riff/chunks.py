"""
Chunk codec: lay out RIFF/WAVE header, cue and label chunks.

Every function here is pure. Returned lengths always match the size fields
they encode: ``8 + size`` plus one pad byte where the payload is odd.
"""

from typing import Union

from wavedump.exceptions import EncodingError
from wavedump.riff.types import (
    CHUNK_HEADER,
    CHUNK_HEADER_SIZE,
    CUE_POINT,
    CUE_POINT_SIZE,
    TAG_ADTL,
    TAG_CUE,
    TAG_DATA,
    TAG_FMT,
    TAG_LABL,
    TAG_LIST,
    TAG_RIFF,
    TAG_WAVE,
    U16_MAX,
    U32,
    U32_MAX,
    WAVE_FORMAT,
    WAVE_FORMAT_SIZE,
    WAVE_HEADER_SIZE,
    WaveFormatPcm,
)

Tag = Union[str, bytes]


def _fourcc(tag: Tag) -> bytes:
    if isinstance(tag, str):
        try:
            tag = tag.encode("ascii")
        except UnicodeEncodeError:
            raise EncodingError(f"Chunk tag must be ASCII, got {tag!r}")
    if len(tag) != 4:
        raise EncodingError(f"Chunk tag must be exactly 4 bytes, got {tag!r}")
    return bytes(tag)


def _check_range(name: str, value: int, maximum: int) -> int:
    if value < 0 or value > maximum:
        raise EncodingError(f"{name} out of range [0, {maximum}]: {value}")
    return value


def encode_riff_chunk_header(tag: Tag, payload_size: int) -> bytes:
    """Encode an 8-byte chunk header. ``payload_size`` excludes the header itself."""
    return CHUNK_HEADER.pack(_fourcc(tag), _check_range("payload_size", payload_size, U32_MAX))


def encode_wave_format(fmt: WaveFormatPcm) -> bytes:
    """Encode the 16-byte PCM format payload."""
    return WAVE_FORMAT.pack(
        _check_range("format_tag", fmt.format_tag, U16_MAX),
        _check_range("channels", fmt.channels, U16_MAX),
        _check_range("sample_rate", fmt.sample_rate, U32_MAX),
        _check_range("avg_bytes_per_sec", fmt.avg_bytes_per_sec, U32_MAX),
        _check_range("block_align", fmt.block_align, U16_MAX),
        _check_range("bits_per_sample", fmt.bits_per_sample, U16_MAX),
    )


def encode_wave_header(
    data_size: int,
    file_size: int,
    sample_rate: int,
    bits_per_sample: int,
    channels: int,
) -> bytes:
    """
    Encode the 44-byte canonical WAVE header.

    Args:
        data_size: Number of sample bytes in the data chunk (no pad byte)
        file_size: Total size of the finished file; the RIFF size is file_size - 8
        sample_rate: Frames per second
        bits_per_sample: Bits per single-channel sample
        channels: Channel count

    Returns:
        Header bytes, WAVE_HEADER_SIZE long
    """
    if file_size < WAVE_HEADER_SIZE:
        raise EncodingError(f"file_size {file_size} is smaller than the header ({WAVE_HEADER_SIZE})")

    fmt = WaveFormatPcm(channels=channels, sample_rate=sample_rate, bits_per_sample=bits_per_sample)
    header = b"".join((
        encode_riff_chunk_header(TAG_RIFF, file_size - CHUNK_HEADER_SIZE),
        TAG_WAVE,
        encode_riff_chunk_header(TAG_FMT, WAVE_FORMAT_SIZE),
        encode_wave_format(fmt),
        encode_riff_chunk_header(TAG_DATA, data_size),
    ))
    return header


def encode_cue_chunk(loop_sample: int) -> bytes:
    """Encode a ``cue `` chunk holding a single cue point at ``loop_sample``."""
    point = CUE_POINT.pack(
        0,  # id
        0,  # play order position
        TAG_DATA,
        0,  # chunk start
        0,  # block start
        _check_range("loop_sample", loop_sample, U32_MAX),
    )
    return b"".join((
        encode_riff_chunk_header(TAG_CUE, 4 + 1 * CUE_POINT_SIZE),
        U32.pack(1),
        point,
    ))


def encode_label_chunk(point_id: int, label: str) -> bytes:
    """
    Encode a ``LIST/adtl`` chunk with one ``labl`` entry naming ``point_id``.

    The label is written as NUL-terminated ASCII. An odd ``labl`` payload is
    followed by a zero pad byte that neither size field counts.
    """
    try:
        text = label.encode("ascii")
    except UnicodeEncodeError:
        raise EncodingError(f"Label must be ASCII, got {label!r}")
    if b"\x00" in text:
        raise EncodingError("Label must not contain NUL characters")

    labl_size = U32.size + len(text) + 1
    list_size = len(TAG_ADTL) + CHUNK_HEADER_SIZE + labl_size
    pad = b"\x00" if labl_size & 1 else b""

    return b"".join((
        encode_riff_chunk_header(TAG_LIST, list_size),
        TAG_ADTL,
        encode_riff_chunk_header(TAG_LABL, labl_size),
        U32.pack(_check_range("point_id", point_id, U32_MAX)),
        text,
        b"\x00",
        pad,
    ))
