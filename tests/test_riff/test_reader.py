import pytest

from wavedump.exceptions import FormatError
from wavedump.riff.chunks import encode_cue_chunk, encode_label_chunk, encode_riff_chunk_header, encode_wave_header
from wavedump.riff.reader import decode_label, iter_chunks, read_wave


def _build(data: bytes, loop_sample: int = 0) -> bytes:
    body = data + (b"\x00" if len(data) & 1 else b"")
    if loop_sample:
        body += encode_cue_chunk(loop_sample) + encode_label_chunk(0, "Loop point")
    header = encode_wave_header(len(data), 44 + len(body), 22050, 16, 1)
    return header + body


def test_read_wave_plain():
    info = read_wave(_build(b"\x01\x02\x03\x04"))

    assert info.chunk_tags == [b"fmt ", b"data"]
    assert info.data_size == 4
    assert info.data_offset == 44
    assert info.riff_size == info.file_size - 8
    assert info.fmt.sample_rate == 22050
    assert info.cue_points == []
    assert info.labels == []


def test_read_wave_skips_pad_byte_before_cue():
    info = read_wave(_build(b"\x01\x02\x03", loop_sample=1234))

    assert info.chunk_tags == [b"fmt ", b"data", b"cue ", b"LIST"]
    assert info.data_size == 3
    assert len(info.cue_points) == 1
    assert info.cue_points[0].sample_offset == 1234
    assert info.cue_points[0].chunk_tag == b"data"
    assert info.labels == [(0, "Loop point")]


def test_iter_chunks_offsets():
    blob = b"RIFF\x00\x00\x00\x00WAVE" + encode_riff_chunk_header("abcd", 1) + b"x\x00" + encode_riff_chunk_header("efgh", 0)
    chunks = list(iter_chunks(blob))

    assert [(c.tag, c.offset, c.size) for c in chunks] == [(b"abcd", 12, 1), (b"efgh", 22, 0)]
    assert chunks[0].payload == b"x"


def test_iter_chunks_rejects_overrun():
    blob = b"RIFF\x00\x00\x00\x00WAVE" + encode_riff_chunk_header("data", 100) + b"short"
    with pytest.raises(FormatError):
        list(iter_chunks(blob))


def test_read_wave_rejects_non_riff():
    with pytest.raises(FormatError):
        read_wave(b"RIFX" + bytes(40))


def test_decode_label_requires_terminator():
    with pytest.raises(FormatError):
        decode_label(b"\x00\x00\x00\x00abc")
