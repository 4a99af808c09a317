import io

import pytest

from wavedump.exceptions import OpenError, WriteError
from wavedump.session.backends import FileBackend, MemoryBackend, iter_blocks


class RecordingStream:
    """Binary sink that records each write separately."""

    def __init__(self, short_on: int = -1):
        self.writes = []
        self.short_on = short_on
        self.flushed = False

    def write(self, block):
        self.writes.append(bytes(block))
        if len(self.writes) - 1 == self.short_on:
            return len(block) - 1
        return len(block)

    def flush(self):
        self.flushed = True


class BrokenStream(RecordingStream):
    def write(self, block):
        raise BrokenPipeError("reader went away")


@pytest.mark.parametrize("length,block,expected", [
    (100, 32, [32, 32, 32, 4]),
    (96, 32, [32, 32, 32]),
    (10, 32, [10]),
    (0, 32, []),
])
def test_iter_blocks_sizes(length, block, expected):
    data = memoryview(bytes(range(length)))
    blocks = list(iter_blocks(data, block))

    assert [len(b) for b in blocks] == expected
    assert b"".join(bytes(b) for b in blocks) == bytes(data)


def test_memory_flush_writes_full_blocks_then_remainder():
    stream = RecordingStream()
    backend = MemoryBackend(stream, initial_size=16, growth_factor=1.5, block_size=32)
    payload = bytes(i % 251 for i in range(100))
    backend.write(payload)
    backend.flush()

    assert [len(w) for w in stream.writes] == [32, 32, 32, 4]
    assert b"".join(stream.writes) == payload
    assert stream.flushed


def test_memory_flush_smaller_than_one_block():
    stream = RecordingStream()
    backend = MemoryBackend(stream, initial_size=64, growth_factor=1.5, block_size=1024)
    backend.write(b"tiny")
    backend.flush()

    assert stream.writes == [b"tiny"]


def test_memory_flush_short_write_abandons_rest():
    stream = RecordingStream(short_on=1)
    backend = MemoryBackend(stream, initial_size=64, growth_factor=1.5, block_size=8)
    backend.write(bytes(40))

    with pytest.raises(WriteError):
        backend.flush()
    assert len(stream.writes) == 2
    assert not stream.flushed


def test_memory_flush_os_error():
    backend = MemoryBackend(BrokenStream(), initial_size=64, growth_factor=1.5, block_size=8)
    backend.write(bytes(16))
    with pytest.raises(WriteError):
        backend.flush()


def test_memory_header_overwrite():
    stream = io.BytesIO()
    backend = MemoryBackend(stream, initial_size=8, growth_factor=1.5, block_size=4)
    backend.write(bytes(4) + b"body")
    backend.write_header(b"HEAD")
    backend.flush()

    assert backend.size() == 8
    assert stream.getvalue() == b"HEADbody"


def test_file_backend_header_patch(tmp_path):
    path = tmp_path / "out.wav"
    backend = FileBackend(path)
    backend.write(bytes(4))
    backend.write(b"body")
    backend.write_header(b"HEAD")
    backend.write(b"tail")

    assert backend.size() == 12
    backend.close()
    assert path.read_bytes() == b"HEADbodytail"


def test_file_backend_open_failure(tmp_path):
    with pytest.raises(OpenError):
        FileBackend(tmp_path / "missing" / "out.wav")


def test_file_backend_discard_removes_file(tmp_path):
    path = tmp_path / "out.wav"
    backend = FileBackend(path)
    backend.write(b"partial")
    backend.discard()

    assert not path.exists()


def test_memory_flush_to_closed_stream():
    stream = io.BytesIO()
    stream.close()
    backend = MemoryBackend(stream, initial_size=16, growth_factor=1.5, block_size=8)
    backend.write(bytes(12))

    with pytest.raises(WriteError):
        backend.flush()


def test_file_backend_closed_handle_reports_write_error(tmp_path):
    backend = FileBackend(tmp_path / "out.wav")
    backend.write(bytes(4))
    backend._file.close()

    with pytest.raises(WriteError):
        backend.size()
    with pytest.raises(WriteError):
        backend.write(b"more")
    with pytest.raises(WriteError):
        backend.write_header(b"HEAD")
