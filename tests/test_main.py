"""
Command line tests: raw and decoded input, file and stdout output.
"""

import io
import sys

import numpy as np
from pydub import AudioSegment

from wavedump.main import main
from wavedump.riff.reader import read_wave


class _FakeStdout:
    def __init__(self):
        self.buffer = io.BytesIO()


def test_raw_input_to_file(tmp_path):
    raw = tmp_path / "in.raw"
    samples = np.arange(1000, dtype="<i2").tobytes()
    raw.write_bytes(samples)

    code = main([
        str(raw), str(tmp_path / "out"),
        "--raw", "--rate", "8000", "--bits", "16", "--channels", "1",
        "--loop", "250", "--chunk-frames", "64", "--verify",
    ])

    assert code == 0
    info = read_wave((tmp_path / "out.wav").read_bytes())
    assert info.fmt.sample_rate == 8000
    assert info.fmt.channels == 1
    assert info.data_size == len(samples)
    assert [p.sample_offset for p in info.cue_points] == [250]


def test_decoded_input_to_stdout(tmp_path, monkeypatch):
    source = AudioSegment(
        data=np.arange(-300, 300, dtype="<i2").tobytes(),
        sample_width=2,
        frame_rate=11025,
        channels=2,
    )
    wav_in = tmp_path / "in.wav"
    source.export(str(wav_in), format="wav").close()

    fake = _FakeStdout()
    monkeypatch.setattr(sys, "stdout", fake)
    code = main([str(wav_in), "-"])

    assert code == 0
    out = fake.buffer.getvalue()
    info = read_wave(out)
    assert info.fmt.sample_rate == 11025
    assert info.fmt.channels == 2
    assert info.fmt.bits_per_sample == 16
    assert out[info.data_offset:info.data_offset + info.data_size] == source.raw_data
    assert info.cue_points == []


def test_missing_input_fails(tmp_path):
    code = main([str(tmp_path / "nope.raw"), str(tmp_path / "out"), "--raw"])

    assert code == 1
    assert not (tmp_path / "out.wav").exists()


def test_unwritable_output_fails(tmp_path):
    raw = tmp_path / "in.raw"
    raw.write_bytes(bytes(4))

    code = main([str(raw), str(tmp_path / "missing" / "out"), "--raw"])
    assert code == 1


def test_log_file_receives_messages(tmp_path):
    raw = tmp_path / "in.raw"
    raw.write_bytes(bytes(8))
    log_file = tmp_path / "logs" / "dump.log"

    code = main([str(raw), str(tmp_path / "out"), "--raw", "--log-file", str(log_file)])

    assert code == 0
    assert "Wave dump complete" in log_file.read_text(encoding="utf-8")
