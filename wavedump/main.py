"""
Command line entry point: stream decoded or raw PCM audio into a WAV dump.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional

from pydub import AudioSegment

from wavedump.config import DumpConfig
from wavedump.exceptions import FormatError, OpenError, WaveDumpError
from wavedump.riff.reader import read_wave
from wavedump.session import DumpSession
from wavedump.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

DEFAULT_CHUNK_FRAMES = 4096


def iter_raw_chunks(source: BinaryIO, chunk_size: int) -> Iterator[bytes]:
    while True:
        chunk = source.read(chunk_size)
        if not chunk:
            break
        yield chunk


def iter_segment_chunks(segment: AudioSegment, chunk_size: int) -> Iterator[bytes]:
    raw = memoryview(segment.raw_data)
    for start in range(0, len(raw), chunk_size):
        yield bytes(raw[start:start + chunk_size])


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="wavedump",
        description="Stream audio into a RIFF/WAVE file, or to stdout with '-'.",
    )
    ap.add_argument("input", help="Audio file to decode, or raw PCM with --raw ('-' reads stdin)")
    ap.add_argument("output", help="Output WAV path ('.wav' appended if no extension) or '-' for stdout")
    ap.add_argument("--raw", action="store_true", help="Treat input as headerless PCM")
    ap.add_argument("--rate", type=int, default=44100, help="Sample rate for --raw input (default: 44100)")
    ap.add_argument("--bits", type=int, default=16, help="Bits per sample for --raw input (default: 16)")
    ap.add_argument("--channels", type=int, default=2, help="Channel count for --raw input (default: 2)")
    ap.add_argument("--loop", type=int, default=0, help="Loop point as a sample offset (0 = none)")
    ap.add_argument("--chunk-frames", type=int, default=DEFAULT_CHUNK_FRAMES,
                    help=f"Frames appended per write (default: {DEFAULT_CHUNK_FRAMES})")
    ap.add_argument("--verify", action="store_true", help="Read the finished file back and check its sizes")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    ap.add_argument("--log-file", help="Also write logs to this file")
    return ap


def _dump_raw(session: DumpSession, args: argparse.Namespace) -> None:
    frame_size = args.channels * args.bits // 8
    chunk_size = max(1, args.chunk_frames) * max(1, frame_size)
    if args.input == "-":
        for chunk in iter_raw_chunks(sys.stdin.buffer, chunk_size):
            session.append(chunk)
        return
    try:
        source = open(args.input, "rb")
    except OSError as e:
        raise OpenError(f"Could not open input {args.input}: {e}")
    with source:
        for chunk in iter_raw_chunks(source, chunk_size):
            session.append(chunk)


def _load_segment(path: str) -> AudioSegment:
    try:
        return AudioSegment.from_file(path)
    except FileNotFoundError:
        raise OpenError(f"Input file not found: {path}")
    except Exception as e:
        raise FormatError(f"Could not decode {path}: {e}")


def run(args: argparse.Namespace) -> None:
    if args.raw:
        sample_rate, bits, channels = args.rate, args.bits, args.channels
        segment = None
    else:
        if args.input == "-":
            raise FormatError("Decoded input needs a file path; use --raw for stdin")
        segment = _load_segment(args.input)
        sample_rate, bits, channels = segment.frame_rate, segment.sample_width * 8, segment.channels
        logger.info(f"Decoded {args.input}: {sample_rate} Hz, {bits} bit, {channels} ch")

    with DumpSession.create(args.output, DumpConfig()) as session:
        if args.loop:
            session.set_loop(args.loop)
        if segment is None:
            _dump_raw(session, args)
        else:
            chunk_size = max(1, args.chunk_frames) * segment.frame_width
            for chunk in iter_segment_chunks(segment, chunk_size):
                session.append(chunk)
        result = session.finish(sample_rate, bits, channels)

    if args.verify and result.path is not None:
        info = read_wave(Path(result.path).read_bytes())
        if info.riff_size != info.file_size - 8 or info.data_size != result.data_size:
            raise FormatError(
                f"Verification failed: riff_size={info.riff_size}, file_size={info.file_size}, "
                f"data_size={info.data_size}"
            )
        logger.info(f"Verified {result.path}: chunks {[t.decode('ascii') for t in info.chunk_tags]}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    logger.info(f"Starting wave dump: {args.input} -> {args.output}")
    try:
        run(args)
    except WaveDumpError as e:
        logger.error(f"Wave dump failed: {e}")
        return 1
    logger.info("Wave dump complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
