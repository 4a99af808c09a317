"""
Configuration dataclass for dump sessions.
"""
from dataclasses import dataclass
from typing import Any, Dict

from wavedump.exceptions import FormatError

# Reference flush block: 32768 frames of 16-bit stereo, twice over.
DEFAULT_FLUSH_BLOCK_SIZE = 32768 * 2 * 2


@dataclass
class DumpConfig:
    """Configuration for dump sessions."""
    initial_buffer_size: int = 8 * 1024 * 1024
    growth_factor: float = 1.5
    flush_block_size: int = DEFAULT_FLUSH_BLOCK_SIZE
    extension: str = ".wav"
    stdout_token: str = "-"
    loop_label: str = "Loop point"

    def __post_init__(self) -> None:
        if self.initial_buffer_size <= 0:
            raise FormatError(f"initial_buffer_size must be positive, got {self.initial_buffer_size}")
        if self.growth_factor <= 1.0:
            raise FormatError(f"growth_factor must be greater than 1, got {self.growth_factor}")
        if self.flush_block_size <= 0:
            raise FormatError(f"flush_block_size must be positive, got {self.flush_block_size}")
        if not self.extension.startswith("."):
            raise FormatError(f"extension must start with '.', got {self.extension!r}")

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'DumpConfig':
        """Create DumpConfig from a settings dictionary."""
        buffer_cfg = settings.get("buffer", {})
        flush_cfg = settings.get("flush", {})
        loop_cfg = settings.get("loop", {})

        return cls(
            initial_buffer_size=int(buffer_cfg.get("initial_size", 8 * 1024 * 1024)),
            growth_factor=float(buffer_cfg.get("growth_factor", 1.5)),
            flush_block_size=int(flush_cfg.get("block_size", DEFAULT_FLUSH_BLOCK_SIZE)),
            extension=settings.get("extension", ".wav"),
            stdout_token=settings.get("stdout_token", "-"),
            loop_label=loop_cfg.get("label", "Loop point"),
        )
