"""
Destination path helpers.
"""
from pathlib import Path
from typing import Union


def derive_path(name: Union[str, Path], extension: str = ".wav") -> Path:
    """
    Return ``name`` as a path, appending ``extension`` if it has none.

    Example:
        derive_path("out/track01") -> Path("out/track01.wav")
        derive_path("out/track01.wave") -> Path("out/track01.wave")
    """
    path = Path(name)
    if not path.suffix:
        path = path.with_name(path.name + extension)
    return path
