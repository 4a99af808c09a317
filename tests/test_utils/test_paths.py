from pathlib import Path

from wavedump.utils.paths import derive_path


def test_extension_appended_when_missing():
    assert derive_path("out/track01") == Path("out/track01.wav")


def test_existing_extension_kept():
    assert derive_path("out/track01.wav") == Path("out/track01.wav")
    assert derive_path("out/track01.raw") == Path("out/track01.raw")


def test_custom_extension():
    assert derive_path(Path("take"), ".wave") == Path("take.wave")
