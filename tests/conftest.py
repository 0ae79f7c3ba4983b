"""
Shared fixtures for the croner test suite.
"""

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest
from PIL import ExifTags, Image


def make_files(directory: Path, names: Iterable[str]) -> None:
    """Create files whose content is their own name."""
    for name in names:
        path = directory / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(name, encoding="utf-8")


def set_mtime(path: Path, when: datetime) -> None:
    ts = when.timestamp()
    os.utime(path, (ts, ts))


class FakeDecoder:
    """Capture time decoder answering from a name -> text mapping.

    Names mapped to None decode to no capture time; names mapped to an
    exception instance raise it; unmapped names raise OSError.
    """

    def __init__(self, mapping: Dict[str, object]):
        self.mapping = mapping
        self.calls = []

    def __call__(self, path: Path) -> Optional[str]:
        self.calls.append(Path(path).name)
        value = self.mapping.get(Path(path).name, OSError("not an image"))
        if isinstance(value, Exception):
            raise value
        return value


@pytest.fixture(autouse=True)
def reset_croner_logger():
    """Drop handlers installed by setup_logging so they do not outlive a test."""
    yield
    logger = logging.getLogger("croner")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def photo_dir(tmp_path):
    """Directory with a.jpg, b.jpg, c.jpg."""
    make_files(tmp_path, ["a.jpg", "b.jpg", "c.jpg"])
    return tmp_path


@pytest.fixture
def scenario_decoder():
    """a and b share a second, c is an hour earlier."""
    return FakeDecoder({
        "a.jpg": "2021:01:01 10:00:00",
        "b.jpg": "2021:01:01 10:00:00",
        "c.jpg": "2021:01:01 09:00:00",
    })


def listing(directory: Path) -> set:
    return {p.name for p in directory.iterdir()}


def contents(directory: Path) -> Dict[str, str]:
    """Map current file name -> original name stored as content."""
    return {p.name: p.read_text(encoding="utf-8") for p in directory.iterdir() if p.is_file()}


def make_photo(path: Path, capture_time: Optional[str] = None) -> None:
    """Write a small JPEG, with an EXIF DateTimeOriginal when capture_time is given."""
    path.parent.mkdir(parents=True, exist_ok=True)
    image = Image.new("RGB", (8, 8), "white")
    if capture_time is None:
        image.save(path)
        return
    exif = Image.Exif()
    exif.get_ifd(ExifTags.IFD.Exif)[ExifTags.Base.DateTimeOriginal] = capture_time
    image.save(path, exif=exif)
