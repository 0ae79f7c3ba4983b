"""
exif_reader.py - Capture Time Decoder

Reads the EXIF DateTimeOriginal field with Pillow
"""

from pathlib import Path
from typing import Optional

from PIL import ExifTags, Image


def read_capture_time(path: Path) -> Optional[str]:
    """
    Read the raw capture time text of an image

    Args:
        path: Image file

    Returns:
        DateTimeOriginal as stored (e.g. "2017:05:06 13:21:02"),
        None if the image carries no such field

    Raises:
        OSError: File cannot be read or is not an image Pillow understands
    """
    with Image.open(path) as img:
        exif_ifd = img.getexif().get_ifd(ExifTags.IFD.Exif)
        value = exif_ifd.get(ExifTags.Base.DateTimeOriginal)

    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="replace")
    return str(value)
