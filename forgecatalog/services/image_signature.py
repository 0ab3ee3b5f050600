"""
Binary image signature checks.

Card art is downloaded by tooling that sometimes saves an HTML error page or a
truncated response under an image name. The extension says nothing about the
bytes, so an asset only counts as an image if its leading bytes carry the
magic signature of the format its extension claims.
"""

import logging
from pathlib import Path

from forgecatalog.config import SIGNATURE_READ_BYTES

logger = logging.getLogger(__name__)

# Probe priority for local art (first valid match wins)
IMAGE_EXTENSIONS: tuple[str, ...] = ("webp", "png", "jpg", "jpeg")

PNG_MAGIC = b"\x89PNG"
JPEG_MAGIC = b"\xff\xd8\xff"
RIFF_MAGIC = b"RIFF"
WEBP_MAGIC = b"WEBP"

# Shortest header that can carry each format's signature
MIN_HEADER_BYTES: dict[str, int] = {
    "webp": 12,
    "png": 4,
    "jpg": 3,
    "jpeg": 3,
}


def extension_of(path: Path | str) -> str:
    """Lower-case extension without the dot ("" when there is none)."""
    return Path(path).suffix.lower().lstrip(".")


def read_header(path: Path, size: int = SIGNATURE_READ_BYTES) -> bytes | None:
    """Read up to `size` leading bytes, or None if the file can't be read."""
    try:
        with open(path, "rb") as f:
            return f.read(size)
    except OSError as e:
        logger.debug("Cannot read header of %s: %s", path, e)
        return None


def matches_signature(header: bytes, ext: str) -> bool:
    """
    Check a header against the signature expected for `ext`.

    Args:
        header: Leading bytes of the file
        ext: Claimed extension (webp, png, jpg, jpeg; case-insensitive)

    Returns:
        True only when the bytes match the claimed format exactly.
    """
    ext = ext.lower().lstrip(".")
    min_len = MIN_HEADER_BYTES.get(ext)
    if min_len is None or len(header) < min_len:
        return False

    if ext == "webp":
        return header[0:4] == RIFF_MAGIC and header[8:12] == WEBP_MAGIC
    if ext == "png":
        return header[0:4] == PNG_MAGIC
    return header[0:3] == JPEG_MAGIC


def is_valid_image(path: Path | str, declared_ext: str) -> bool:
    """
    Check that the file at `path` really is a `declared_ext` image.

    Missing, unreadable and too-short files are invalid, as is any extension
    outside IMAGE_EXTENSIONS. Never writes.
    """
    if declared_ext.lower().lstrip(".") not in MIN_HEADER_BYTES:
        return False

    path = Path(path)
    if not path.is_file():
        return False

    header = read_header(path)
    if header is None:
        return False
    return matches_signature(header, declared_ext)
