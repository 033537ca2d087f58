"""Preview generation and content-type sniffing for clipboard payloads."""

import io
import logging

from PIL import Image

from cliphoard.config import PREVIEW_LENGTH, TEXT_MIME, UNKNOWN_MIME
from cliphoard.errors import ClassificationError
from cliphoard.utils import human_readable_size

logger = logging.getLogger(__name__)

# Only headers are read, pixels are never decoded.
Image.MAX_IMAGE_PIXELS = None

# (mime type, ((offset, magic), ...)); every part must match. First hit wins.
SIGNATURES: list[tuple[str, tuple[tuple[int, bytes], ...]]] = [
    ("image/png", ((0, b"\x89PNG\r\n\x1a\n"),)),
    ("image/jpeg", ((0, b"\xff\xd8\xff"),)),
    ("image/gif", ((0, b"GIF87a"),)),
    ("image/gif", ((0, b"GIF89a"),)),
    ("image/webp", ((0, b"RIFF"), (8, b"WEBP"))),
    ("image/bmp", ((0, b"BM"),)),
    ("image/tiff", ((0, b"II*\x00"),)),
    ("image/tiff", ((0, b"MM\x00*"),)),
    ("image/x-icon", ((0, b"\x00\x00\x01\x00"),)),
    ("application/pdf", ((0, b"%PDF-"),)),
    ("application/zip", ((0, b"PK\x03\x04"),)),
    ("application/gzip", ((0, b"\x1f\x8b\x08"),)),
    ("application/x-bzip2", ((0, b"BZh"),)),
    ("application/x-xz", ((0, b"\xfd7zXZ\x00"),)),
    ("application/x-7z-compressed", ((0, b"7z\xbc\xaf\x27\x1c"),)),
    ("application/vnd.rar", ((0, b"Rar!\x1a\x07"),)),
    ("application/zstd", ((0, b"\x28\xb5\x2f\xfd"),)),
    ("application/x-tar", ((257, b"ustar"),)),
    ("application/x-executable", ((0, b"\x7fELF"),)),
    ("application/vnd.microsoft.portable-executable", ((0, b"MZ"),)),
    ("application/x-mach-binary", ((0, b"\xcf\xfa\xed\xfe"),)),
    ("application/x-mach-binary", ((0, b"\xce\xfa\xed\xfe"),)),
    ("application/x-mach-binary", ((0, b"\xca\xfe\xba\xbe"),)),
    ("application/wasm", ((0, b"\x00asm"),)),
    ("application/vnd.sqlite3", ((0, b"SQLite format 3\x00"),)),
    ("audio/mpeg", ((0, b"ID3"),)),
    ("audio/ogg", ((0, b"OggS"),)),
    ("audio/x-flac", ((0, b"fLaC"),)),
    ("audio/x-wav", ((0, b"RIFF"), (8, b"WAVE"))),
    ("video/mp4", ((4, b"ftyp"),)),
]


def sniff(data: bytes) -> str | None:
    """Return the MIME type of the first matching signature, if any."""
    for mime_type, parts in SIGNATURES:
        if all(data[offset : offset + len(magic)] == magic for offset, magic in parts):
            return mime_type
    return None


def image_dimensions(data: bytes) -> tuple[int, int]:
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        raise ClassificationError(f"Unreadable image header: {exc}") from exc


def binary_preview(size: int, image_fmt: str | None = None, dimensions: tuple[int, int] | None = None) -> str:
    parts = ["binary data", human_readable_size(size)]
    if image_fmt:
        parts.append(image_fmt)
    if dimensions:
        parts.append(f"{dimensions[0]}x{dimensions[1]}")
    return f"[[{' '.join(parts)}]]"


def classify(data: bytes) -> tuple[str, str]:
    """Build ``(preview, content_type)`` for a raw clipboard payload.

    Valid UTF-8 is treated as text and previewed by its first
    ``PREVIEW_LENGTH`` characters. Anything else is described by size, plus
    format and pixel dimensions when the payload is a recognised image.

    Raises:
        ClassificationError: the payload looks like an image but its header
            cannot be parsed.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        pass
    else:
        return text.strip()[:PREVIEW_LENGTH], TEXT_MIME

    mime_type = sniff(data)
    if mime_type is None:
        return f"[[UNKNOWN {human_readable_size(len(data))}]]", UNKNOWN_MIME

    category, subtype = mime_type.split("/", 1)
    if category == "image":
        dimensions = image_dimensions(data)
        logger.debug("Sniffed %s image %dx%d", subtype, *dimensions)
        return binary_preview(len(data), subtype, dimensions), mime_type

    return binary_preview(len(data)), mime_type
