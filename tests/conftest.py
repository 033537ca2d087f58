import struct
import zlib

import pytest

from cliphoard.storage import ClipboardStore


def _chunk(kind: bytes, data: bytes) -> bytes:
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return len(data).to_bytes(4, "big") + kind + data + crc.to_bytes(4, "big")


@pytest.fixture
def store(tmp_path):
    return ClipboardStore(cache_dir=tmp_path)


@pytest.fixture
def make_png():
    """Factory fixture building an RGB PNG; ``pixels=False`` leaves the IDAT empty."""

    def _make_png(width: int = 1, height: int = 1, pixels: bool = True) -> bytes:
        signature = b"\x89PNG\r\n\x1a\n"
        ihdr = struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0)
        raw_rows = (b"\x00" + b"\xff\x00\x00" * width) * height if pixels else b""
        return (
            signature
            + _chunk(b"IHDR", ihdr)
            + _chunk(b"IDAT", zlib.compress(raw_rows))
            + _chunk(b"IEND", b"")
        )

    return _make_png


@pytest.fixture
def unknown_bytes():
    # 0x80-0x8f are UTF-8 continuation bytes and match no signature
    return bytes(range(0x80, 0x90))
