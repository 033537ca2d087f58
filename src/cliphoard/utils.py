import re

import xxhash

from cliphoard.errors import QueryParseError

SIZE_UNITS = ("B", "KB", "MB", "GB", "TB", "PB", "EB")
_INDEX_RE = re.compile(r"\d+", re.ASCII)


def compute_hash(data: str | bytes) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8")
    return str(xxhash.xxh3_64_intdigest(data))


def human_readable_size(size: int) -> str:
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{value:.2f} {SIZE_UNITS[unit]}"


def single_line(text: str) -> str:
    return text.replace("\n", "").strip()


def parse_query(query: str) -> int:
    """Extract the zero-based index from ``"3"`` or ``"3: some preview text"``."""
    index_str = query.split(":", 1)[0].strip()
    if not _INDEX_RE.fullmatch(index_str):
        raise QueryParseError(f"Invalid entry query: {query.strip()!r}")
    return int(index_str)
