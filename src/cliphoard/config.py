import logging
import os
from pathlib import Path

DEFAULT_CACHE_DIR = "~/.cache/cliphoard"
DATA_DIR_NAME = "clipboard_data"
MANIFEST_NAME = "clipboard_manifest.json"
LOG_NAME = "log"

PREVIEW_LENGTH = 100  # characters kept from a text payload
TEXT_MIME = "text/plain"
UNKNOWN_MIME = "application/octet-stream"


def resolve_cache_dir(raw: str | Path | None = None) -> Path:
    """Return the cache root, honouring CLIPHOARD_CACHE_DIR and expanding ``~``."""
    if raw is None:
        raw = os.environ.get("CLIPHOARD_CACHE_DIR") or DEFAULT_CACHE_DIR
    return Path(raw).expanduser()


def _parse_log_level() -> int:
    raw = os.environ.get("CLIPHOARD_LOG_LEVEL")
    if raw is None:
        return logging.INFO
    level = logging.getLevelName(raw.strip().upper())
    if not isinstance(level, int):
        return logging.INFO
    return level


LOG_LEVEL = _parse_log_level()
