import json
import logging
from pathlib import Path

from cliphoard.config import DATA_DIR_NAME, MANIFEST_NAME, resolve_cache_dir
from cliphoard.errors import InvalidPositionError, ManifestError, StorageIOError
from cliphoard.models import Entry
from cliphoard.preview import classify
from cliphoard.utils import compute_hash

logger = logging.getLogger(__name__)

STAGED_SUFFIX = ".deleting"


def load_manifest(manifest_file: Path) -> list[Entry]:
    """Read the manifest, returning an empty history when the file is absent."""
    if not manifest_file.exists():
        return []
    try:
        raw = manifest_file.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ManifestError(f"Manifest {manifest_file} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise StorageIOError(f"Cannot read manifest {manifest_file}: {exc}") from exc
    try:
        rows = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Malformed manifest {manifest_file}: {exc}") from exc
    if not isinstance(rows, list):
        raise ManifestError(f"Manifest {manifest_file} is not a JSON array")
    entries = [Entry.from_dict(row) for row in rows]
    seen: set[str] = set()
    for entry in entries:
        if entry.content_key in seen:
            raise ManifestError(f"Manifest {manifest_file} lists {entry.content_key} more than once")
        seen.add(entry.content_key)
    return entries


class ClipboardStore:
    """Clipboard history backed by one blob file per payload and a JSON manifest.

    The manifest lists entries newest first. Mutations stage blob deletions
    before touching memory and roll memory back when the manifest cannot be
    written. There is no locking: two processes writing the same cache root
    race and the last manifest write wins.
    """

    def __init__(self, cache_dir: str | Path | None = None):
        self.cache_dir = resolve_cache_dir(cache_dir)
        self.data_folder = self.cache_dir / DATA_DIR_NAME
        self.manifest_file = self.cache_dir / MANIFEST_NAME
        try:
            self.data_folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageIOError(f"Cannot create {self.data_folder}: {exc}") from exc
        self._entries = load_manifest(self.manifest_file)
        logger.debug("Loaded %d entries from %s", len(self._entries), self.manifest_file)

    @property
    def entries(self) -> tuple[Entry, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, position: int) -> Entry:
        self._check_position(position)
        return self._entries[position]

    def find(self, content_key: str) -> Entry | None:
        for entry in self._entries:
            if entry.content_key == content_key:
                return entry
        return None

    def blob_path(self, entry: Entry) -> Path:
        return (self.data_folder / entry.content_key).absolute()

    def read_blob(self, position: int) -> bytes:
        entry = self.get(position)
        try:
            return self.blob_path(entry).read_bytes()
        except OSError as exc:
            raise StorageIOError(f"Cannot read blob {entry.content_key}: {exc}") from exc

    def add(self, data: bytes) -> Entry:
        """Store a payload, or return the existing entry with identical content.

        A duplicate is never moved to the front. If the manifest write fails
        the new blob stays on disk unreferenced.
        """
        key = compute_hash(data)
        existing = self.find(key)
        if existing is not None:
            logger.info("Entry %s already stored, skipping", key)
            return existing

        preview, content_type = classify(data)
        blob = self.data_folder / key
        try:
            blob.write_bytes(data)
        except OSError as exc:
            raise StorageIOError(f"Cannot write blob {blob}: {exc}") from exc

        entry = Entry(content_key=key, preview=preview, content_type=content_type)
        self._entries.insert(0, entry)
        try:
            self.write_manifest()
        except StorageIOError:
            self._entries.pop(0)
            logger.warning("Manifest write failed, blob %s left unreferenced", key)
            raise
        logger.info("Stored %s (%s, %d bytes)", key, content_type, len(data))
        return entry

    def remove(self, position: int) -> Entry:
        self._check_position(position)
        entry = self._entries[position]
        staged = self._stage_blob(entry)

        del self._entries[position]
        try:
            self.write_manifest()
        except StorageIOError:
            self._entries.insert(position, entry)
            self._restore_blob(entry, staged)
            raise

        self._discard_staged(staged)
        logger.info("Removed entry %d (%s)", position, entry.content_key)
        return entry

    def clear(self) -> int:
        """Delete every entry and its blob.

        Aborts on the first blob that cannot be staged; blobs staged before
        it are put back so history is left as it was.
        """
        staged: list[tuple[Entry, Path]] = []
        try:
            for entry in self._entries:
                staged.append((entry, self._stage_blob(entry)))
        except StorageIOError:
            self._restore_all(staged)
            raise

        removed = self._entries
        self._entries = []
        try:
            self.write_manifest()
        except StorageIOError:
            self._entries = removed
            self._restore_all(staged)
            raise

        for _, path in staged:
            self._discard_staged(path)
        logger.info("Cleared %d entries", len(removed))
        return len(removed)

    def write_manifest(self) -> None:
        data = json.dumps([entry.to_dict() for entry in self._entries], ensure_ascii=False, separators=(",", ":"))
        try:
            self.manifest_file.write_text(data, encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Cannot write manifest {self.manifest_file}: {exc}") from exc

    def _check_position(self, position: int) -> None:
        if not 0 <= position < len(self._entries):
            raise InvalidPositionError(position, len(self._entries))

    def _stage_blob(self, entry: Entry) -> Path:
        blob = self.data_folder / entry.content_key
        staged = blob.with_name(blob.name + STAGED_SUFFIX)
        try:
            blob.rename(staged)
        except OSError as exc:
            raise StorageIOError(f"Cannot delete blob {blob}: {exc}") from exc
        return staged

    def _restore_blob(self, entry: Entry, staged: Path) -> None:
        try:
            staged.rename(self.data_folder / entry.content_key)
        except OSError:
            logger.exception("Could not restore blob %s", entry.content_key)

    def _restore_all(self, staged: list[tuple[Entry, Path]]) -> None:
        for entry, path in staged:
            self._restore_blob(entry, path)
        if staged:
            logger.warning("Restored %d staged blobs after a failed mutation", len(staged))

    @staticmethod
    def _discard_staged(staged: Path) -> None:
        try:
            staged.unlink()
        except OSError:
            logger.warning("Could not delete staged blob %s", staged)
