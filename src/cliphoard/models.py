from dataclasses import dataclass

from cliphoard.errors import ManifestError

_FIELDS = ("file_name", "preview", "mime_type")


@dataclass(frozen=True)
class Entry:
    content_key: str
    preview: str
    content_type: str

    def to_dict(self) -> dict[str, str]:
        return {
            "file_name": self.content_key,
            "preview": self.preview,
            "mime_type": self.content_type,
        }

    @classmethod
    def from_dict(cls, row: object) -> "Entry":
        if not isinstance(row, dict):
            raise ManifestError(f"Manifest row is not an object: {row!r}")
        for field in _FIELDS:
            if not isinstance(row.get(field), str):
                raise ManifestError(f"Manifest row has no valid {field!r}: {row!r}")
        return cls(
            content_key=row["file_name"],
            preview=row["preview"],
            content_type=row["mime_type"],
        )
