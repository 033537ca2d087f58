import dataclasses

import pytest

from cliphoard.errors import ManifestError
from cliphoard.models import Entry


class TestEntry:
    def test_to_dict_uses_manifest_field_names(self):
        entry = Entry(content_key="123", preview="hi", content_type="text/plain")
        assert entry.to_dict() == {"file_name": "123", "preview": "hi", "mime_type": "text/plain"}

    def test_from_dict(self):
        row = {"file_name": "9", "preview": "[[UNKNOWN 1.00 B]]", "mime_type": "application/octet-stream"}
        assert Entry.from_dict(row) == Entry("9", "[[UNKNOWN 1.00 B]]", "application/octet-stream")

    def test_extra_fields_ignored(self):
        row = {"file_name": "9", "preview": "p", "mime_type": "text/plain", "pinned": True}
        assert Entry.from_dict(row).content_key == "9"

    @pytest.mark.parametrize("row", [[], "9", {"file_name": "9"}, {"file_name": None, "preview": "", "mime_type": ""}])
    def test_invalid_rows(self, row):
        with pytest.raises(ManifestError):
            Entry.from_dict(row)

    def test_immutable(self):
        entry = Entry("1", "p", "text/plain")
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.preview = "changed"
