"""Exception hierarchy for cliphoard.

Every failure that reaches the command line is a ``ClipHoardError``.
"""


class ClipHoardError(Exception):
    """Base class for all cliphoard errors."""


class StoreError(ClipHoardError):
    """Raised by the clipboard store."""


class StorageIOError(StoreError):
    """A blob or manifest could not be created, read, written or deleted."""


class ManifestError(StoreError):
    """The manifest file exists but does not hold a valid entry list."""


class InvalidPositionError(StoreError):
    """An index outside the current history was requested."""

    def __init__(self, position: int, size: int):
        super().__init__(f"Invalid position {position} (history has {size} entries)")
        self.position = position
        self.size = size


class ClassificationError(ClipHoardError):
    """A payload sniffed as an image has an unreadable header."""


class QueryParseError(ClipHoardError):
    """An entry query does not start with an unsigned integer."""
