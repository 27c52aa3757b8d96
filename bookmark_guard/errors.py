"""Exception types raised by Bookmark Guard components."""


class BookmarkGuardError(Exception):
    """Base class for all Bookmark Guard errors."""


class ProviderOperationError(BookmarkGuardError):
    """A tree provider read or write (get_children/create/move/remove_tree) failed."""


class StorageError(BookmarkGuardError):
    """Reading or writing the persistent key-value store failed."""


class MalformedSnapshotError(BookmarkGuardError):
    """A stored snapshot entry could not be turned into canonical nodes."""

    def __init__(self, root_id: str, message: str):
        super().__init__(f"Snapshot root {root_id!r} is malformed: {message}")
        self.root_id = root_id


class InvalidCommandError(BookmarkGuardError):
    """A command channel message had an unknown action or invalid fields."""
