"""
Exceptions raised by the bookmark store and operations.

Every failure carries the offending key, name or path so the CLI can render
a precise message. None of them terminate the process; callers decide.
"""
from typing import Optional, Union


class BookmarkError(Exception):
    """Base exception for bookmark-related errors."""
    pass


class InvalidPathError(BookmarkError):
    """Raised when a directory to bookmark does not exist."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Directory does not exist: {path}")


class InvalidNameError(BookmarkError):
    """Raised when a bookmark name cannot be stored."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid name '{name}': {reason}")


class DuplicateNameError(BookmarkError):
    """Raised when a name is already used by another bookmark."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Name '{name}' already exists")


class NotFoundError(BookmarkError):
    """
    Raised when a lookup key resolves to no bookmark.

    Attributes:
        key: The key as given (index or name)
        reason: One of NotFoundError.INDEX_OUT_OF_RANGE or NotFoundError.UNKNOWN_NAME
        size: Length of the sequence the key was resolved against
    """

    INDEX_OUT_OF_RANGE = "index out of range"
    UNKNOWN_NAME = "unknown name"

    def __init__(self, key: Union[int, str], reason: str, size: Optional[int] = None):
        self.key = key
        self.reason = reason
        self.size = size
        if reason == self.INDEX_OUT_OF_RANGE:
            if size:
                message = f"No such bookmark: #{key} (valid indexes are 1-{size})"
            else:
                message = f"No such bookmark: #{key} (no bookmarks saved)"
        else:
            message = f"No such bookmark: {key}"
        super().__init__(message)


class KindMismatchError(BookmarkError):
    """Raised when remove is asked for the wrong class of bookmark."""

    def __init__(self, key: Union[int, str], actual_kind):
        self.key = key
        self.actual_kind = actual_kind
        label = f"#{key}" if isinstance(key, int) else f"'{key}'"
        if actual_kind.is_bound:
            message = f"Entry {label} is bound. Use --bound to remove it."
        else:
            message = f"Entry {label} is normal. Cannot remove it with --bound."
        super().__init__(message)


class TargetUnavailableError(BookmarkError):
    """Raised when a bookmarked directory is gone or not accessible."""

    def __init__(self, key: Union[int, str], path: str):
        self.key = key
        self.path = path
        super().__init__(f"Failed to change to {path}: directory is missing or not accessible")


class CorruptRecordError(BookmarkError):
    """Raised (or collected) when a persisted line cannot be decoded."""

    def __init__(self, lineno: int, line: str, reason: str):
        self.lineno = lineno
        self.line = line
        self.reason = reason
        super().__init__(f"Corrupt bookmark on line {lineno}: {reason}")
