"""
cdmark - directory bookmarks

Save directories as normal (frequent, disposable) or bound (long-lived)
bookmarks in a flat file, then list, jump to, rename and remove them by
name or by index.

Design Principles:
- Single plain-text bookmark file (~/.dir_bookmarks), one record per line
- Normal bookmarks always precede bound ones; names are unique
- Indexes are positions in the file as read, never persistent identifiers
- Every operation is one load-validate-save cycle with an atomic save

Example Usage:
    >>> from cdmark import RecordStore, add_bookmark, goto_bookmark
    >>> store = RecordStore("/tmp/bookmarks")
    >>> add_bookmark(store, "/tmp", name="tmp")
    >>> goto_bookmark(store, "tmp")
"""

__version__ = "0.3.0"
__author__ = "cdmark Contributors"

# Store
from cdmark.store import RecordStore, parse_key

# Configuration
from cdmark.config import CdmarkConfig, get_config, init_config

# Models
from cdmark.models import BookmarkKind, BookmarkRecord, BookmarkSequence, ListEntry, Listing

# Errors
from cdmark.errors import (
    BookmarkError,
    CorruptRecordError,
    DuplicateNameError,
    InvalidNameError,
    InvalidPathError,
    KindMismatchError,
    NotFoundError,
    TargetUnavailableError,
)

# Operations
from cdmark.operations import (
    Placement,
    add_bookmark,
    bookmark_names,
    clear_bookmarks,
    goto_bookmark,
    list_bookmarks,
    remove_bookmark,
    rename_bookmark,
    unname_bookmark,
)

__all__ = [
    # Store
    "RecordStore",
    "parse_key",
    # Config
    "CdmarkConfig",
    "get_config",
    "init_config",
    # Models
    "BookmarkKind",
    "BookmarkRecord",
    "BookmarkSequence",
    "ListEntry",
    "Listing",
    # Errors
    "BookmarkError",
    "CorruptRecordError",
    "DuplicateNameError",
    "InvalidNameError",
    "InvalidPathError",
    "KindMismatchError",
    "NotFoundError",
    "TargetUnavailableError",
    # Operations
    "Placement",
    "add_bookmark",
    "bookmark_names",
    "clear_bookmarks",
    "goto_bookmark",
    "list_bookmarks",
    "remove_bookmark",
    "rename_bookmark",
    "unname_bookmark",
]
