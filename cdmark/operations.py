"""
Bookmark operations.

Each function performs one load-validate-(save) cycle against a RecordStore.
Validation always happens before anything is written, so a raised
BookmarkError leaves the bookmark file exactly as it was.

Indexes returned here (and accepted as keys) refer to the sequence as it was
read during the call; they may point elsewhere after any mutating call.
"""
import logging
import os
from typing import List, NamedTuple, Optional

from cdmark.codec import validate_name
from cdmark.errors import (
    DuplicateNameError,
    InvalidPathError,
    KindMismatchError,
    TargetUnavailableError,
)
from cdmark.models import BookmarkKind, BookmarkRecord, ListEntry, Listing
from cdmark.store import LookupKey, RecordStore, parse_key

logger = logging.getLogger(__name__)


class Placement(NamedTuple):
    """A record together with its 1-based index in the sequence."""

    index: int
    record: BookmarkRecord


def resolve_directory(directory: Optional[str] = None, cwd: Optional[str] = None) -> str:
    """
    Turn a user-supplied directory into the absolute, symlink-free path to store.

    Raises:
        InvalidPathError: If the directory does not exist
    """
    cwd = cwd or os.getcwd()
    directory = os.path.expanduser(directory or ".")
    candidate = directory if os.path.isabs(directory) else os.path.join(cwd, directory)
    if not os.path.isdir(candidate):
        raise InvalidPathError(directory)
    return os.path.realpath(candidate)


def add_bookmark(store: RecordStore, directory: Optional[str] = None,
                 kind: BookmarkKind = BookmarkKind.NORMAL, name: Optional[str] = None,
                 cwd: Optional[str] = None) -> Placement:
    """
    Bookmark a directory.

    Args:
        store: Record store to update
        directory: Directory to add (defaults to the current directory)
        kind: NORMAL or BOUND
        name: Optional unique name
        cwd: Directory relative paths are resolved against

    Returns:
        Placement of the new record

    Raises:
        InvalidPathError: If the directory does not exist
        InvalidNameError: If the name cannot be stored
        DuplicateNameError: If the name is already taken
    """
    path = resolve_directory(directory, cwd)
    if name:
        validate_name(name)

    sequence = store.load()
    if name and sequence.has_name(name):
        raise DuplicateNameError(name)

    record = BookmarkRecord(kind=kind, path=path, name=name)
    index = sequence.insert(record)
    store.save(sequence)

    logger.info(f"Added {kind.label} bookmark #{index}: {record.describe()}")
    return Placement(index, record)


def list_bookmarks(store: RecordStore, include_bound: bool = False, relative: bool = False,
                   cwd: Optional[str] = None) -> Listing:
    """
    List bookmarks without modifying anything.

    Normal bookmarks come first; bound ones follow only when requested.
    Entries keep their sequence index, so the numbers shown can be passed
    straight back as lookup keys.

    Args:
        store: Record store to read
        include_bound: Also list bound bookmarks
        relative: Render paths relative to ``cwd``
        cwd: Current directory (defaults to the process cwd)
    """
    cwd = cwd or os.getcwd()
    current = os.path.realpath(cwd)
    sequence = store.load()

    listing = Listing(
        normal_count=len(sequence.normal()),
        bound_count=len(sequence.bound()),
        include_bound=include_bound,
        relative=relative,
        skipped=list(sequence.skipped),
    )

    for index, record in enumerate(sequence, start=1):
        if record.is_bound and not include_bound:
            continue
        display = os.path.relpath(record.path, cwd) if relative else record.path
        listing.entries.append(ListEntry(
            index=index,
            record=record,
            display_path=display,
            current=os.path.realpath(record.path) == current,
        ))

    return listing


def goto_bookmark(store: RecordStore, key: LookupKey) -> str:
    """
    Resolve a bookmark to the directory the caller should change into.

    Raises:
        NotFoundError: If the key matches no bookmark
        TargetUnavailableError: If the directory is gone or not enterable
    """
    sequence = store.load()
    record = sequence.at(store.locate(sequence, key))

    path = record.path
    if not os.path.isdir(path) or not os.access(path, os.X_OK):
        raise TargetUnavailableError(parse_key(key), path)
    return path


def rename_bookmark(store: RecordStore, key: LookupKey, new_name: str) -> Placement:
    """
    Give a bookmark a new name, keeping its kind, path and position.

    Raises:
        InvalidNameError: If the new name cannot be stored
        NotFoundError: If the key matches no bookmark
        DuplicateNameError: If any bookmark already carries the new name
    """
    validate_name(new_name)
    sequence = store.load()
    index = store.locate(sequence, key)

    if sequence.has_name(new_name):
        raise DuplicateNameError(new_name)

    record = sequence.at(index)
    old_name = record.name
    record.name = new_name
    store.save(sequence)

    logger.info(f"Renamed bookmark #{index} from {old_name!r} to {new_name!r}")
    return Placement(index, record)


def unname_bookmark(store: RecordStore, key: LookupKey) -> Placement:
    """
    Remove the name of a bookmark.

    Raises:
        NotFoundError: If the key matches no bookmark
    """
    sequence = store.load()
    index = store.locate(sequence, key)
    record = sequence.at(index)
    record.name = None
    store.save(sequence)

    logger.info(f"Removed name from bookmark #{index}")
    return Placement(index, record)


def remove_bookmark(store: RecordStore, key: LookupKey, bound: bool = False) -> Placement:
    """
    Delete a single bookmark.

    The caller has to state which kind it means to remove: ``bound=True``
    is required for bound bookmarks and refused for normal ones.

    Returns:
        Placement of the removed record (its index before removal)

    Raises:
        NotFoundError: If the key matches no bookmark
        KindMismatchError: If the record's kind differs from the asserted one
    """
    sequence = store.load()
    index = store.locate(sequence, key)
    record = sequence.at(index)

    if record.is_bound != bound:
        raise KindMismatchError(parse_key(key), record.kind)

    sequence.remove_at(index)
    store.save(sequence)

    logger.info(f"Removed {record.kind.label} bookmark #{index}: {record.describe()}")
    return Placement(index, record)


def clear_bookmarks(store: RecordStore) -> int:
    """
    Delete every normal bookmark; bound bookmarks stay in order.

    Returns:
        Number of bookmarks removed (0 leaves the file untouched)
    """
    sequence = store.load()
    removed = sequence.clear_normal()
    if removed:
        store.save(sequence)
    logger.info(f"Cleared {removed} normal bookmarks")
    return removed


def bookmark_names(store: RecordStore, include_bound: bool = True) -> List[str]:
    """Names in sequence order, for shell completion."""
    sequence = store.load()
    return [
        record.name for record in sequence
        if record.name and (include_bound or not record.is_bound)
    ]
