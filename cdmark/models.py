"""
Data model for cdmark.

A bookmark file holds an ordered sequence of records. Two invariants hold for
every sequence the store writes:

- ordering: every normal record precedes every bound record
- naming: a non-empty name appears on at most one record

Positions are 1-based and only meaningful for the sequence they were read
from; any mutation may shift them.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from cdmark.constants import KIND_BOUND_TAG, KIND_NORMAL_TAG


class BookmarkKind(Enum):
    """Class of a bookmark; the value is the tag written to disk."""

    NORMAL = KIND_NORMAL_TAG
    BOUND = KIND_BOUND_TAG

    @property
    def is_bound(self) -> bool:
        return self is BookmarkKind.BOUND

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass
class BookmarkRecord:
    """
    A single directory bookmark.

    Attributes:
        kind: Normal (frequent use) or bound (long-lived)
        path: Absolute, symlink-resolved directory path
        name: Optional unique name; None when the record is anonymous

    Only ``name`` changes after creation.
    """

    kind: BookmarkKind
    path: str
    name: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            self.name = None

    @property
    def is_bound(self) -> bool:
        return self.kind.is_bound

    def describe(self) -> str:
        """Short human-readable description used in messages."""
        if self.name:
            return f"{self.path} (name: {self.name})"
        return self.path


class BookmarkSequence:
    """
    Ordered bookmark records as loaded from (or about to be saved to) a store.

    ``skipped`` collects the CorruptRecordError of every line the store could
    not decode while loading. Callers report them and the store writes their
    raw text back on save.
    """

    def __init__(self, records: Optional[List[BookmarkRecord]] = None,
                 skipped: Optional[list] = None):
        self.records: List[BookmarkRecord] = list(records or [])
        self.skipped = list(skipped or [])

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[BookmarkRecord]:
        return iter(self.records)

    def __eq__(self, other) -> bool:
        if not isinstance(other, BookmarkSequence):
            return NotImplemented
        return self.records == other.records

    def __repr__(self) -> str:
        return f"BookmarkSequence({self.records!r})"

    def at(self, index: int) -> BookmarkRecord:
        """Return the record at a 1-based index."""
        if not 1 <= index <= len(self.records):
            raise IndexError(index)
        return self.records[index - 1]

    def normal(self) -> List[BookmarkRecord]:
        return [r for r in self.records if not r.is_bound]

    def bound(self) -> List[BookmarkRecord]:
        return [r for r in self.records if r.is_bound]

    def names(self) -> List[str]:
        return [r.name for r in self.records if r.name]

    def has_name(self, name: str) -> bool:
        return any(r.name == name for r in self.records)

    def is_ordered(self) -> bool:
        """True when no normal record follows a bound one."""
        seen_bound = False
        for record in self.records:
            if record.is_bound:
                seen_bound = True
            elif seen_bound:
                return False
        return True

    def insert(self, record: BookmarkRecord) -> int:
        """
        Place a record respecting the ordering invariant.

        Normal records go immediately before the first bound record, bound
        records go at the end.

        Returns:
            The 1-based index of the inserted record
        """
        if record.is_bound:
            self.records.append(record)
            return len(self.records)

        for position, existing in enumerate(self.records):
            if existing.is_bound:
                self.records.insert(position, record)
                return position + 1

        self.records.append(record)
        return len(self.records)

    def remove_at(self, index: int) -> BookmarkRecord:
        """Remove and return the record at a 1-based index."""
        if not 1 <= index <= len(self.records):
            raise IndexError(index)
        return self.records.pop(index - 1)

    def clear_normal(self) -> int:
        """Drop every normal record, keeping bound ones in order."""
        before = len(self.records)
        self.records = self.bound()
        return before - len(self.records)


@dataclass
class ListEntry:
    """One row of a listing."""

    index: int
    record: BookmarkRecord
    display_path: str
    current: bool = False


@dataclass
class Listing:
    """
    Result of listing bookmarks.

    ``entries`` are already numbered with their sequence index. When bound
    bookmarks were excluded, ``hidden_bound`` tells how many exist.
    """

    entries: List[ListEntry] = field(default_factory=list)
    normal_count: int = 0
    bound_count: int = 0
    include_bound: bool = False
    relative: bool = False
    skipped: list = field(default_factory=list)

    @property
    def hidden_bound(self) -> int:
        return 0 if self.include_bound else self.bound_count

    @property
    def is_empty(self) -> bool:
        return not self.entries
