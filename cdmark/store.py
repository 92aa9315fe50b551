"""
Flat-file record store for cdmark.

The store is the only component that touches the bookmark file. Every
operation loads the whole sequence, works on it in memory and hands it back
to ``save``, which replaces the file atomically.
"""
import logging
import os
import tempfile
from collections import Counter
from pathlib import Path
from typing import Optional, Union

from cdmark.codec import decode_record, encode_record, looks_like_index
from cdmark.config import get_config
from cdmark.errors import CorruptRecordError, NotFoundError
from cdmark.models import BookmarkSequence

logger = logging.getLogger(__name__)

LookupKey = Union[int, str]


def parse_key(text: LookupKey) -> LookupKey:
    """
    Interpret a command-line key.

    A key made only of digits is a 1-based index, anything else is a name.
    """
    if isinstance(text, int):
        return text
    if looks_like_index(text):
        return int(text)
    return text


class RecordStore:
    """
    Bookmark file access.

    Construct one per invocation and pass it to the operations in
    ``cdmark.operations``; nothing is cached between loads.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None, strict: Optional[bool] = None):
        """
        Initialize the store.

        Args:
            path: Bookmark file path. Uses config default if not provided.
            strict: Raise on the first corrupt line instead of skipping it.
                Uses config default if not provided.

        Examples:
            RecordStore()  # Uses config default (~/.dir_bookmarks)
            RecordStore("/tmp/bookmarks")  # Explicit file
        """
        config = get_config()
        if path is None:
            self.path = config.get_bookmark_path()
        else:
            self.path = Path(path).expanduser()
        self.strict = config.strict_load if strict is None else strict

    def __repr__(self) -> str:
        return f"RecordStore({str(self.path)!r})"

    def exists(self) -> bool:
        return self.path.exists()

    def load(self) -> BookmarkSequence:
        """
        Read the persisted sequence.

        A missing file is an empty sequence. Lines are decoded as filesystem
        paths, so bytes that are not valid UTF-8 survive. Malformed lines are
        skipped and collected on ``sequence.skipped`` (or raised when the
        store is strict); ``save`` writes them back unchanged. A sequence
        whose normal records do not all precede the bound ones is re-ordered,
        keeping the relative order within each kind.

        Raises:
            CorruptRecordError: On a malformed line when ``strict`` is set
        """
        if not self.path.exists():
            logger.debug(f"No bookmark file at {self.path}. Starting with an empty sequence.")
            return BookmarkSequence()

        with open(self.path, "rb") as f:
            data = f.read()

        records = []
        skipped = []
        for lineno, raw in enumerate(data.split(b"\n"), start=1):
            line = os.fsdecode(raw.rstrip(b"\r"))
            if not line.strip():
                continue
            try:
                records.append(decode_record(line, lineno))
            except CorruptRecordError as e:
                if self.strict:
                    raise
                logger.warning(f"{self.path}: skipping line {lineno}: {e.reason}")
                skipped.append(e)

        sequence = BookmarkSequence(records, skipped)

        if not sequence.is_ordered():
            logger.warning(f"{self.path}: normal bookmarks found after bound ones; re-ordering")
            sequence.records = sequence.normal() + sequence.bound()

        duplicates = [name for name, count in Counter(sequence.names()).items() if count > 1]
        for name in duplicates:
            logger.warning(f"{self.path}: name '{name}' is used by more than one bookmark")

        logger.debug(f"Loaded {len(sequence)} bookmarks from {self.path}.")
        return sequence

    def save(self, sequence: BookmarkSequence) -> None:
        """
        Replace the bookmark file with the given sequence.

        The new content is written to a temporary file next to the target,
        synced, then renamed over it, so the old file stays intact if
        anything fails before the rename. Lines skipped when the sequence was
        loaded are kept verbatim after the records.
        """
        target = Path(os.path.realpath(self.path))
        target.parent.mkdir(parents=True, exist_ok=True)
        lines = [encode_record(record) for record in sequence]
        if sequence.skipped:
            logger.info(f"{self.path}: keeping {len(sequence.skipped)} unreadable line(s) as-is")
            lines.extend(error.line for error in sequence.skipped)
        data = os.fsencode("".join(line + "\n" for line in lines))

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            if target.exists():
                os.chmod(tmp_name, target.stat().st_mode & 0o777)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

        logger.debug(f"Saved {len(sequence)} bookmarks to {target}.")

    @staticmethod
    def locate(sequence: BookmarkSequence, key: LookupKey) -> int:
        """
        Resolve a lookup key against a loaded sequence.

        Args:
            sequence: The sequence the key refers to
            key: 1-based index, or a name (digit strings count as indexes)

        Returns:
            The 1-based index of the matching record

        Raises:
            NotFoundError: With reason INDEX_OUT_OF_RANGE or UNKNOWN_NAME
        """
        key = parse_key(key)
        if isinstance(key, int):
            if 1 <= key <= len(sequence):
                return key
            raise NotFoundError(key, NotFoundError.INDEX_OUT_OF_RANGE, len(sequence))

        for position, record in enumerate(sequence, start=1):
            if record.name == key:
                return position
        raise NotFoundError(key, NotFoundError.UNKNOWN_NAME, len(sequence))
