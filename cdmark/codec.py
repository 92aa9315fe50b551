"""
Line codec for the bookmark file.

Each record is one line ``kind|name|path``. Lines are written exactly the way
the original shell functions wrote them: fields are stored verbatim and
everything after the second delimiter is the path, so a path may contain
``|`` or ``\\`` as-is.

Only a field holding a newline cannot be stored verbatim. Such a record is
written with the kind tag suffixed by ``e`` (``0e|name|path``), and on that
line a backslash is written ``\\\\``, the delimiter ``\\|`` and a newline
``\\n``. Unmarked lines are never unescaped.
"""
import os
import re
from typing import List

from cdmark.constants import ESCAPE_CHAR, ESCAPED_MARKER, FIELD_COUNT, FIELD_DELIMITER
from cdmark.errors import CorruptRecordError, InvalidNameError
from cdmark.models import BookmarkKind, BookmarkRecord

_ESCAPES = {
    ESCAPE_CHAR: ESCAPE_CHAR,
    FIELD_DELIMITER: FIELD_DELIMITER,
    "n": "\n",
}

_INDEX_KEY = re.compile(r"[0-9]+")


def escape_field(value: str) -> str:
    """Escape a field value for writing."""
    return (value
            .replace(ESCAPE_CHAR, ESCAPE_CHAR * 2)
            .replace(FIELD_DELIMITER, ESCAPE_CHAR + FIELD_DELIMITER)
            .replace("\n", ESCAPE_CHAR + "n"))


def split_fields(line: str) -> List[str]:
    """
    Split a line on unescaped delimiters, unescaping each field.

    Raises:
        ValueError: On a dangling or unknown escape sequence
    """
    fields = []
    current = []
    chars = iter(line)
    for char in chars:
        if char == ESCAPE_CHAR:
            escaped = next(chars, None)
            if escaped is None:
                raise ValueError("dangling escape at end of line")
            if escaped not in _ESCAPES:
                raise ValueError(f"unknown escape sequence '\\{escaped}'")
            current.append(_ESCAPES[escaped])
        elif char == FIELD_DELIMITER:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def needs_escaping(record: BookmarkRecord) -> bool:
    """True when a record cannot be written as a verbatim line."""
    name = record.name or ""
    return "\n" in record.path or "\n" in name or FIELD_DELIMITER in name


def encode_record(record: BookmarkRecord) -> str:
    """Encode a record as a single line (without the trailing newline)."""
    name = record.name or ""
    if not needs_escaping(record):
        return FIELD_DELIMITER.join([record.kind.value, name, record.path])

    return FIELD_DELIMITER.join([
        record.kind.value + ESCAPED_MARKER,
        escape_field(name),
        escape_field(record.path),
    ])


def decode_record(line: str, lineno: int = 0) -> BookmarkRecord:
    """
    Decode one persisted line into a record.

    Args:
        line: Line text without its line terminator
        lineno: 1-based line number, used in error reports

    Raises:
        CorruptRecordError: If the line is malformed
    """
    kind_tag, sep, rest = line.partition(FIELD_DELIMITER)
    if not sep:
        raise CorruptRecordError(lineno, line, f"expected {FIELD_COUNT} fields, found 1")

    if kind_tag.endswith(ESCAPED_MARKER):
        kind_tag = kind_tag[:-len(ESCAPED_MARKER)]
        try:
            fields = split_fields(rest)
        except ValueError as e:
            raise CorruptRecordError(lineno, line, str(e))
        if len(fields) != FIELD_COUNT - 1:
            raise CorruptRecordError(
                lineno, line, f"expected {FIELD_COUNT} fields, found {len(fields) + 1}"
            )
        name, path = fields
    else:
        name, sep, path = rest.partition(FIELD_DELIMITER)
        if not sep:
            raise CorruptRecordError(lineno, line, f"expected {FIELD_COUNT} fields, found 2")

    try:
        kind = BookmarkKind(kind_tag)
    except ValueError:
        raise CorruptRecordError(lineno, line, f"unknown kind '{kind_tag}'")

    if not path:
        raise CorruptRecordError(lineno, line, "empty path")
    if not os.path.isabs(path):
        raise CorruptRecordError(lineno, line, f"path is not absolute: {path}")

    return BookmarkRecord(kind=kind, path=path, name=name or None)


def validate_name(name: str) -> str:
    """
    Check that a name can be stored and used as a lookup key.

    Returns:
        The name unchanged

    Raises:
        InvalidNameError: If the name is empty, contains a reserved
            character, or is all digits (it would read as an index)
    """
    if not name:
        raise InvalidNameError(name, "name must not be empty")
    for reserved in (FIELD_DELIMITER, ESCAPE_CHAR, "\n"):
        if reserved in name:
            raise InvalidNameError(name, f"name must not contain {reserved!r}")
    if looks_like_index(name):
        raise InvalidNameError(name, "name must not be a number (it would be read as an index)")
    return name


def looks_like_index(text: str) -> bool:
    """True when a lookup key is a positional index rather than a name."""
    return bool(_INDEX_KEY.fullmatch(text))
