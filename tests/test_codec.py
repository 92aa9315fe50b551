"""
Tests for cdmark/codec.py

Covers the kind|name|path line format, verbatim lines as written by the
shell functions, escaped lines for paths holding a newline, and name
validation.
"""
import pytest

from cdmark.codec import (
    decode_record,
    encode_record,
    escape_field,
    looks_like_index,
    needs_escaping,
    split_fields,
    validate_name,
)
from cdmark.errors import CorruptRecordError, InvalidNameError
from cdmark.models import BookmarkKind, BookmarkRecord


class TestEncode:
    """Test encoding records to lines."""

    def test_encode_named_normal(self):
        record = BookmarkRecord(BookmarkKind.NORMAL, "/home/user/src", "src")
        assert encode_record(record) == "0|src|/home/user/src"

    def test_encode_anonymous_bound(self):
        record = BookmarkRecord(BookmarkKind.BOUND, "/etc")
        assert encode_record(record) == "1||/etc"

    def test_encode_keeps_delimiter_and_backslash_verbatim(self):
        record = BookmarkRecord(BookmarkKind.NORMAL, "/tmp/a|b\\c")
        assert not needs_escaping(record)
        assert encode_record(record) == "0||/tmp/a|b\\c"

    def test_encode_newline_uses_escaped_form(self):
        record = BookmarkRecord(BookmarkKind.BOUND, "/tmp/a|new\nline", "n")
        assert needs_escaping(record)
        assert encode_record(record) == "1e|n|/tmp/a\\|new\\nline"

    def test_escape_field_handles_backslash_and_newline(self):
        assert escape_field("a\\b\nc") == "a\\\\b\\nc"


class TestDecode:
    """Test decoding lines into records."""

    def test_decode_named_normal(self):
        record = decode_record("0|work|/home/user/work", 1)
        assert record.kind is BookmarkKind.NORMAL
        assert record.name == "work"
        assert record.path == "/home/user/work"

    def test_decode_empty_name_is_none(self):
        record = decode_record("1||/opt", 1)
        assert record.kind is BookmarkKind.BOUND
        assert record.name is None

    def test_decode_escaped_path(self):
        record = decode_record("0e|x|/tmp/we\\|ird\\\\dir\\n", 1)
        assert record.kind is BookmarkKind.NORMAL
        assert record.path == "/tmp/we|ird\\dir\n"

    def test_decode_legacy_unescaped_delimiter_in_path(self):
        """Lines from the shell version keep everything after the second | as path."""
        record = decode_record("0|x|/tmp/a|b|c", 1)
        assert record.path == "/tmp/a|b|c"

    @pytest.mark.parametrize("path", ["/work/a\\b", "/work/x\\nfoo", "/work/end\\"])
    def test_decode_unmarked_backslashes_verbatim(self, path):
        record = decode_record("0|old|" + path, 1)
        assert record.name == "old"
        assert record.path == path

    def test_escaped_paths_survive_encoding(self):
        for path in ["/tmp/a|b", "/tmp/back\\slash", "/tmp/new\nline", "/tmp/|\\|"]:
            record = BookmarkRecord(BookmarkKind.BOUND, path, "n")
            assert decode_record(encode_record(record)) == record

    @pytest.mark.parametrize("line,reason", [
        ("0|/only/two", "expected 3 fields"),
        ("garbage", "expected 3 fields"),
        ("2|x|/tmp", "unknown kind"),
        ("|x|/tmp", "unknown kind"),
        ("0|x|", "empty path"),
        ("0|x|relative/path", "not absolute"),
        ("0e|x|/tmp\\", "dangling escape"),
        ("0e|x|/tmp\\q", "unknown escape"),
        ("0e|x\\|y|/tmp|extra", "expected 3 fields, found 4"),
        ("1e|/only/two", "expected 3 fields"),
        ("e|x|/tmp", "unknown kind"),
    ])
    def test_malformed_lines_raise(self, line, reason):
        with pytest.raises(CorruptRecordError) as exc_info:
            decode_record(line, 7)
        assert reason in exc_info.value.reason
        assert exc_info.value.lineno == 7
        assert exc_info.value.line == line

    def test_split_fields_keeps_empty_fields(self):
        assert split_fields("0||/p") == ["0", "", "/p"]


class TestNames:
    """Test name validation and index detection."""

    def test_valid_name_returned(self):
        assert validate_name("project-x") == "project-x"

    @pytest.mark.parametrize("name", ["", "a|b", "a\\b", "a\nb", "42", "007"])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidNameError):
            validate_name(name)

    def test_mixed_alphanumeric_name_is_allowed(self):
        assert validate_name("v2") == "v2"

    def test_looks_like_index(self):
        assert looks_like_index("12")
        assert not looks_like_index("12a")
        assert not looks_like_index("-1")
        assert not looks_like_index("")
