"""
Tests for stash.tabular CSV codec.
"""
import pytest

from stash.exceptions import FormatError
from stash.tabular import collect_header, serialize, deserialize


class TestSerialize:
    """Tests for record serialization."""

    def test_header_and_rows(self):
        """Header line then one line per record."""
        document = serialize([{"a": "1", "b": "x"}, {"a": "2", "b": "y"}])
        assert document == "a,b\n1,x\n2,y\n"

    def test_union_header_first_seen(self):
        """Header is the first-seen union of field names."""
        records = [{"a": 1}, {"b": 2, "a": 3}, {"c": 4}]
        assert collect_header(records) == ["a", "b", "c"]
        assert serialize(records) == "a,b,c\n1,,\n3,2,\n,,4\n"

    def test_explicit_fieldnames(self):
        """Explicit field order wins and extra keys are dropped."""
        document = serialize([{"b": 2, "a": 1, "z": 9}], fieldnames=["a", "b"])
        assert document == "a,b\n1,2\n"

    def test_none_is_empty_cell(self):
        """None values render as empty cells."""
        assert serialize([{"a": None, "b": 0}]) == "a,b\n,0\n"

    def test_quoting(self):
        """Delimiters, quotes and newlines are quoted."""
        document = serialize([{"a": 'say "hi", ok', "b": "two\nlines"}])
        assert document == 'a,b\n"say ""hi"", ok","two\nlines"\n'


class TestDeserialize:
    """Tests for document parsing."""

    def test_records_keyed_by_header(self):
        """Rows become mappings of strings."""
        assert deserialize("a,b\n1,x\n") == [{"a": "1", "b": "x"}]

    def test_header_only(self):
        """Header without data gives no records."""
        assert deserialize("a,b\n") == []

    @pytest.mark.parametrize("document", ["", "   ", "\n\n", None])
    def test_empty_document(self, document):
        """Empty documents are a format error."""
        with pytest.raises(FormatError):
            deserialize(document)

    def test_field_count_mismatch(self):
        """Short row reports its line."""
        with pytest.raises(FormatError) as exc_info:
            deserialize("a,b\n1,2\n3\n")
        assert exc_info.value.line == 3
        assert exc_info.value.details == "expected 2 fields, got 1"

    def test_too_many_fields(self):
        """Long row is a format error too."""
        with pytest.raises(FormatError):
            deserialize("a,b\n1,2,3\n")

    def test_skips_blank_lines(self):
        """Blank lines between rows are ignored."""
        assert deserialize("a,b\n\n1,2\n   \n3,4\n") == [
            {"a": "1", "b": "2"},
            {"a": "3", "b": "4"},
        ]

    def test_strips_bom(self):
        """Leading byte-order mark is not part of the first field name."""
        assert deserialize("\ufeffa,b\n1,2\n") == [{"a": "1", "b": "2"}]

    def test_crlf(self):
        """Windows line endings parse."""
        assert deserialize("a,b\r\n1,2\r\n") == [{"a": "1", "b": "2"}]

    def test_quoted_values(self):
        """Quoted delimiters and newlines survive."""
        records = deserialize('a,b\n"x, y","one\ntwo"\n')
        assert records == [{"a": "x, y", "b": "one\ntwo"}]

    def test_round_trip(self):
        """deserialize(serialize(R)) == R for string records."""
        records = [
            {"name": "Box, large", "note": 'has "quotes"'},
            {"name": "", "note": "multi\nline"},
        ]
        assert deserialize(serialize(records)) == records
