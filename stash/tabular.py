"""
Delimited-text codec for flat records.

Knows nothing about collections or items: it turns a sequence of
field->value mappings into a CSV document and back. Values are not typed in
the document, so everything read back is a string.
"""
import csv
import io
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from stash.exceptions import FormatError

DELIMITER = ","
_BOM = "\ufeff"


def collect_header(records: Iterable[Mapping[str, Any]]) -> List[str]:
    """Union of field names across records, in first-seen order."""
    header: Dict[str, None] = {}
    for record in records:
        for name in record:
            header.setdefault(name, None)
    return list(header)


def serialize(
    records: Sequence[Mapping[str, Any]],
    fieldnames: Sequence[str] = None,
) -> str:
    """
    Serialize records into a CSV document.

    Args:
        records: Rows of scalar values keyed by field name
        fieldnames: Explicit column order; defaults to the first-seen union

    Returns:
        Header line plus one line per record. Missing fields and None
        values become empty cells.
    """
    header = list(fieldnames) if fieldnames is not None else collect_header(records)
    output = io.StringIO()
    writer = csv.DictWriter(
        output,
        fieldnames=header,
        delimiter=DELIMITER,
        restval="",
        extrasaction="ignore",
        lineterminator="\n",
    )
    writer.writeheader()
    for record in records:
        writer.writerow(record)
    return output.getvalue()


def deserialize(document: str) -> List[Dict[str, str]]:
    """
    Parse a CSV document into records keyed by the header row.

    Blank lines are skipped and a leading BOM is ignored.

    Raises:
        FormatError: If the document is empty, or a data line has a
            different number of fields than the header.
    """
    if document is None or not document.strip():
        raise FormatError("Document is empty")

    if document.startswith(_BOM):
        document = document[len(_BOM):]

    reader = csv.reader(io.StringIO(document, newline=""), delimiter=DELIMITER)
    header: List[str] = []
    records: List[Dict[str, str]] = []
    try:
        for row in reader:
            if not row:
                continue
            # Whitespace-only line in a multi-column document
            if len(row) == 1 and not row[0].strip() and len(header) != 1:
                continue
            if not header:
                header = [name.strip() for name in row]
                continue
            if len(row) != len(header):
                raise FormatError(
                    "Field count does not match header",
                    f"expected {len(header)} fields, got {len(row)}",
                    line=reader.line_num,
                )
            records.append(dict(zip(header, row)))
    except csv.Error as e:
        raise FormatError("Malformed CSV", str(e), line=reader.line_num) from e

    if not header:
        raise FormatError("Document is empty")
    return records
