"""
Record readers for linefinder.

Readers turn an open input stream into records: plain lines for ``.txt``
files, lists of fields for ``.csv`` files. Files with any other extension
produce no records at all.
"""

import csv
import logging
from typing import Iterator, List, TextIO, Union

from ..exceptions import FormatError
from ..models.config import CSVSettings, RecordFormat


logger = logging.getLogger(__name__)

Record = Union[str, List[str]]

# Text lines end only at "\n"; the csv module handles its own terminators.
NEWLINE_MODES = {
    RecordFormat.TEXT: "\n",
    RecordFormat.CSV: "",
    RecordFormat.UNSUPPORTED: None,
}


class _LineTap:
    """Iterates a stream and keeps the raw lines handed to the csv reader."""

    def __init__(self, stream: TextIO):
        self._stream = stream
        self._consumed: List[str] = []

    def __iter__(self) -> "_LineTap":
        return self

    def __next__(self) -> str:
        line = next(self._stream)
        self._consumed.append(line)
        return line

    def take(self) -> str:
        raw = "".join(self._consumed)
        self._consumed.clear()
        return raw


def _has_bare_quote(raw: str, delimiter: str, quotechar: str) -> bool:
    """
    Check raw record text for a quote character inside an unquoted field.

    The csv module accepts ``a"b`` as a literal field; a quote is only
    allowed at the start of a field, doubled inside a quoted field, or as
    the closing quote.
    """
    at_field_start = True
    in_quotes = False
    i = 0
    while i < len(raw):
        ch = raw[i]
        if in_quotes:
            if ch == quotechar:
                if raw[i + 1:i + 2] == quotechar:
                    i += 1
                else:
                    in_quotes = False
        elif ch == quotechar:
            if not at_field_start:
                return True
            in_quotes = True
            at_field_start = False
        elif ch in (delimiter, "\r", "\n"):
            at_field_start = True
        else:
            at_field_start = False
        i += 1
    return False


def iter_text_lines(stream: TextIO) -> Iterator[str]:
    """
    Yield newline-delimited lines without their line terminators.

    Lines have no length limit. A trailing newline at end of file does not
    produce an extra empty line.

    Args:
        stream: Text stream opened for reading

    Yields:
        Each line with ``\\n`` or ``\\r\\n`` stripped
    """
    for line in stream:
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        yield line


def iter_csv_records(stream: TextIO, settings: CSVSettings) -> Iterator[List[str]]:
    """
    Yield parsed delimited records.

    Quoted fields and embedded delimiters are honored and blank lines are
    skipped. Parsing is strict: malformed quoting, including a quote inside an
    unquoted field, raises FormatError, and so
    does a record whose field count differs from the first record when
    ``strict_field_count`` is set.

    Args:
        stream: Text stream opened for reading with ``newline=''``
        settings: Delimited-record settings

    Yields:
        Each record as a list of fields

    Raises:
        FormatError: If a record cannot be parsed
    """
    tap = _LineTap(stream)
    reader = csv.reader(
        tap,
        delimiter=settings.delimiter,
        quotechar=settings.quotechar,
        strict=True,
    )
    expected_fields = None

    while True:
        try:
            record = next(reader)
        except StopIteration:
            return
        except csv.Error as e:
            raise FormatError(
                f"error in reading csv file at line {reader.line_num}: {e}",
                line_number=reader.line_num,
                original_error=e,
            ) from e

        if _has_bare_quote(tap.take(), settings.delimiter, settings.quotechar):
            raise FormatError(
                f"error in reading csv file at line {reader.line_num}: "
                f"bare {settings.quotechar} in non-quoted field",
                line_number=reader.line_num,
            )

        if not record:
            continue

        if settings.strict_field_count:
            if expected_fields is None:
                expected_fields = len(record)
            elif len(record) != expected_fields:
                raise FormatError(
                    f"error in reading csv file at line {reader.line_num}: "
                    f"expected {expected_fields} fields, got {len(record)}",
                    line_number=reader.line_num,
                )

        yield record


def iter_records(stream: TextIO, record_format: RecordFormat, csv_settings: CSVSettings) -> Iterator[Record]:
    """
    Yield the records of a stream according to its record format.

    Args:
        stream: Text stream opened for reading
        record_format: Record shape detected from the file extension
        csv_settings: Delimited-record settings

    Yields:
        Lines (text) or field lists (csv); nothing for unsupported formats
    """
    if record_format is RecordFormat.TEXT:
        yield from iter_text_lines(stream)
    elif record_format is RecordFormat.CSV:
        yield from iter_csv_records(stream, csv_settings)
    else:
        logger.debug("No reader for this file extension, producing no records")
