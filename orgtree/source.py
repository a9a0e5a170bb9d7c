"""
Reading the timetable CSV export.

The export has no header row; columns are positional (see model.CSV_COLUMNS).

Rules:
- rows keep the order of the file
- a broken row (bad quoting, wrong column count, invalid UTF-8) is logged
  and skipped, the rest of the file is still read
- blank lines are ignored
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from orgtree.model import CSV_COLUMNS, Record

logger = logging.getLogger(__name__)


class RecordError(ValueError):
    """
    Raised when a CSV row cannot be turned into a Record.
    """


def parse_row(row: Sequence[str], line_num: int = 0) -> Record:
    """
    Convert one decoded CSV row into a Record.
    """
    if len(row) != len(CSV_COLUMNS):
        raise RecordError(f"line {line_num}: expected {len(CSV_COLUMNS)} columns, got {len(row)}")
    return Record(*row)


def decode_records(lines: Iterable[str]) -> List[Record]:
    """
    Decode CSV lines into records. Decode errors are logged, not raised.
    """
    records: List[Record] = []
    reader = csv.reader(lines, strict=True)

    while True:
        try:
            row = next(reader)
        except StopIteration:
            break
        except csv.Error as exc:
            logger.warning("Skipping line %d: %s", reader.line_num, exc)
            continue

        # csv.reader yields [] for blank lines
        if not row:
            continue

        try:
            records.append(parse_row(row, reader.line_num))
        except RecordError as exc:
            logger.warning("Skipping %s", exc)

    return records


def decode_lines(raw_lines: Iterable[bytes]) -> Iterator[str]:
    """
    Decode raw file lines as UTF-8. A line with invalid bytes is logged
    and skipped, the following lines are still decoded.
    """
    for line_num, raw in enumerate(raw_lines, start=1):
        # a byte order mark may only open the file
        encoding = "utf-8-sig" if line_num == 1 else "utf-8"
        try:
            line = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            logger.warning("Skipping line %d: %s", line_num, exc)
            continue
        yield line


def read_records(path: str | Path) -> List[Record]:
    """
    Read every record of the CSV file at path.

    Raises OSError if the file cannot be opened.
    """
    csv_path = Path(path)
    with csv_path.open("rb") as fh:
        records = decode_records(decode_lines(fh))

    logger.info("Read %d records from %s", len(records), csv_path)
    return records
