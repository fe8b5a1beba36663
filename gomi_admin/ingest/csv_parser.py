"""
CSV/TSV tokenizer - delimiter sniffing, fields split with the csv module
"""

import csv
import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

QUOTE = '"'


@dataclass
class ParsedTable:
    header: list[str]
    rows: list[dict[str, str]] = field(default_factory=list)
    skipped_lines: list[int] = field(default_factory=list)


def sniff_delimiter(first_line: str) -> str:
    """Tab if the first line contains one, comma otherwise."""
    return "\t" if "\t" in first_line else ","


def split_line(line: str, delimiter: str = ",") -> list[str]:
    """
    Split one line into trimmed fields.

    Double quotes wrap a field; "" inside a quoted field is a literal quote,
    and the delimiter is literal while a quote is open.
    """
    reader = csv.reader([line], delimiter=delimiter, quotechar=QUOTE, skipinitialspace=True)
    return [value.strip() for value in next(reader, [""])]


def parse_table(text: str) -> ParsedTable:
    """
    Parse delimited text into header-keyed rows.

    Blank lines are dropped first. Rows whose field count differs from the
    header are skipped with a warning; line numbers are 1-based over the
    remaining lines (header = line 1).
    """
    lines = [line.rstrip("\r") for line in text.split("\n")]
    lines = [line for line in lines if line.strip()]
    if not lines:
        return ParsedTable(header=[])

    delimiter = sniff_delimiter(lines[0])
    header = split_line(lines[0], delimiter)
    table = ParsedTable(header=header)

    for index, line in enumerate(lines[1:], start=2):
        values = split_line(line, delimiter)
        if len(values) != len(header):
            logger.warning(
                "Line %s: expected %s columns, got %s - row skipped",
                index,
                len(header),
                len(values),
            )
            table.skipped_lines.append(index)
            continue
        table.rows.append(dict(zip(header, values)))

    return table
