"""Tolerant CSV row normalization shared by the whitelist and job imports."""

from __future__ import annotations

import csv
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, TextIO, Tuple

from eventdesk.errors import CsvImportError

_HEADER_NOISE = re.compile(r"[\s_\-]+")

# Called with the 1-based line number and the raw row of each dropped record.
SkipCallback = Callable[[int, Dict[str, str]], None]


@dataclass(frozen=True)
class CsvField:
    """A logical column and the header spellings that map to it."""

    name: str
    aliases: Tuple[str, ...]
    lower: bool = False
    default: Optional[str] = None

    def header_keys(self) -> List[str]:
        return [header_key(alias) for alias in (self.name, *self.aliases)]


def header_key(header: str) -> str:
    """Collapse a header into its comparison key.

    ``"Booking ID"``, ``"bookingId"`` and ``"booking_id"`` all become
    ``"bookingid"``.
    """
    return _HEADER_NOISE.sub("", (header or "").lstrip("\ufeff").strip()).lower()


def _clean(value: Optional[str], field: CsvField) -> Optional[str]:
    if value is None:
        return field.default
    value = value.strip()
    if not value:
        return field.default
    return value.lower() if field.lower else value


def normalize_row(row: Mapping[str, Optional[str]], fields: Sequence[CsvField]) -> Dict[str, Optional[str]]:
    """Map one raw row onto the canonical field names."""
    keyed: Dict[str, Optional[str]] = {}
    for header, value in row.items():
        if header is None:
            # Extra cells beyond the header row.
            continue
        key = header_key(header)
        if keyed.get(key) in (None, ""):
            keyed[key] = value

    record: Dict[str, Optional[str]] = {}
    for field in fields:
        raw = None
        for key in field.header_keys():
            if keyed.get(key) not in (None, ""):
                raw = keyed[key]
                break
        record[field.name] = _clean(raw, field)
    return record


def normalize_rows(
    stream: Iterable[str],
    fields: Sequence[CsvField],
    required: Sequence[str] = (),
    on_skip: Optional[SkipCallback] = None,
    strict: bool = False,
) -> Iterator[Dict[str, Optional[str]]]:
    """
    Lazily read a CSV stream with a header row into normalized records.

    Rows missing any of the ``required`` fields are dropped and reported
    to ``on_skip`` when given. The stream is consumed once.

    Args:
        stream: Text stream or iterable of CSV lines
        fields: Logical columns to extract
        required: Names of fields that must be present and non-blank
        on_skip: Optional callback for dropped rows
        strict: Reject unbalanced quotes instead of reading through them

    Yields:
        Dicts keyed by field name

    Raises:
        CsvImportError: If the CSV is malformed
    """
    reader = csv.DictReader(stream, strict=strict)
    try:
        for row in reader:
            record = normalize_row(row, fields)
            if any(not record.get(name) for name in required):
                if on_skip is not None:
                    on_skip(reader.line_num, dict(row))
                continue
            yield record
    except csv.Error as exc:
        raise CsvImportError(f"Malformed CSV at line {reader.line_num}: {exc}") from exc


def open_csv(path: str) -> TextIO:
    """Open a CSV file for :func:`normalize_rows`."""
    return open(path, newline="", encoding="utf-8-sig")
