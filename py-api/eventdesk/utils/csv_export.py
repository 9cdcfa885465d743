"""Plain-text CSV rendering for the admin export endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence


@dataclass(frozen=True)
class ExportColumn:
    """One exported column.

    ``quoted`` columns are wrapped in double quotes so embedded commas stay
    literal. Embedded quotes are written as-is.
    """

    header: str
    field: str
    quoted: bool = False
    render: Optional[Callable[[Any], str]] = None


def format_date(value: Any) -> str:
    """Render a stored datetime as ``M/D/YYYY``."""
    if not isinstance(value, datetime):
        return ""
    return f"{value.month}/{value.day}/{value.year}"


def _lookup(document: Mapping[str, Any], field: str) -> Any:
    # "a|b" falls back to b when a is empty.
    for name in field.split("|"):
        value = document.get(name)
        if value not in (None, ""):
            return value
    return None


def format_cell(document: Mapping[str, Any], column: ExportColumn) -> str:
    value = _lookup(document, column.field)
    if column.render is not None:
        text = column.render(value)
    else:
        text = "" if value is None else str(value)
    return f'"{text}"' if column.quoted else text


def format_csv(documents: Iterable[Mapping[str, Any]], columns: Sequence[ExportColumn]) -> str:
    """Return the header line followed by one line per document."""
    header = ",".join(column.header for column in columns) + "\n"
    rows = [",".join(format_cell(document, column) for column in columns) for document in documents]
    return header + "\n".join(rows)


def export_timestamp(now: Optional[datetime] = None) -> str:
    """UTC timestamp safe for filenames, e.g. ``2025-01-05T10-20-30``."""
    now = now or datetime.utcnow()
    return now.strftime("%Y-%m-%dT%H-%M-%S")


def export_filename(prefix: str, now: Optional[datetime] = None) -> str:
    return f"{prefix}-{export_timestamp(now)}.csv"


APPLICATION_COLUMNS = (
    ExportColumn("ID", "_id"),
    ExportColumn("Job Title", "jobTitle", quoted=True),
    ExportColumn("Applicant Email", "userEmail"),
    ExportColumn("Name", "name", quoted=True),
    ExportColumn("Phone", "phone"),
    ExportColumn("Applied Date", "createdAt", render=format_date),
    ExportColumn("Resume File", "resumeFile"),
)

RESUME_COLUMNS = (
    ExportColumn("ID", "_id"),
    ExportColumn("User Email", "userEmail"),
    ExportColumn("Name", "name", quoted=True),
    ExportColumn("Phone", "phone"),
    ExportColumn("Experience", "experience", quoted=True),
    ExportColumn("Skills", "skills", quoted=True),
    ExportColumn("Upload Date", "createdAt", render=format_date),
    ExportColumn("Original Filename", "originalName|filename", quoted=True),
    ExportColumn("Download Link", "storageUrl"),
)

JOB_COLUMNS = (
    ExportColumn("ID", "_id"),
    ExportColumn("Title", "title", quoted=True),
    ExportColumn("Company", "company", quoted=True),
    ExportColumn("Location", "location", quoted=True),
    ExportColumn("Experience", "experience", quoted=True),
    ExportColumn("Skills", "skills", quoted=True),
    ExportColumn("Created Date", "createdAt", render=format_date),
)
