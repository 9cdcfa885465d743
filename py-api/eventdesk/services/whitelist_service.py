"""Service for the attendee whitelist stored in MongoDB."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from pymongo.database import Database

from eventdesk import database
from eventdesk.utils.csv_rows import CsvField, normalize_rows, open_csv

_LOGGER = logging.getLogger(__name__)

COLLECTION = "whitelist"

WHITELIST_FIELDS = (
    CsvField("email", ("Email", "E-mail"), lower=True),
    CsvField("name", ("Name",)),
    CsvField("bookingId", ("Booking ID", "booking_id")),
)


def _log_skipped(line_num: int, row: Dict[str, str]) -> None:
    _LOGGER.warning("Skipping row %d (missing bookingId): %s", line_num, row)


def read_attendees(stream: Iterable[str]):
    """Yield normalized whitelist records, dropping rows without a booking id."""
    return normalize_rows(stream, WHITELIST_FIELDS, required=("bookingId",), on_skip=_log_skipped)


def sync_whitelist(db: Database, stream: Iterable[str]) -> int:
    """
    Replace the whole whitelist with the attendees in a CSV stream.

    Existing entries are deleted before the file is read. If reading or
    inserting fails afterwards the whitelist stays empty until the next
    successful run.

    Args:
        db: Database holding the whitelist collection
        stream: CSV text with a header row

    Returns:
        Number of entries inserted
    """
    collection = db[COLLECTION]

    deleted = collection.delete_many({}).deleted_count
    _LOGGER.info("Cleared %d existing attendees", deleted)

    attendees: List[Dict[str, Optional[str]]] = list(read_attendees(stream))

    if attendees:
        collection.insert_many(attendees)
    _LOGGER.info("Imported %d attendees", len(attendees))
    return len(attendees)


def import_attendees(csv_path: str, mongo_uri: Optional[str] = None, db_name: Optional[str] = None) -> int:
    """Run a full whitelist refresh from a CSV file on a dedicated connection."""
    try:
        with database.connect(mongo_uri, db_name) as db:
            _LOGGER.info("Connected to MongoDB")
            with open_csv(csv_path) as stream:
                return sync_whitelist(db, stream)
    finally:
        _LOGGER.info("Connection closed")


def create_indexes(db: Optional[Database] = None) -> None:
    """Index the fields used by attendee login."""
    db = db if db is not None else database.get_database()
    db[COLLECTION].create_index([("email", 1), ("bookingId", 1)])


def find_entry(email: str, booking_id: str) -> Optional[Dict[str, Any]]:
    """
    Look up a whitelist entry by email and booking id.

    Both values are normalized the same way the import normalizes them.
    """
    db = database.get_database()
    entry = db[COLLECTION].find_one({
        "email": (email or "").strip().lower(),
        "bookingId": (booking_id or "").strip(),
    })
    if entry:
        entry["_id"] = str(entry["_id"])
    return entry
