#!/usr/bin/env python3
"""Replace the attendee whitelist with the contents of a CSV export."""

import argparse
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from eventdesk.services import whitelist_service

DEFAULT_CSV_PATH = "../reformatted_attendees.csv"


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("csv_path", nargs="?", default=DEFAULT_CSV_PATH, help="attendee CSV file")
    parser.add_argument("--mongo-uri", default=None, help="overrides MONGODB_URI")
    parser.add_argument("--database", default=None, help="overrides MONGODB_DATABASE")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        count = whitelist_service.import_attendees(args.csv_path, args.mongo_uri, args.database)
    except Exception:
        logging.exception("Attendee import failed")
        return 1

    logging.info("Imported %d attendees successfully", count)
    return 0


if __name__ == "__main__":
    sys.exit(main())
