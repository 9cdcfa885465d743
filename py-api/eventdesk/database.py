"""MongoDB database configuration and connection management."""

from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from pymongo import MongoClient
from pymongo.database import Database


DEFAULT_MONGO_URI = "mongodb://localhost:27017/"
DEFAULT_DATABASE_NAME = "eventdesk"

# Global MongoDB client instance shared by request handlers
_client: Optional[MongoClient] = None
_database: Optional[Database] = None


def _mongo_uri() -> str:
    return os.getenv("MONGODB_URI", DEFAULT_MONGO_URI)


def _database_name() -> str:
    return os.getenv("MONGODB_DATABASE", DEFAULT_DATABASE_NAME)


def get_mongo_client() -> MongoClient:
    """Get or create MongoDB client instance."""
    global _client
    if _client is None:
        _client = MongoClient(_mongo_uri())
    return _client


def get_database() -> Database:
    """Get the MongoDB database instance."""
    global _database
    if _database is None:
        client = get_mongo_client()
        _database = client[_database_name()]
    return _database


@contextmanager
def connect(mongo_uri: Optional[str] = None, db_name: Optional[str] = None) -> Iterator[Database]:
    """
    Open a dedicated client for a one-shot job and always close it.

    Batch scripts use this instead of the shared request client so the
    connection is released on every exit path.

    Args:
        mongo_uri: Connection string, defaults to ``MONGODB_URI``
        db_name: Database name, defaults to ``MONGODB_DATABASE``

    Yields:
        The selected database
    """
    client = MongoClient(mongo_uri or _mongo_uri())
    try:
        yield client[db_name or _database_name()]
    finally:
        client.close()
