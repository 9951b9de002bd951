"""Utility helpers for connecting to MongoDB and bootstrapping indexes."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from jewelry_catalog.config import Config

logger = logging.getLogger(__name__)


class DatabaseConfigError(RuntimeError):
    """Raised when the database cannot be reached because it is not configured."""


# (collection, field, unique)
INDEXES = (
    ("products", "category", False),
    ("products", "featured", False),
    ("products", "displayOrder", False),
    ("categories", "slug", True),
    ("categories", "displayOrder", False),
    ("carousel_images", "displayOrder", False),
    ("carousel_images", "active", False),
)


class MongoManager:
    """Lazily creates one MongoDB client per process and reuses it."""

    def __init__(
        self,
        uri: Optional[str] = None,
        database_name: Optional[str] = None,
        client: Optional[MongoClient] = None,
    ) -> None:
        self._uri = uri if uri is not None else Config.MONGODB_URI
        self._database_name = database_name or Config.get_database_name()
        self._client = client
        self._db: Optional[Database] = None
        self._indexes_created = False
        self._lock = threading.Lock()

    @property
    def database_name(self) -> str:
        return self._database_name

    def get_database(self) -> Database:
        """Return the catalog database, connecting on first use."""

        if self._db is not None:
            return self._db

        with self._lock:
            if self._db is not None:
                return self._db

            if self._client is None:
                if not self._uri:
                    raise DatabaseConfigError("MONGODB_URI environment variable is not set")
                logger.info("Connecting to MongoDB database '%s'", self._database_name)
                self._client = MongoClient(self._uri)

            db = self._client[self._database_name]
            self.ensure_indexes(db)
            self._db = db
            logger.info("MongoDB connected successfully")
            return db

    def ensure_indexes(self, db: Database) -> bool:
        """Create catalog indexes once per process. Failures are logged only."""

        if self._indexes_created:
            return False

        try:
            for collection, field, unique in INDEXES:
                db[collection].create_index([(field, ASCENDING)], unique=unique)
        except PyMongoError as e:
            logger.error(f"Error creating indexes: {e}")
            return False

        self._indexes_created = True
        logger.info("Catalog indexes ensured")
        return True

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
        self._client = None
        self._db = None
