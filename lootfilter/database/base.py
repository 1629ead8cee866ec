"""
SQLite-backed persistence for parsed loot filters.

Responsibilities:
- Filter metadata (one row per registered filter file)
- Card rarities derived from each filter's divination section
- Schema initialization + versioning

Thread Safety:
- One connection shared by all repositories, guarded by a threading.RLock
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from lootfilter.database.repositories.filter_repository import FilterRepository
from lootfilter.database.schema import CREATE_SCHEMA_SQL, SCHEMA_VERSION

logger = logging.getLogger(__name__)


class FilterDatabase:
    """
    Owns the SQLite connection and hands out repositories.

    A FilterDatabase instance is associated with one database file.
    """

    def __init__(self, db_path: Optional[Path] = None):
        """
        Create a FilterDatabase instance.

        If db_path is None, use the default location:
        ~/.poe_filter_rarity/data.db
        """
        if db_path is None:
            db_path = Path.home() / ".poe_filter_rarity" / "data.db"

        self.db_path = db_path
        self._lock = threading.RLock()

        db_path.parent.mkdir(parents=True, exist_ok=True)

        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        # Needed for ON DELETE CASCADE on filter_card_rarities
        self.conn.execute("PRAGMA foreign_keys = ON")

        logger.info(f"Database initialized: {db_path}")

        self._initialize_schema()

        self.filters = FilterRepository(self.conn, self._lock)

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Provide a transaction scope with thread safety:

            with db.transaction() as conn:
                conn.execute(...)

        Commits on success, rolls back on error.
        """
        with self._lock:
            try:
                yield self.conn
                self.conn.commit()
            except Exception as exc:
                self.conn.rollback()
                logger.error(f"Transaction failed: {exc}")
                raise

    # ----------------------------------------------------------------------
    # Schema Management
    # ----------------------------------------------------------------------

    def _initialize_schema(self) -> None:
        """Create tables if they don't exist yet."""
        current_version = self._get_schema_version()

        if current_version == 0:
            logger.info("No schema detected, creating schema.")
            with self.transaction() as conn:
                conn.executescript(CREATE_SCHEMA_SQL)
                conn.execute(
                    "INSERT INTO schema_version (version) VALUES (?)",
                    (SCHEMA_VERSION,),
                )
        else:
            logger.debug(f"Schema v{current_version} is up-to-date.")

    def _get_schema_version(self) -> int:
        """Return the schema version stored in the DB."""
        try:
            row = self.conn.execute(
                "SELECT version FROM schema_version ORDER BY id DESC LIMIT 1"
            ).fetchone()
            return row[0] if row else 0
        except sqlite3.OperationalError:
            # No schema_version table yet
            return 0

    def get_schema_version(self) -> int:
        with self._lock:
            return self._get_schema_version()

    def close(self) -> None:
        """Close the underlying SQLite connection."""
        try:
            self.conn.close()
        except sqlite3.Error as exc:
            logger.error(f"Error closing database connection: {exc}")
