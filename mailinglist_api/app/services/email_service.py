"""
Store for mailing list subscribers.

``EmailStore`` owns the ``emails`` table: it creates the table on
startup and runs the five subscriber operations (create, get, update,
soft delete and paginated batch listing) as parameterized statements.

Removing a subscriber never deletes the row.  ``delete`` sets the
``opt_out`` flag instead, which keeps ids stable and lets a later
``update`` bring the address back.  ``get`` still returns opted-out
rows; ``get_batch`` never does.

Any ``sqlite3.Error`` is logged and re-raised as ``StoreError`` with
the driver's message, so callers only have one failure kind to handle.
"""

from __future__ import annotations

import logging
import math
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from mailinglist_api.app.core.db import get_connection
from mailinglist_api.app.core.errors import InvalidArgument, StoreError
from mailinglist_api.app.schemas.email import EmailEntry, EmailUpdate

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value.
MAX_SQLITE_INTEGER = 2**63 - 1

SCHEMA = """
CREATE TABLE emails (
    id           INTEGER PRIMARY KEY,
    email        TEXT UNIQUE,
    confirmed_at INTEGER,
    opt_out      INTEGER
)
"""


def to_epoch_seconds(value: Optional[datetime]) -> int:
    """Convert a confirmation time to whole epoch seconds.

    ``None`` means "never confirmed" and maps to ``0``.  Naive
    datetimes are taken to be UTC.
    """
    if value is None:
        return 0
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return math.floor(value.timestamp())


class EmailStore:
    """Subscriber table access bound to one SQLite database file.

    A connection is opened per operation, so a single store can be
    shared by every request handler.
    """

    def __init__(self, database_path: str) -> None:
        self.database_path = database_path

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        try:
            conn = get_connection(self.database_path)
        except sqlite3.Error as exc:
            logger.error("Could not open database %s: %s", self.database_path, exc)
            raise StoreError(str(exc)) from exc
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            logger.error("Statement failed: %s", exc)
            raise StoreError(str(exc)) from exc
        finally:
            conn.close()

    def ensure_schema(self) -> None:
        """Create the ``emails`` table.

        An existing table is not an error.  Any other failure raises
        ``StoreError``; the application treats that as fatal at startup.
        """
        with self._cursor() as cursor:
            try:
                cursor.execute(SCHEMA)
            except sqlite3.OperationalError as exc:
                if "already exists" not in str(exc):
                    raise
                logger.debug("Table emails already exists")
            else:
                logger.info("Created table emails in %s", self.database_path)

    def create(self, email: str) -> None:
        """Insert a new, unconfirmed subscriber.

        Raises ``StoreError`` if the address is already present.
        """
        with self._cursor() as cursor:
            cursor.execute(
                "INSERT INTO emails (email, confirmed_at, opt_out) VALUES (?, 0, 0)",
                (email,),
            )
        logger.info("Created subscriber %s", email)

    def get(self, email: str) -> Optional[EmailEntry]:
        """Return the subscriber with this address, or ``None``."""
        with self._cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, confirmed_at, opt_out FROM emails WHERE email = ?",
                (email,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_entry(row)

    def update(self, entry: EmailUpdate) -> None:
        """Insert or fully replace the subscriber keyed by ``entry.email``."""
        confirmed_at = to_epoch_seconds(entry.confirmed_at)
        opt_out = int(entry.opt_out)
        with self._cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO emails (email, confirmed_at, opt_out)
                VALUES (?, ?, ?)
                ON CONFLICT(email) DO UPDATE SET
                    confirmed_at = excluded.confirmed_at,
                    opt_out = excluded.opt_out
                """,
                (entry.email, confirmed_at, opt_out),
            )
        logger.info("Updated subscriber %s", entry.email)

    def delete(self, email: str) -> None:
        """Opt the subscriber out.  Unknown addresses are ignored."""
        with self._cursor() as cursor:
            cursor.execute("UPDATE emails SET opt_out = 1 WHERE email = ?", (email,))
            affected = cursor.rowcount
        if affected:
            logger.info("Opted out subscriber %s", email)

    def get_batch(self, page: int, count: int) -> List[EmailEntry]:
        """Return one page of active subscribers ordered by id.

        Pages are numbered from 1.  Raises ``InvalidArgument`` when
        ``page`` or ``count`` is below 1, or when the page window does
        not fit in an SQLite integer.
        """
        if page < 1 or count < 1:
            raise InvalidArgument("page and count fields are required and must be greater than 0")
        offset = (page - 1) * count
        if count > MAX_SQLITE_INTEGER or offset > MAX_SQLITE_INTEGER:
            raise InvalidArgument("page and count are too large")
        with self._cursor() as cursor:
            rows = cursor.execute(
                """
                SELECT id, email, confirmed_at, opt_out
                FROM emails
                WHERE opt_out = 0
                ORDER BY id ASC
                LIMIT ? OFFSET ?
                """,
                (count, offset),
            ).fetchall()
        return [self._row_to_entry(row) for row in rows]

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> EmailEntry:
        """Convert a database row to an EmailEntry schema instance."""
        return EmailEntry(
            id=row["id"],
            email=row["email"],
            confirmed_at=datetime.fromtimestamp(row["confirmed_at"] or 0, tz=timezone.utc),
            opt_out=bool(row["opt_out"]),
        )
