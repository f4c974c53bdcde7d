"""
SQLite connection helpers.

The store opens one short-lived connection per operation through
``get_connection`` and closes it when the operation finishes.  SQLite
serializes concurrent writers with its own file locking, so nothing in
this module keeps shared connection state between requests.
"""

import os
import sqlite3
from pathlib import Path


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are returned as is.  Anything else is resolved
    relative to the project root.
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parents[3]
    return str((base_dir / database_url).resolve())


def get_connection(database_path: str) -> sqlite3.Connection:
    """Create and return a new SQLite connection.

    Rows are returned as ``sqlite3.Row`` so columns can be read by
    name.  Values come back exactly as stored: ``confirmed_at`` is an
    integer number of seconds and ``opt_out`` is ``0`` or ``1``.
    """
    conn = sqlite3.connect(database_path)
    conn.row_factory = sqlite3.Row
    return conn
