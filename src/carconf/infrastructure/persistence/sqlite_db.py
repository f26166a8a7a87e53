"""SQLite connection settings and schema initialisation.

Connections run in autocommit mode (``isolation_level=None``) so that
transactions are opened explicitly with ``BEGIN IMMEDIATE`` by the
repository: the write lock is taken *before* the first read, which makes
every read-validate-write block serializable.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path


def get_connection(db_path: str | Path, timeout: float = 5.0) -> sqlite3.Connection:
    """Create a SQLite connection with consistent settings.

    - Row factory enabled for dict-like access
    - Foreign keys enabled (off by default in sqlite)
    - *timeout* bounds how long a writer waits for the lock
    """
    conn = sqlite3.connect(
        str(db_path),
        timeout=timeout,
        isolation_level=None,
        check_same_thread=False,
    )
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Create tables if they do not already exist."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS configurations (
            owner       INTEGER PRIMARY KEY,
            model_id    TEXT NOT NULL,
            created_at  TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS selected_accessories (
            owner         INTEGER NOT NULL
                          REFERENCES configurations(owner) ON DELETE CASCADE,
            accessory_id  TEXT NOT NULL,
            position      INTEGER NOT NULL,
            PRIMARY KEY (owner, accessory_id)
        );

        CREATE INDEX IF NOT EXISTS idx_selected_accessory
            ON selected_accessories(accessory_id);
        """
    )
