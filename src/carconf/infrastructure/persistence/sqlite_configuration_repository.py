"""SQLite-backed implementation of ConfigurationRepository.

Each ``atomic()`` block gets its own connection (kept in a thread-local
so the repository can be shared by concurrent request handlers) and runs
inside ``BEGIN IMMEDIATE``.  Reads and writes made outside a block use a
short-lived connection; writes outside a block open their own
transaction.

The database must be a file: every connection to ``:memory:`` would see
a different, empty database.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import closing, contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from carconf.domain.exceptions import EntityNotFoundError
from carconf.domain.model.configuration import Configuration
from carconf.domain.repository.configuration_repository import ConfigurationRepository
from carconf.infrastructure.persistence.sqlite_db import get_connection, init_db

logger = logging.getLogger(__name__)


class SqliteConfigurationRepository(ConfigurationRepository):

    def __init__(self, db_path: str | Path, timeout: float = 5.0) -> None:
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._local = threading.local()
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        with closing(get_connection(self._db_path, self._timeout)) as conn:
            init_db(conn)

    # --- Transactions ---------------------------------------------------------

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if self._current() is not None:
            # Already inside a transaction on this thread: join it.
            yield
            return

        conn = get_connection(self._db_path, self._timeout)
        self._local.conn = conn
        try:
            conn.execute("BEGIN IMMEDIATE")
            yield
            conn.execute("COMMIT")
        except sqlite3.Error as exc:
            # Roll back on any DB error to avoid partial writes.
            logger.error("Rolling back configuration transaction: %s", exc)
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise RuntimeError(f"Database error during configuration transaction: {exc}") from exc
        except BaseException:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            raise
        finally:
            self._local.conn = None
            conn.close()

    def _current(self) -> sqlite3.Connection | None:
        return getattr(self._local, "conn", None)

    @contextmanager
    def _reader(self) -> Iterator[sqlite3.Connection]:
        conn = self._current()
        if conn is not None:
            yield conn
            return
        with closing(get_connection(self._db_path, self._timeout)) as conn:
            yield conn

    # --- ConfigurationRepository interface ------------------------------------

    def get_by_owner(self, owner: int) -> Configuration | None:
        with self._reader() as conn:
            row = conn.execute(
                "SELECT owner, model_id, created_at FROM configurations WHERE owner = ?",
                (owner,),
            ).fetchone()
            if row is None:
                return None
            accessories = conn.execute(
                "SELECT accessory_id FROM selected_accessories "
                "WHERE owner = ? ORDER BY position ASC",
                (owner,),
            ).fetchall()
        return Configuration(
            owner=int(row["owner"]),
            model_id=str(row["model_id"]),
            accessory_ids=tuple(str(r["accessory_id"]) for r in accessories),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def selection_counts(self) -> dict[str, int]:
        with self._reader() as conn:
            rows = conn.execute(
                "SELECT accessory_id, COUNT(*) AS selected "
                "FROM selected_accessories GROUP BY accessory_id"
            ).fetchall()
        return {str(r["accessory_id"]): int(r["selected"]) for r in rows}

    def add(self, configuration: Configuration) -> None:
        with self.atomic():
            conn = self._current()
            conn.execute(
                "INSERT INTO configurations (owner, model_id, created_at) VALUES (?, ?, ?)",
                (configuration.owner, configuration.model_id, configuration.created_at.isoformat()),
            )
            conn.executemany(
                "INSERT INTO selected_accessories (owner, accessory_id, position) "
                "VALUES (?, ?, ?)",
                [
                    (configuration.owner, accessory_id, position)
                    for position, accessory_id in enumerate(configuration.accessory_ids)
                ],
            )

    def add_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        with self.atomic():
            conn = self._current()
            self._require(conn, owner)
            (last,) = conn.execute(
                "SELECT COALESCE(MAX(position), -1) FROM selected_accessories WHERE owner = ?",
                (owner,),
            ).fetchone()
            conn.executemany(
                "INSERT INTO selected_accessories (owner, accessory_id, position) "
                "VALUES (?, ?, ?)",
                [
                    (owner, accessory_id, last + offset)
                    for offset, accessory_id in enumerate(accessory_ids, start=1)
                ],
            )

    def remove_accessories(self, owner: int, accessory_ids: Iterable[str]) -> None:
        with self.atomic():
            conn = self._current()
            self._require(conn, owner)
            conn.executemany(
                "DELETE FROM selected_accessories WHERE owner = ? AND accessory_id = ?",
                [(owner, accessory_id) for accessory_id in accessory_ids],
            )

    def delete(self, owner: int) -> bool:
        with self.atomic():
            conn = self._current()
            conn.execute("DELETE FROM selected_accessories WHERE owner = ?", (owner,))
            cur = conn.execute("DELETE FROM configurations WHERE owner = ?", (owner,))
            return cur.rowcount > 0

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _require(conn: sqlite3.Connection, owner: int) -> None:
        row = conn.execute(
            "SELECT 1 FROM configurations WHERE owner = ?", (owner,)
        ).fetchone()
        if row is None:
            raise EntityNotFoundError(f"User #{owner} doesn't currently have a car configuration")
