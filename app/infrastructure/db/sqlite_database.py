"""
SQLite storage engine and explicit transactions.

This adapter implements the TransactionManager port. Every transaction gets
its own connection, so one ``SqliteDatabase`` can be shared by any number of
worker threads.

Locking model:
- The database runs in WAL mode: readers never block the writer and the
  writer never blocks readers.
- Write transactions start with ``BEGIN IMMEDIATE``. SQLite has no row locks;
  the writer lock it takes here covers every row a ``*_for_update`` read
  touches. The repositories still read locked rows in ascending id order, so
  the same code is deadlock-free on engines that do lock per row.
- Every lock wait is bounded by ``lock_timeout_seconds``. An expired wait
  becomes ``LockTimeoutError`` and the transaction is rolled back.
"""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, UTC
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence
from uuid import UUID

from app.domain.exceptions import LockTimeoutError, UnexpectedFailure
from app.domain.ports import TransactionManager

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS authors (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    date_of_birth TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS books (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    price INTEGER NOT NULL CHECK (price >= 0),
    publication_status TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS book_authors (
    book_id TEXT NOT NULL REFERENCES books(id) ON DELETE CASCADE,
    author_id TEXT NOT NULL REFERENCES authors(id),
    PRIMARY KEY (book_id, author_id)
);

CREATE INDEX IF NOT EXISTS idx_book_authors_author_id ON book_authors(author_id);
"""


def utc_now() -> datetime:
    return datetime.now(UTC)


def id_to_db(value: UUID) -> str:
    return str(value)


def ids_to_db(values: Iterable[UUID]) -> List[str]:
    """Deduplicate and sort ids ascending, the order rows are locked in."""
    return [str(v) for v in sorted(set(values))]


def placeholders(count: int) -> str:
    return ", ".join("?" * count)


def casefold(value):
    """SQL function used for Unicode-aware case-insensitive matching."""
    if value is None:
        return None
    return value.casefold()


class SqliteTransaction:
    """An open SQLite transaction, passed explicitly to every repository call."""

    def __init__(self, conn: sqlite3.Connection, is_write: bool) -> None:
        self._conn = conn
        self._is_write = is_write

    @property
    def is_write(self) -> bool:
        return self._is_write

    def execute(self, sql: str, params: Sequence = ()) -> sqlite3.Cursor:
        return self._conn.execute(sql, params)

    def executemany(self, sql: str, rows: Iterable[Sequence]) -> sqlite3.Cursor:
        return self._conn.executemany(sql, rows)

    def require_write(self, operation: str) -> None:
        """Fail fast when a locking or writing call runs in a read transaction."""
        if not self._is_write:
            raise UnexpectedFailure(
                f"{operation} requires a write transaction",
                details={"operation": operation},
            )


class SqliteDatabase(TransactionManager):
    """
    Owns the database file, its schema and transaction boundaries.
    """

    def __init__(self, db_path: Path, lock_timeout_seconds: float = 5.0) -> None:
        """
        Initialize the database and create the schema if needed.

        Args:
            db_path: Path of the SQLite file (parent directories are created)
            lock_timeout_seconds: Upper bound for any lock wait
        """
        self._db_path = Path(db_path)
        self._lock_timeout_seconds = lock_timeout_seconds
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _get_connection(self) -> sqlite3.Connection:
        """Get a connection in manual transaction mode with row factory."""
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._lock_timeout_seconds,
            isolation_level=None,
            check_same_thread=False,
        )
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        conn.create_function("casefold", 1, casefold, deterministic=True)
        return conn

    def _init_schema(self) -> None:
        """Create tables and switch the file to WAL mode."""
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            raise UnexpectedFailure(f"Cannot open database: {e}") from e
        try:
            conn.execute("PRAGMA journal_mode = WAL")
            conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise UnexpectedFailure(f"Cannot initialize schema: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def transaction(self, write: bool = False) -> Iterator[SqliteTransaction]:
        """
        Run a block inside one transaction.

        Commits on normal exit; rolls back on any exception and re-raises it.
        Domain exceptions pass through untouched. SQLite errors, and integers
        too large to bind as SQLite INTEGER, are translated.

        Args:
            write: Take the writer lock up front (``BEGIN IMMEDIATE``)
        """
        try:
            conn = self._get_connection()
        except sqlite3.Error as e:
            raise self._translate(e) from e

        try:
            conn.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield SqliteTransaction(conn, is_write=write)
                conn.execute("COMMIT")
            except BaseException:
                self._rollback(conn)
                raise
        except (sqlite3.Error, OverflowError) as e:
            raise self._translate(e) from e
        finally:
            conn.close()

    def _rollback(self, conn: sqlite3.Connection) -> None:
        if not conn.in_transaction:
            return
        try:
            conn.execute("ROLLBACK")
            logger.debug("Transaction rolled back")
        except sqlite3.Error as e:
            # The original failure is more useful than the rollback one
            logger.error("Rollback failed: %s", e)

    def _translate(self, error: Exception) -> UnexpectedFailure:
        message = str(error).lower()
        if isinstance(error, sqlite3.OperationalError) and (
            "locked" in message or "busy" in message
        ):
            logger.warning(
                "Lock wait exceeded %.2fs: %s", self._lock_timeout_seconds, error
            )
            return LockTimeoutError(
                "Timed out waiting for a lock",
                details={"timeout_seconds": self._lock_timeout_seconds},
            )
        return UnexpectedFailure(
            "Storage failure",
            details={"error_type": type(error).__name__, "error": str(error)},
        )
