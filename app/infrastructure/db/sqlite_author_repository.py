"""
SQLite implementation of the AuthorRepository port.

Converts between ``authors`` rows and Author entities. Timestamps are
assigned here, never by the domain.
"""

import sqlite3
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple
from uuid import UUID

from app.domain.entities import Author, TimestampedAuthor
from app.domain.exceptions import NotFoundError
from app.domain.ports import AuthorRepository
from app.domain.value_objects import AuthorSearchFilters, PageRequest

from . import search_conditions as sc
from .sqlite_database import (
    SqliteTransaction,
    id_to_db,
    ids_to_db,
    placeholders,
    utc_now,
)

AUTHOR_COLUMNS = "a.id, a.name, a.date_of_birth, a.created_at, a.updated_at"


def row_to_author(row: sqlite3.Row) -> Author:
    """Convert a database row to an Author entity."""
    return Author(
        id=UUID(row["id"]),
        name=row["name"],
        date_of_birth=date.fromisoformat(row["date_of_birth"]),
    )


def row_to_timestamped_author(row: sqlite3.Row) -> TimestampedAuthor:
    return TimestampedAuthor(
        author=row_to_author(row),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SqliteAuthorRepository(AuthorRepository):
    """Author rows, including the locking reads used by the write services."""

    def insert(self, tx: SqliteTransaction, author: Author) -> TimestampedAuthor:
        tx.require_write("insert author")
        now = utc_now()
        tx.execute(
            """
            INSERT INTO authors (id, name, date_of_birth, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                id_to_db(author.id),
                author.name,
                author.date_of_birth.isoformat(),
                now.isoformat(),
                now.isoformat(),
            ),
        )
        return TimestampedAuthor(author=author, created_at=now, updated_at=now)

    def update(self, tx: SqliteTransaction, author: Author) -> TimestampedAuthor:
        tx.require_write("update author")
        cursor = tx.execute(
            """
            UPDATE authors SET name = ?, date_of_birth = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                author.name,
                author.date_of_birth.isoformat(),
                utc_now().isoformat(),
                id_to_db(author.id),
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("Author", author.id)

        updated = self.find_by_id(tx, author.id)
        if updated is None:
            raise NotFoundError("Author", author.id)
        return updated

    def find_by_id(self, tx: SqliteTransaction, author_id: UUID) -> Optional[TimestampedAuthor]:
        row = tx.execute(
            f"SELECT {AUTHOR_COLUMNS} FROM authors a WHERE a.id = ?",
            (id_to_db(author_id),),
        ).fetchone()
        return row_to_timestamped_author(row) if row is not None else None

    def find_by_id_for_update(self, tx: SqliteTransaction, author_id: UUID) -> Optional[Author]:
        locked = self.find_by_ids_for_update(tx, [author_id])
        return locked[0] if locked else None

    def find_by_ids(self, tx: SqliteTransaction, author_ids: Iterable[UUID]) -> List[TimestampedAuthor]:
        ids = ids_to_db(author_ids)
        if not ids:
            return []

        rows = tx.execute(
            f"SELECT {AUTHOR_COLUMNS} FROM authors a "
            f"WHERE a.id IN ({placeholders(len(ids))}) ORDER BY a.id",
            ids,
        ).fetchall()
        return [row_to_timestamped_author(row) for row in rows]

    def find_by_ids_for_update(self, tx: SqliteTransaction, author_ids: Iterable[UUID]) -> List[Author]:
        """
        Lock and read authors in ascending id order.

        Ids are sorted before the statement is built, so the lock order does
        not depend on the order the caller passed them in.
        """
        tx.require_write("lock authors")
        ids = ids_to_db(author_ids)
        if not ids:
            return []

        rows = tx.execute(
            f"SELECT {AUTHOR_COLUMNS} FROM authors a "
            f"WHERE a.id IN ({placeholders(len(ids))}) ORDER BY a.id",
            ids,
        ).fetchall()
        return [row_to_author(row) for row in rows]

    def exists(self, tx: SqliteTransaction, author_id: UUID) -> bool:
        row = tx.execute(
            "SELECT 1 FROM authors WHERE id = ?", (id_to_db(author_id),)
        ).fetchone()
        return row is not None

    def exists_all(self, tx: SqliteTransaction, author_ids: Iterable[UUID]) -> bool:
        ids = ids_to_db(author_ids)
        if not ids:
            return True

        row = tx.execute(
            f"SELECT COUNT(*) AS cnt FROM authors WHERE id IN ({placeholders(len(ids))})",
            ids,
        ).fetchone()
        return row["cnt"] == len(ids)

    def search(
        self,
        tx: SqliteTransaction,
        filters: AuthorSearchFilters,
        page: PageRequest,
    ) -> Tuple[List[TimestampedAuthor], int]:
        """Distinct-id search over authors LEFT JOIN book_authors LEFT JOIN books."""
        conditions = [
            sc.contains_ignore_case("a.name", filters.name),
            sc.at_least(
                "a.date_of_birth",
                filters.date_of_birth_from.isoformat() if filters.date_of_birth_from else None,
            ),
            sc.at_most(
                "a.date_of_birth",
                filters.date_of_birth_to.isoformat() if filters.date_of_birth_to else None,
            ),
            sc.contains_ignore_case("b.title", filters.book_title),
            sc.equals(
                "b.publication_status",
                filters.publication_status.value if filters.publication_status else None,
            ),
        ]

        from_clause = "authors a"
        if filters.touches_books():
            from_clause += (
                " LEFT JOIN book_authors ba ON ba.author_id = a.id"
                " LEFT JOIN books b ON b.id = ba.book_id"
            )

        total = sc.count_distinct(tx, "a.id", from_clause, conditions)
        if total == 0:
            return [], 0

        ids = sc.page_distinct_ids(tx, "a.id", from_clause, conditions, page)
        authors = self.find_by_ids(tx, [UUID(i) for i in ids])
        return authors, total
