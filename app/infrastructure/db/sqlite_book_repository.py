"""
SQLite implementation of the BookRepository port.

Book rows live in ``books``; their author ids are read from
``book_authors`` so every returned Book carries its current author set.
Writing the links is left to SqliteBookAuthorRepository.
"""

import sqlite3
from datetime import datetime
from typing import Iterable, List, Optional, Set, Tuple
from uuid import UUID

from app.domain.entities import Book, TimestampedBook
from app.domain.exceptions import NotFoundError
from app.domain.ports import BookRepository
from app.domain.value_objects import BookSearchFilters, PageRequest, PublicationStatus

from . import search_conditions as sc
from .sqlite_book_author_repository import fetch_author_ids_by_book
from .sqlite_database import (
    SqliteTransaction,
    id_to_db,
    ids_to_db,
    placeholders,
    utc_now,
)

BOOK_COLUMNS = "b.id, b.title, b.price, b.publication_status, b.created_at, b.updated_at"


def row_to_book(row: sqlite3.Row, author_ids: Set[UUID]) -> Book:
    """Convert a database row plus its link rows to a Book entity."""
    return Book(
        id=UUID(row["id"]),
        title=row["title"],
        price=row["price"],
        publication_status=PublicationStatus(row["publication_status"]),
        author_ids=frozenset(author_ids),
    )


def row_to_timestamped_book(row: sqlite3.Row, author_ids: Set[UUID]) -> TimestampedBook:
    return TimestampedBook(
        book=row_to_book(row, author_ids),
        created_at=datetime.fromisoformat(row["created_at"]),
        updated_at=datetime.fromisoformat(row["updated_at"]),
    )


class SqliteBookRepository(BookRepository):
    """Book rows, including the locking reads used by the write services."""

    def insert(self, tx: SqliteTransaction, book: Book) -> TimestampedBook:
        tx.require_write("insert book")
        now = utc_now()
        tx.execute(
            """
            INSERT INTO books (id, title, price, publication_status, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                id_to_db(book.id),
                book.title,
                book.price,
                book.publication_status.value,
                now.isoformat(),
                now.isoformat(),
            ),
        )
        return TimestampedBook(book=book, created_at=now, updated_at=now)

    def update(self, tx: SqliteTransaction, book: Book) -> TimestampedBook:
        tx.require_write("update book")
        now = utc_now()
        cursor = tx.execute(
            """
            UPDATE books SET title = ?, price = ?, publication_status = ?, updated_at = ?
            WHERE id = ?
            """,
            (
                book.title,
                book.price,
                book.publication_status.value,
                now.isoformat(),
                id_to_db(book.id),
            ),
        )
        if cursor.rowcount == 0:
            raise NotFoundError("Book", book.id)

        row = tx.execute(
            "SELECT created_at FROM books WHERE id = ?", (id_to_db(book.id),)
        ).fetchone()
        return TimestampedBook(
            book=book,
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=now,
        )

    def find_by_id(self, tx: SqliteTransaction, book_id: UUID) -> Optional[TimestampedBook]:
        books = self.find_by_ids(tx, [book_id])
        return books[0] if books else None

    def find_by_id_for_update(self, tx: SqliteTransaction, book_id: UUID) -> Optional[Book]:
        locked = self.find_by_ids_for_update(tx, [book_id])
        return locked[0] if locked else None

    def _select_by_ids(self, tx: SqliteTransaction, ids: List[str]) -> List[sqlite3.Row]:
        return tx.execute(
            f"SELECT {BOOK_COLUMNS} FROM books b "
            f"WHERE b.id IN ({placeholders(len(ids))}) ORDER BY b.id",
            ids,
        ).fetchall()

    def find_by_ids(self, tx: SqliteTransaction, book_ids: Iterable[UUID]) -> List[TimestampedBook]:
        ids = ids_to_db(book_ids)
        if not ids:
            return []

        rows = self._select_by_ids(tx, ids)
        author_ids = fetch_author_ids_by_book(tx, [UUID(row["id"]) for row in rows])
        return [row_to_timestamped_book(row, author_ids[UUID(row["id"])]) for row in rows]

    def find_by_ids_for_update(self, tx: SqliteTransaction, book_ids: Iterable[UUID]) -> List[Book]:
        """Lock and read books in ascending id order."""
        tx.require_write("lock books")
        ids = ids_to_db(book_ids)
        if not ids:
            return []

        rows = self._select_by_ids(tx, ids)
        author_ids = fetch_author_ids_by_book(tx, [UUID(row["id"]) for row in rows])
        return [row_to_book(row, author_ids[UUID(row["id"])]) for row in rows]

    def exists(self, tx: SqliteTransaction, book_id: UUID) -> bool:
        row = tx.execute(
            "SELECT 1 FROM books WHERE id = ?", (id_to_db(book_id),)
        ).fetchone()
        return row is not None

    def exists_all(self, tx: SqliteTransaction, book_ids: Iterable[UUID]) -> bool:
        ids = ids_to_db(book_ids)
        if not ids:
            return True

        row = tx.execute(
            f"SELECT COUNT(*) AS cnt FROM books WHERE id IN ({placeholders(len(ids))})",
            ids,
        ).fetchone()
        return row["cnt"] == len(ids)

    def search(
        self,
        tx: SqliteTransaction,
        filters: BookSearchFilters,
        page: PageRequest,
    ) -> Tuple[List[TimestampedBook], int]:
        """Distinct-id search over books LEFT JOIN book_authors LEFT JOIN authors."""
        conditions = [
            sc.contains_ignore_case("b.title", filters.title),
            sc.contains_ignore_case("a.name", filters.author_name),
            sc.at_least("b.price", filters.price_from),
            sc.at_most("b.price", filters.price_to),
            sc.equals(
                "b.publication_status",
                filters.publication_status.value if filters.publication_status else None,
            ),
        ]

        from_clause = "books b"
        if filters.touches_authors():
            from_clause += (
                " LEFT JOIN book_authors ba ON ba.book_id = b.id"
                " LEFT JOIN authors a ON a.id = ba.author_id"
            )

        total = sc.count_distinct(tx, "b.id", from_clause, conditions)
        if total == 0:
            return [], 0

        ids = sc.page_distinct_ids(tx, "b.id", from_clause, conditions, page)
        books = self.find_by_ids(tx, [UUID(i) for i in ids])
        return books, total
