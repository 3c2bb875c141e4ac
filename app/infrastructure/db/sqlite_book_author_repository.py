"""
SQLite implementation of the BookAuthorRepository port.

``book_authors`` holds one row per (book, author) link. Batch lookups return
a key for every requested id so callers can hydrate a page of results with a
single query instead of one query per row.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Set
from uuid import UUID

from app.domain.entities import TimestampedAuthor, TimestampedBook
from app.domain.ports import BookAuthorRepository

from .sqlite_author_repository import AUTHOR_COLUMNS, row_to_timestamped_author
from .sqlite_database import SqliteTransaction, id_to_db, ids_to_db, placeholders


def fetch_author_ids_by_book(
    tx: SqliteTransaction, book_ids: Iterable[UUID]
) -> Dict[UUID, Set[UUID]]:
    """Author ids per book id; books without links map to an empty set."""
    ids = ids_to_db(book_ids)
    result: Dict[UUID, Set[UUID]] = {UUID(i): set() for i in ids}
    if not ids:
        return result

    rows = tx.execute(
        f"SELECT book_id, author_id FROM book_authors "
        f"WHERE book_id IN ({placeholders(len(ids))})",
        ids,
    ).fetchall()
    for row in rows:
        result[UUID(row["book_id"])].add(UUID(row["author_id"]))
    return result


class SqliteBookAuthorRepository(BookAuthorRepository):
    """Link rows between books and authors."""

    def __init__(self, book_repository) -> None:
        """
        Args:
            book_repository: Used to hydrate full book rows in ``books_of``
        """
        self._book_repository = book_repository

    def insert(self, tx: SqliteTransaction, book_id: UUID, author_ids: Iterable[UUID]) -> None:
        ids = ids_to_db(author_ids)
        if not ids:
            return

        tx.require_write("insert book authors")
        book = id_to_db(book_id)
        tx.executemany(
            "INSERT INTO book_authors (book_id, author_id) VALUES (?, ?)",
            [(book, author) for author in ids],
        )

    def delete_by_book_id(self, tx: SqliteTransaction, book_id: UUID) -> None:
        tx.require_write("delete book authors")
        tx.execute("DELETE FROM book_authors WHERE book_id = ?", (id_to_db(book_id),))

    def replace(self, tx: SqliteTransaction, book_id: UUID, author_ids: Iterable[UUID]) -> None:
        # Both statements share tx; readers never see the empty set in between
        self.delete_by_book_id(tx, book_id)
        self.insert(tx, book_id, author_ids)

    def author_ids_of(self, tx: SqliteTransaction, book_id: UUID) -> Set[UUID]:
        return fetch_author_ids_by_book(tx, [book_id])[book_id]

    def author_ids_of_many(
        self, tx: SqliteTransaction, book_ids: Iterable[UUID]
    ) -> Dict[UUID, Set[UUID]]:
        return fetch_author_ids_by_book(tx, book_ids)

    def authors_of(self, tx: SqliteTransaction, book_id: UUID) -> List[TimestampedAuthor]:
        return self.authors_of_many(tx, [book_id])[book_id]

    def authors_of_many(
        self, tx: SqliteTransaction, book_ids: Iterable[UUID]
    ) -> Dict[UUID, List[TimestampedAuthor]]:
        ids = ids_to_db(book_ids)
        result: Dict[UUID, List[TimestampedAuthor]] = {UUID(i): [] for i in ids}
        if not ids:
            return result

        rows = tx.execute(
            f"SELECT ba.book_id AS link_book_id, {AUTHOR_COLUMNS} "
            f"FROM authors a JOIN book_authors ba ON ba.author_id = a.id "
            f"WHERE ba.book_id IN ({placeholders(len(ids))}) "
            f"ORDER BY ba.book_id, a.id",
            ids,
        ).fetchall()
        for row in rows:
            result[UUID(row["link_book_id"])].append(row_to_timestamped_author(row))
        return result

    def books_of(self, tx: SqliteTransaction, author_id: UUID) -> List[TimestampedBook]:
        return self.books_of_many(tx, [author_id])[author_id]

    def books_of_many(
        self, tx: SqliteTransaction, author_ids: Iterable[UUID]
    ) -> Dict[UUID, List[TimestampedBook]]:
        ids = ids_to_db(author_ids)
        result: Dict[UUID, List[TimestampedBook]] = {UUID(i): [] for i in ids}
        if not ids:
            return result

        rows = tx.execute(
            f"SELECT author_id, book_id FROM book_authors "
            f"WHERE author_id IN ({placeholders(len(ids))}) ORDER BY author_id, book_id",
            ids,
        ).fetchall()
        if not rows:
            return result

        book_ids_by_author = defaultdict(list)
        for row in rows:
            book_ids_by_author[UUID(row["author_id"])].append(UUID(row["book_id"]))

        all_book_ids = {b for books in book_ids_by_author.values() for b in books}
        books = {b.id: b for b in self._book_repository.find_by_ids(tx, all_book_ids)}

        for author, book_ids in book_ids_by_author.items():
            result[author] = [books[b] for b in book_ids if b in books]
        return result
