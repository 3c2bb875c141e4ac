"""
Domain service for book writes and reads.

=============================================================================
TEACHING NOTES: Lock ordering
=============================================================================

Two concurrent writers can deadlock when each holds a lock the other wants:

    T1: book A, authors {1, 3}  -> holds 3, waits for 1
    T2: book B, authors {1, 3}  -> holds 1, waits for 3

If every transaction takes its locks in the same global order, a cycle of
waits cannot form. The order used here is:

    1. authors before books
    2. authors in ascending id order (done by find_by_ids_for_update)

Each write then follows the same steps inside ONE transaction:

    lock authors -> check they all exist -> lock/read book ->
    apply domain rules -> write book row -> write links -> re-read authors

Any exception rolls the whole transaction back, so the book row, its links
and the author rows are left exactly as they were.
=============================================================================
"""

import logging
from typing import Iterable, List
from uuid import UUID

from app.domain.entities import (
    Author,
    Book,
    BookWithAuthors,
    TimestampedBook,
)
from app.domain.exceptions import NotFoundError, ReferentialError, StateTransitionError
from app.domain.ports import (
    AuthorRepository,
    BookAuthorRepository,
    BookRepository,
    Transaction,
    TransactionManager,
)
from app.domain.value_objects import PublicationStatus

logger = logging.getLogger(__name__)


class BookService:
    """
    Coordinates book mutations so the book/author links stay consistent
    under concurrent writers.

    Usage:
        service = BookService(
            transactions=database,
            author_repo=SqliteAuthorRepository(),
            book_repo=book_repo,
            book_author_repo=SqliteBookAuthorRepository(book_repo),
        )
        created = service.create_book("Kokoro", 500, PublicationStatus.UNPUBLISHED, [author_id])
    """

    def __init__(
        self,
        transactions: TransactionManager,
        author_repo: AuthorRepository,
        book_repo: BookRepository,
        book_author_repo: BookAuthorRepository,
    ) -> None:
        self._transactions = transactions
        self._author_repo = author_repo
        self._book_repo = book_repo
        self._book_author_repo = book_author_repo

    def _lock_authors(self, tx: Transaction, author_ids: frozenset) -> List[Author]:
        """
        Lock every referenced author (ascending id) and check they all exist.

        Raises:
            ReferentialError: If any id has no author row
        """
        locked = self._author_repo.find_by_ids_for_update(tx, author_ids)
        if len(locked) != len(author_ids):
            missing = author_ids - {author.id for author in locked}
            logger.warning("Rejected book write, missing authors: %s", sorted(missing))
            raise ReferentialError(missing)
        return locked

    def create_book(
        self,
        title: str,
        price: int,
        publication_status: PublicationStatus,
        author_ids: Iterable[UUID],
    ) -> BookWithAuthors:
        """
        Create a book and link it to existing authors.

        Raises:
            ReferentialError: If any author does not exist
            ValidationError: If title, price or author set is invalid
        """
        requested = frozenset(author_ids)

        with self._transactions.transaction(write=True) as tx:
            self._lock_authors(tx, requested)

            book = Book.create(
                title=title,
                price=price,
                publication_status=publication_status,
                author_ids=requested,
            )

            stored = self._book_repo.insert(tx, book)
            self._book_author_repo.insert(tx, book.id, requested)
            authors = self._author_repo.find_by_ids(tx, requested)

        logger.info("Created book %s with %d author(s)", book.id, len(authors))
        return BookWithAuthors(book=stored, authors=authors)

    def update_book(
        self,
        book_id: UUID,
        title: str,
        price: int,
        publication_status: PublicationStatus,
        author_ids: Iterable[UUID],
    ) -> BookWithAuthors:
        """
        Replace a book's fields and author set.

        The status transition is checked against the persisted status.

        Raises:
            ReferentialError: If any author does not exist
            NotFoundError: If the book does not exist
            StateTransitionError: If the status change is not allowed
            ValidationError: If title, price or author set is invalid
        """
        requested = frozenset(author_ids)

        with self._transactions.transaction(write=True) as tx:
            self._lock_authors(tx, requested)

            existing = self._book_repo.find_by_id_for_update(tx, book_id)
            if existing is None:
                raise NotFoundError("Book", book_id)

            try:
                updated = existing.update(
                    title=title,
                    price=price,
                    publication_status=publication_status,
                    author_ids=requested,
                )
            except StateTransitionError:
                logger.warning(
                    "Rejected status change for book %s: %s -> %s",
                    book_id,
                    existing.publication_status,
                    publication_status,
                )
                raise

            stored = self._book_repo.update(tx, updated)
            self._book_author_repo.replace(tx, updated.id, requested)
            authors = self._author_repo.find_by_ids(tx, requested)

        logger.info("Updated book %s", book_id)
        return BookWithAuthors(book=stored, authors=authors)

    def get_book(self, book_id: UUID) -> TimestampedBook:
        """
        Raises:
            NotFoundError: If the book does not exist
        """
        with self._transactions.transaction() as tx:
            book = self._book_repo.find_by_id(tx, book_id)
        if book is None:
            raise NotFoundError("Book", book_id)
        return book

    def get_book_with_authors(self, book_id: UUID) -> BookWithAuthors:
        """
        Raises:
            NotFoundError: If the book does not exist
        """
        with self._transactions.transaction() as tx:
            book = self._book_repo.find_by_id(tx, book_id)
            if book is None:
                raise NotFoundError("Book", book_id)
            authors = self._book_author_repo.authors_of(tx, book_id)
        return BookWithAuthors(book=book, authors=authors)

    def get_books_by_author(self, author_id: UUID) -> List[TimestampedBook]:
        """
        Books linked to an author, without locking.

        Author existence is only checked when no books come back: a non-empty
        result already proves the author exists.

        Raises:
            NotFoundError: If the author does not exist
        """
        with self._transactions.transaction() as tx:
            books = self._book_author_repo.books_of(tx, author_id)
            if not books and not self._author_repo.exists(tx, author_id):
                raise NotFoundError("Author", author_id)
        return books

    def get_books_with_authors(self, books: List[TimestampedBook]) -> List[BookWithAuthors]:
        """Hydrate several books with their authors in one batch lookup."""
        if not books:
            return []

        with self._transactions.transaction() as tx:
            authors_by_book = self._book_author_repo.authors_of_many(
                tx, [b.id for b in books]
            )
        return [
            BookWithAuthors(book=book, authors=authors_by_book.get(book.id, []))
            for book in books
        ]
