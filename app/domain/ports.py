"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.

Every store method takes the transaction as its first argument. There is no
ambient "current transaction": whoever opens the transaction passes it down
explicitly, so the scope of each unit of work is visible at the call site.
"""

from contextlib import AbstractContextManager
from datetime import date
from typing import Dict, Iterable, List, Optional, Protocol, Set, Tuple
from uuid import UUID

from .entities import Author, Book, TimestampedAuthor, TimestampedBook
from .value_objects import AuthorSearchFilters, BookSearchFilters, PageRequest


class Transaction(Protocol):
    """
    An open unit of work against the storage engine.

    The domain never looks inside; it only hands the object to the stores.
    """

    @property
    def is_write(self) -> bool:
        """True if this transaction may take exclusive locks and write."""
        ...


class TransactionManager(Protocol):
    """
    Port for opening transactions.

    ``transaction(write=True)`` must commit when the block exits normally and
    roll back when it raises, re-raising the original exception. Domain
    exceptions must pass through unchanged; storage failures are translated
    to ``UnexpectedFailure`` (or ``LockTimeoutError`` for lock waits).
    """

    def transaction(self, write: bool = False) -> AbstractContextManager[Transaction]:
        """Open a transaction. Read transactions never take exclusive locks."""
        ...


class Clock(Protocol):
    """Source of the current date for validation rules."""

    def today(self) -> date:
        ...


class AuthorRepository(Protocol):
    """
    Port for persisting and retrieving authors.

    Implementations must:
    - Assign ``created_at``/``updated_at`` themselves
    - Lock rows in ascending id order in ``find_by_ids_for_update``
    """

    def insert(self, tx: Transaction, author: Author) -> TimestampedAuthor:
        """Persist a new author and return it with storage timestamps."""
        ...

    def update(self, tx: Transaction, author: Author) -> TimestampedAuthor:
        """
        Replace the mutable fields of an existing author (matched by id).

        Raises:
            NotFoundError: If no author has this id
        """
        ...

    def find_by_id(self, tx: Transaction, author_id: UUID) -> Optional[TimestampedAuthor]:
        """Retrieve an author by id without locking."""
        ...

    def find_by_id_for_update(self, tx: Transaction, author_id: UUID) -> Optional[Author]:
        """
        Retrieve an author by id and hold an exclusive lock on its row.

        Blocks until the lock is free (bounded by the engine's lock timeout).
        Only valid inside a write transaction.
        """
        ...

    def find_by_ids(self, tx: Transaction, author_ids: Iterable[UUID]) -> List[TimestampedAuthor]:
        """Retrieve several authors, ordered by id. Missing ids are skipped."""
        ...

    def find_by_ids_for_update(self, tx: Transaction, author_ids: Iterable[UUID]) -> List[Author]:
        """
        Retrieve and exclusively lock several authors.

        Rows are locked in ascending id order so that concurrent writers
        touching overlapping author sets cannot form a wait cycle. Missing
        ids are skipped; callers compare lengths to detect them.
        """
        ...

    def exists(self, tx: Transaction, author_id: UUID) -> bool:
        ...

    def exists_all(self, tx: Transaction, author_ids: Iterable[UUID]) -> bool:
        """True if every id exists. Vacuously true for an empty collection."""
        ...

    def search(
        self,
        tx: Transaction,
        filters: AuthorSearchFilters,
        page: PageRequest,
    ) -> Tuple[List[TimestampedAuthor], int]:
        """
        Search authors joined with their books.

        Returns:
            (one page of distinct authors ordered by id, total distinct matches)
        """
        ...


class BookRepository(Protocol):
    """
    Port for persisting and retrieving books.

    Returned ``Book`` values carry their current ``author_ids``.
    Association rows are written by ``BookAuthorRepository``, not here.
    """

    def insert(self, tx: Transaction, book: Book) -> TimestampedBook:
        ...

    def update(self, tx: Transaction, book: Book) -> TimestampedBook:
        """
        Replace the mutable fields of an existing book (matched by id).

        Raises:
            NotFoundError: If no book has this id
        """
        ...

    def find_by_id(self, tx: Transaction, book_id: UUID) -> Optional[TimestampedBook]:
        ...

    def find_by_id_for_update(self, tx: Transaction, book_id: UUID) -> Optional[Book]:
        """Retrieve a book by id and hold an exclusive lock on its row."""
        ...

    def find_by_ids(self, tx: Transaction, book_ids: Iterable[UUID]) -> List[TimestampedBook]:
        ...

    def find_by_ids_for_update(self, tx: Transaction, book_ids: Iterable[UUID]) -> List[Book]:
        """Retrieve and exclusively lock several books in ascending id order."""
        ...

    def exists(self, tx: Transaction, book_id: UUID) -> bool:
        ...

    def exists_all(self, tx: Transaction, book_ids: Iterable[UUID]) -> bool:
        ...

    def search(
        self,
        tx: Transaction,
        filters: BookSearchFilters,
        page: PageRequest,
    ) -> Tuple[List[TimestampedBook], int]:
        """
        Search books joined with their authors.

        Returns:
            (one page of distinct books ordered by id, total distinct matches)
        """
        ...


class BookAuthorRepository(Protocol):
    """
    Port for the many-to-many link between books and authors.

    Link rows have no identity of their own; they are created, replaced and
    removed only as part of a book mutation.
    """

    def insert(self, tx: Transaction, book_id: UUID, author_ids: Iterable[UUID]) -> None:
        """Create one link per author id. No-op for an empty collection."""
        ...

    def replace(self, tx: Transaction, book_id: UUID, author_ids: Iterable[UUID]) -> None:
        """
        Delete every link of the book, then insert the new set.

        Both statements run in ``tx``; other transactions see either the old
        set or the new one once ``tx`` commits.
        """
        ...

    def delete_by_book_id(self, tx: Transaction, book_id: UUID) -> None:
        ...

    def author_ids_of(self, tx: Transaction, book_id: UUID) -> Set[UUID]:
        ...

    def author_ids_of_many(self, tx: Transaction, book_ids: Iterable[UUID]) -> Dict[UUID, Set[UUID]]:
        """Author ids per book; every requested book id is present as a key."""
        ...

    def authors_of(self, tx: Transaction, book_id: UUID) -> List[TimestampedAuthor]:
        ...

    def authors_of_many(
        self, tx: Transaction, book_ids: Iterable[UUID]
    ) -> Dict[UUID, List[TimestampedAuthor]]:
        """
        Full author rows per book in a single query.

        Every requested book id is present as a key; a book without authors
        maps to an empty list.
        """
        ...

    def books_of(self, tx: Transaction, author_id: UUID) -> List[TimestampedBook]:
        """Full book rows (with their author ids) linked to one author."""
        ...

    def books_of_many(
        self, tx: Transaction, author_ids: Iterable[UUID]
    ) -> Dict[UUID, List[TimestampedBook]]:
        """Full book rows per author; every requested author id is a key."""
        ...
