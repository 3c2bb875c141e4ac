"""
Domain entities for the author/book catalog.

Entities are objects with a unique identity that runs through time and
different representations. ``Author`` and ``Book`` are immutable: an update
produces a new validated value with the same id.

Validation is pure and local. Anything that depends on "now" receives the
current date as an argument so the rules stay deterministic under test.
"""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import FrozenSet, Iterable, List, Optional
from uuid import UUID

from .exceptions import StateTransitionError, ValidationError
from .utils.uuid7 import uuid7
from .value_objects import INT_MAX, PublicationStatus

AUTHOR_NAME_MAX_LENGTH = 200
BOOK_TITLE_MAX_LENGTH = 400


def _require_text(field_name: str, value: str, max_length: int) -> None:
    if value is None or not value.strip():
        raise ValidationError(field_name, "must not be blank", value)
    if len(value) > max_length:
        raise ValidationError(
            field_name, f"must be at most {max_length} characters", len(value)
        )


@dataclass(frozen=True)
class Author:
    """
    Represents an author in the catalog.

    Invariants:
    - name is non-blank and at most 200 characters
    - date_of_birth is not in the future (checked by ``create``/``update``)
    """

    id: UUID
    """Time-ordered identifier, assigned at creation"""

    name: str
    """Display name"""

    date_of_birth: date
    """Date of birth"""

    def __post_init__(self) -> None:
        """Validate author data."""
        _require_text("name", self.name, AUTHOR_NAME_MAX_LENGTH)

    @staticmethod
    def _check_date_of_birth(date_of_birth: date, today: date) -> None:
        if date_of_birth > today:
            raise ValidationError(
                "date_of_birth", f"must not be after {today.isoformat()}", date_of_birth
            )

    @staticmethod
    def create(
        name: str,
        date_of_birth: date,
        today: date,
        id: Optional[UUID] = None,
    ) -> "Author":
        """
        Factory method to create a new author with auto-generated ID.

        Args:
            name: Author name
            date_of_birth: Date of birth
            today: Current date according to the caller's clock
            id: Explicit id, mostly for tests

        Returns:
            A new validated Author

        Raises:
            ValidationError: If any field violates an invariant
        """
        Author._check_date_of_birth(date_of_birth, today)
        return Author(id=id or uuid7(), name=name, date_of_birth=date_of_birth)

    def update(self, name: str, date_of_birth: date, today: date) -> "Author":
        """Return a new Author with the same id and the given fields."""
        Author._check_date_of_birth(date_of_birth, today)
        return replace(self, name=name, date_of_birth=date_of_birth)


@dataclass(frozen=True)
class Book:
    """
    Represents a book in the catalog.

    A book references one or more authors by id. The association rows are
    owned by the book and are rewritten whenever the book changes.
    """

    id: UUID
    """Time-ordered identifier, assigned at creation"""

    title: str
    """Book title"""

    price: int
    """Price in the smallest currency unit"""

    publication_status: PublicationStatus
    """Current publication status"""

    author_ids: FrozenSet[UUID] = field(default_factory=frozenset)
    """Ids of the authors of this book (at least one)"""

    def __post_init__(self) -> None:
        """Validate book data."""
        _require_text("title", self.title, BOOK_TITLE_MAX_LENGTH)

        if isinstance(self.price, bool) or not isinstance(self.price, int):
            raise ValidationError("price", "must be an integer", self.price)
        if self.price < 0:
            raise ValidationError("price", "must be >= 0", self.price)
        if self.price > INT_MAX:
            raise ValidationError("price", f"must be <= {INT_MAX}", self.price)

        if not isinstance(self.publication_status, PublicationStatus):
            raise ValidationError(
                "publication_status", "unknown status", self.publication_status
            )

        if not isinstance(self.author_ids, frozenset):
            object.__setattr__(self, "author_ids", frozenset(self.author_ids))
        if not self.author_ids:
            raise ValidationError("author_ids", "a book needs at least one author")

    @staticmethod
    def create(
        title: str,
        price: int,
        publication_status: PublicationStatus,
        author_ids: Iterable[UUID],
        id: Optional[UUID] = None,
    ) -> "Book":
        """
        Factory method to create a new book with auto-generated ID.

        Raises:
            ValidationError: If any field violates an invariant
        """
        return Book(
            id=id or uuid7(),
            title=title,
            price=price,
            publication_status=publication_status,
            author_ids=frozenset(author_ids),
        )

    def update(
        self,
        title: str,
        price: int,
        publication_status: PublicationStatus,
        author_ids: Iterable[UUID],
    ) -> "Book":
        """
        Return a new Book with the same id and the given fields.

        The transition is checked against this instance's status, which is
        the persisted one when called by the services.

        Raises:
            StateTransitionError: If the status change is not allowed
            ValidationError: If any field violates an invariant
        """
        if not self.publication_status.can_transition_to(publication_status):
            raise StateTransitionError(self.publication_status, publication_status)

        return replace(
            self,
            title=title,
            price=price,
            publication_status=publication_status,
            author_ids=frozenset(author_ids),
        )


@dataclass(frozen=True)
class TimestampedAuthor:
    """An author together with the timestamps assigned by storage."""

    author: Author
    created_at: datetime
    updated_at: datetime

    @property
    def id(self) -> UUID:
        return self.author.id


@dataclass(frozen=True)
class TimestampedBook:
    """A book together with the timestamps assigned by storage."""

    book: Book
    created_at: datetime
    updated_at: datetime

    @property
    def id(self) -> UUID:
        return self.book.id


@dataclass(frozen=True)
class BookWithAuthors:
    """A book hydrated with its full author rows."""

    book: TimestampedBook
    authors: List[TimestampedAuthor] = field(default_factory=list)


@dataclass(frozen=True)
class AuthorWithBooks:
    """An author hydrated with the books it is associated with."""

    author: TimestampedAuthor
    books: List[TimestampedBook] = field(default_factory=list)
