"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from .exceptions import ValidationError

T = TypeVar("T")

# Largest price, page or page size accepted; matches a signed 32-bit integer
INT_MAX = 2**31 - 1


class PublicationStatus(Enum):
    """
    Publication state of a book.

    The allowed transitions are listed explicitly in ``_TRANSITIONS`` so that
    adding a new status forces a decision about where it may move to.
    """

    UNPUBLISHED = "UNPUBLISHED"
    PUBLISHED = "PUBLISHED"

    def can_transition_to(self, new_status: "PublicationStatus") -> bool:
        """Check whether moving from this status to ``new_status`` is allowed."""
        return new_status in _TRANSITIONS[self]

    def __str__(self) -> str:
        return self.value


_TRANSITIONS = {
    PublicationStatus.UNPUBLISHED: frozenset(
        {PublicationStatus.UNPUBLISHED, PublicationStatus.PUBLISHED}
    ),
    # Published is terminal
    PublicationStatus.PUBLISHED: frozenset({PublicationStatus.PUBLISHED}),
}


def _check_at_most(field_name: str, value, limit: int) -> None:
    if value is not None and value > limit:
        raise ValidationError(field_name, f"must be <= {limit}", value)


def _check_range(field_name: str, low, high) -> None:
    if low is not None and high is not None and low > high:
        raise ValidationError(
            field_name,
            f"lower bound ({low}) cannot be greater than upper bound ({high})",
        )


@dataclass(frozen=True)
class AuthorSearchFilters:
    """
    Filters for author search.

    All filters are optional. When a filter is None, it means "no restriction".
    """

    name: Optional[str] = None
    """Case-insensitive substring of the author name"""

    date_of_birth_from: Optional[date] = None
    """Earliest date of birth (inclusive)"""

    date_of_birth_to: Optional[date] = None
    """Latest date of birth (inclusive)"""

    book_title: Optional[str] = None
    """Case-insensitive substring of the title of any of the author's books"""

    publication_status: Optional[PublicationStatus] = None
    """Exact status of any of the author's books"""

    def __post_init__(self) -> None:
        """Validate filter constraints."""
        _check_range("date_of_birth", self.date_of_birth_from, self.date_of_birth_to)

    def touches_books(self) -> bool:
        """Check if any filter applies to the joined book side."""
        return self.book_title is not None or self.publication_status is not None


@dataclass(frozen=True)
class BookSearchFilters:
    """
    Filters for book search.

    All filters are optional. When a filter is None, it means "no restriction".
    """

    title: Optional[str] = None
    """Case-insensitive substring of the title"""

    author_name: Optional[str] = None
    """Case-insensitive substring of the name of any of the book's authors"""

    price_from: Optional[int] = None
    """Minimum price (inclusive)"""

    price_to: Optional[int] = None
    """Maximum price (inclusive)"""

    publication_status: Optional[PublicationStatus] = None
    """Exact publication status"""

    def __post_init__(self) -> None:
        """Validate filter constraints."""
        _check_at_most("price_from", self.price_from, INT_MAX)
        _check_at_most("price_to", self.price_to, INT_MAX)
        _check_range("price", self.price_from, self.price_to)

    def touches_authors(self) -> bool:
        """Check if any filter applies to the joined author side."""
        return self.author_name is not None


@dataclass(frozen=True)
class PageRequest:
    """Zero-based page window."""

    page: int = 0
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.page < 0:
            raise ValidationError("page", "must be >= 0", self.page)
        if self.page_size < 1:
            raise ValidationError("page_size", "must be >= 1", self.page_size)
        _check_at_most("page", self.page, INT_MAX)
        _check_at_most("page_size", self.page_size, INT_MAX)

    @property
    def offset(self) -> int:
        return self.page * self.page_size

    @property
    def limit(self) -> int:
        return self.page_size


def calculate_total_pages(total_count: int, page_size: int) -> int:
    """
    Number of pages needed to show ``total_count`` items.

    Returns 0 for an empty result; ``page_size`` must be at least 1.
    """
    if page_size < 1:
        raise ValidationError("page_size", "must be >= 1", page_size)
    if total_count == 0:
        return 0
    return (total_count - 1) // page_size + 1


@dataclass(frozen=True)
class Page(Generic[T]):
    """One window of search results plus the total match count."""

    items: List[T] = field(default_factory=list)
    total_count: int = 0
    page: int = 0
    page_size: int = 20

    def __post_init__(self) -> None:
        if self.total_count < 0:
            raise ValueError(f"total_count cannot be negative, got {self.total_count}")

    @property
    def total_pages(self) -> int:
        return calculate_total_pages(self.total_count, self.page_size)
