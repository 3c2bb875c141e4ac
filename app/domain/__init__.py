"""
Domain layer - Core business logic and entities.

This layer contains the business entities, value objects, and defines
the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import (
    Author,
    AuthorWithBooks,
    Book,
    BookWithAuthors,
    TimestampedAuthor,
    TimestampedBook,
)
from .exceptions import (
    CatalogError,
    LockTimeoutError,
    NotFoundError,
    ReferentialError,
    StateTransitionError,
    UnexpectedFailure,
    ValidationError,
)
from .value_objects import (
    AuthorSearchFilters,
    BookSearchFilters,
    Page,
    PageRequest,
    PublicationStatus,
    calculate_total_pages,
)

__all__ = [
    # Entities
    "Author",
    "Book",
    "TimestampedAuthor",
    "TimestampedBook",
    "BookWithAuthors",
    "AuthorWithBooks",
    # Value Objects
    "PublicationStatus",
    "AuthorSearchFilters",
    "BookSearchFilters",
    "PageRequest",
    "Page",
    "calculate_total_pages",
    # Exceptions
    "CatalogError",
    "ValidationError",
    "NotFoundError",
    "ReferentialError",
    "StateTransitionError",
    "UnexpectedFailure",
    "LockTimeoutError",
]
