"""
Domain service for filtered, paginated search across books and authors.

Search is read-only and never locks. Each call runs in one read transaction:

1. The repository counts distinct matching ids over the joined view.
2. The repository returns one page of distinct entities ordered by id.
3. This service hydrates the other side of the association for the whole
   page with one batch lookup (never one query per row).
"""

import logging

from app.domain.entities import AuthorWithBooks, BookWithAuthors
from app.domain.ports import (
    AuthorRepository,
    BookAuthorRepository,
    BookRepository,
    TransactionManager,
)
from app.domain.value_objects import (
    AuthorSearchFilters,
    BookSearchFilters,
    Page,
    PageRequest,
)

logger = logging.getLogger(__name__)


class CatalogSearchService:
    """Author-centric and book-centric search over the book/author join."""

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

    def search_books(
        self,
        filters: BookSearchFilters,
        page: PageRequest,
    ) -> Page[BookWithAuthors]:
        """
        Search books and hydrate each one with its authors.

        Args:
            filters: Optional title/author name/price range/status filters
            page: Zero-based page window

        Returns:
            The requested page and the total number of distinct matching books
        """
        with self._transactions.transaction() as tx:
            books, total = self._book_repo.search(tx, filters, page)
            authors_by_book = self._book_author_repo.authors_of_many(
                tx, [b.id for b in books]
            )

        logger.debug("Book search matched %d book(s), page %d", total, page.page)
        return Page(
            items=[BookWithAuthors(book=b, authors=authors_by_book[b.id]) for b in books],
            total_count=total,
            page=page.page,
            page_size=page.page_size,
        )

    def search_authors(
        self,
        filters: AuthorSearchFilters,
        page: PageRequest,
    ) -> Page[AuthorWithBooks]:
        """
        Search authors and hydrate each one with its books.

        Args:
            filters: Optional name/date of birth range/book title/status filters
            page: Zero-based page window

        Returns:
            The requested page and the total number of distinct matching authors
        """
        with self._transactions.transaction() as tx:
            authors, total = self._author_repo.search(tx, filters, page)
            books_by_author = self._book_author_repo.books_of_many(
                tx, [a.id for a in authors]
            )

        logger.debug("Author search matched %d author(s), page %d", total, page.page)
        return Page(
            items=[AuthorWithBooks(author=a, books=books_by_author[a.id]) for a in authors],
            total_count=total,
            page=page.page,
            page_size=page.page_size,
        )
