"""
Converters between domain entities/value objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from app.domain import entities as domain
from app.domain import value_objects as domain_vo
from app.api.v1 import schemas as api


def api_status_to_domain(status: api.PublicationStatus) -> domain_vo.PublicationStatus:
    return domain_vo.PublicationStatus(status.value)


def domain_status_to_api(status: domain_vo.PublicationStatus) -> api.PublicationStatus:
    return api.PublicationStatus(status.value)


def domain_author_to_api(author: domain.TimestampedAuthor) -> api.Author:
    """
    Convert a domain author (with storage timestamps) to an API Author model.
    """
    return api.Author(
        id=author.author.id,
        name=author.author.name,
        date_of_birth=author.author.date_of_birth,
        created_at=author.created_at,
        updated_at=author.updated_at,
    )


def domain_book_summary_to_api(book: domain.TimestampedBook) -> api.BookSummary:
    return api.BookSummary(
        id=book.book.id,
        title=book.book.title,
        price=book.book.price,
        publication_status=domain_status_to_api(book.book.publication_status),
    )


def domain_author_with_books_to_api(row: domain.AuthorWithBooks) -> api.AuthorWithBooks:
    return api.AuthorWithBooks(
        **domain_author_to_api(row.author).model_dump(),
        books=[domain_book_summary_to_api(b) for b in row.books],
    )


def domain_book_to_api(book: domain.BookWithAuthors) -> api.Book:
    """
    Convert a hydrated domain book to an API Book model.

    Args:
        book: Book with its timestamps and full author rows

    Returns:
        API Book model
    """
    return api.Book(
        id=book.book.book.id,
        title=book.book.book.title,
        price=book.book.book.price,
        publication_status=domain_status_to_api(book.book.book.publication_status),
        authors=[domain_author_to_api(a) for a in book.authors],
        created_at=book.book.created_at,
        updated_at=book.book.updated_at,
    )


def domain_page_meta_to_api(page: domain_vo.Page) -> api.PageMeta:
    return api.PageMeta(
        page=page.page,
        page_size=page.page_size,
        total_elements=page.total_count,
        total_pages=page.total_pages,
    )


def domain_author_page_to_api(page: domain_vo.Page) -> api.PagedAuthors:
    return api.PagedAuthors(
        content=[domain_author_with_books_to_api(row) for row in page.items],
        meta=domain_page_meta_to_api(page),
    )


def domain_book_page_to_api(page: domain_vo.Page) -> api.PagedBooks:
    return api.PagedBooks(
        content=[domain_book_to_api(row) for row in page.items],
        meta=domain_page_meta_to_api(page),
    )
