"""
API endpoints for books.

This module defines the FastAPI routes for creating, reading, updating and
searching books. It handles HTTP concerns and delegates to domain services.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.v1 import schemas as api
from app.api.v1.converters import (
    api_status_to_domain,
    domain_book_page_to_api,
    domain_book_to_api,
)
from app.api.v1.dependencies import get_book_service, get_search_service
from app.domain.services import BookService, CatalogSearchService
from app.domain.value_objects import INT_MAX, BookSearchFilters, PageRequest

router = APIRouter()


@router.post("/books", response_model=api.Book, status_code=status.HTTP_201_CREATED)
def create_book(
    request: api.BookRequest,
    service: BookService = Depends(get_book_service),
) -> api.Book:
    """
    Create a book linked to existing authors.

    Raises:
        400: Invalid fields or unknown author ids
    """
    book = service.create_book(
        title=request.title,
        price=request.price,
        publication_status=api_status_to_domain(request.publication_status),
        author_ids=request.author_ids,
    )
    return domain_book_to_api(book)


@router.get("/books", response_model=api.PagedBooks)
def search_books(
    title: str | None = None,
    author_name: str | None = None,
    price_from: int | None = Query(default=None, ge=0, le=INT_MAX),
    price_to: int | None = Query(default=None, ge=0, le=INT_MAX),
    publication_status: api.PublicationStatus | None = None,
    page: int = Query(default=0, ge=0, le=INT_MAX),
    page_size: int = Query(default=20, ge=1, le=INT_MAX),
    service: CatalogSearchService = Depends(get_search_service),
) -> api.PagedBooks:
    """
    Search books, optionally by author name.

    Each book is counted once, however many of its authors match.
    """
    filters = BookSearchFilters(
        title=title,
        author_name=author_name,
        price_from=price_from,
        price_to=price_to,
        publication_status=api_status_to_domain(publication_status) if publication_status else None,
    )
    result = service.search_books(filters, PageRequest(page=page, page_size=page_size))
    return domain_book_page_to_api(result)


@router.get("/books/{book_id}", response_model=api.Book)
def get_book(
    book_id: UUID,
    service: BookService = Depends(get_book_service),
) -> api.Book:
    """
    Raises:
        404: Book not found
    """
    return domain_book_to_api(service.get_book_with_authors(book_id))


@router.put("/books/{book_id}", response_model=api.Book)
def update_book(
    book_id: UUID,
    request: api.BookRequest,
    service: BookService = Depends(get_book_service),
) -> api.Book:
    """
    Replace a book's fields and authors.

    Raises:
        400: Invalid fields, unknown author ids, or PUBLISHED -> UNPUBLISHED
        404: Book not found
    """
    book = service.update_book(
        book_id,
        title=request.title,
        price=request.price,
        publication_status=api_status_to_domain(request.publication_status),
        author_ids=request.author_ids,
    )
    return domain_book_to_api(book)
