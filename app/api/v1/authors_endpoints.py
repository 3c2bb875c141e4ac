"""
API endpoints for authors.

This module defines the FastAPI routes for creating, reading, updating and
searching authors. It handles HTTP concerns and delegates to domain services;
domain exceptions are mapped to responses in ``errors.py``.
"""

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.v1 import schemas as api
from app.api.v1.converters import (
    api_status_to_domain,
    domain_author_page_to_api,
    domain_author_to_api,
    domain_book_to_api,
)
from app.api.v1.dependencies import (
    get_author_service,
    get_book_service,
    get_search_service,
)
from app.domain.services import AuthorService, BookService, CatalogSearchService
from app.domain.value_objects import INT_MAX, AuthorSearchFilters, PageRequest

router = APIRouter()


@router.post("/authors", response_model=api.Author, status_code=status.HTTP_201_CREATED)
def create_author(
    request: api.AuthorRequest,
    service: AuthorService = Depends(get_author_service),
) -> api.Author:
    """
    Create an author.

    Raises:
        400: Blank or too long name, or date of birth in the future
    """
    author = service.create_author(name=request.name, date_of_birth=request.date_of_birth)
    return domain_author_to_api(author)


@router.get("/authors", response_model=api.PagedAuthors)
def search_authors(
    name: str | None = None,
    date_of_birth_from: date | None = None,
    date_of_birth_to: date | None = None,
    book_title: str | None = None,
    publication_status: api.PublicationStatus | None = None,
    page: int = Query(default=0, ge=0, le=INT_MAX),
    page_size: int = Query(default=20, ge=1, le=INT_MAX),
    service: CatalogSearchService = Depends(get_search_service),
) -> api.PagedAuthors:
    """
    Search authors, optionally by their books' title or status.

    Each author is counted once, however many of its books match.
    """
    filters = AuthorSearchFilters(
        name=name,
        date_of_birth_from=date_of_birth_from,
        date_of_birth_to=date_of_birth_to,
        book_title=book_title,
        publication_status=api_status_to_domain(publication_status) if publication_status else None,
    )
    result = service.search_authors(filters, PageRequest(page=page, page_size=page_size))
    return domain_author_page_to_api(result)


@router.get("/authors/{author_id}", response_model=api.Author)
def get_author(
    author_id: UUID,
    service: AuthorService = Depends(get_author_service),
) -> api.Author:
    """
    Raises:
        404: Author not found
    """
    return domain_author_to_api(service.get_author(author_id))


@router.put("/authors/{author_id}", response_model=api.Author)
def update_author(
    author_id: UUID,
    request: api.AuthorRequest,
    service: AuthorService = Depends(get_author_service),
) -> api.Author:
    author = service.update_author(
        author_id, name=request.name, date_of_birth=request.date_of_birth
    )
    return domain_author_to_api(author)


@router.get("/authors/{author_id}/books", response_model=list[api.Book])
def get_books_by_author(
    author_id: UUID,
    service: BookService = Depends(get_book_service),
) -> list[api.Book]:
    """
    List the books of an author.

    Raises:
        404: Author not found (an existing author with no books gives [])
    """
    books = service.get_books_by_author(author_id)
    return [domain_book_to_api(b) for b in service.get_books_with_authors(books)]
