"""
Request and response models for the v1 API.
"""

from datetime import date
from enum import Enum
from uuid import UUID

from pydantic import AwareDatetime, BaseModel, Field

from app.domain.value_objects import INT_MAX


class PublicationStatus(str, Enum):
    """API spelling of the publication status."""

    UNPUBLISHED = "UNPUBLISHED"
    PUBLISHED = "PUBLISHED"


# request bodies

class AuthorRequest(BaseModel):
    """
    Request body for POST /authors and PUT /authors/{id}.
    """
    name: str = Field(min_length=1, max_length=200, description="Author name")
    date_of_birth: date = Field(description="Date of birth (not in the future)")


class BookRequest(BaseModel):
    """
    Request body for POST /books and PUT /books/{id}.
    """
    title: str = Field(min_length=1, max_length=400, description="Book title")
    price: int = Field(ge=0, le=INT_MAX, description="Price (0 or more)")
    publication_status: PublicationStatus = Field(description="Publication status")
    author_ids: list[UUID] = Field(min_length=1, description="Ids of existing authors")


# response bodies

class Author(BaseModel):
    """
    API representation of an Author.
    """

    id: UUID = Field(description="Unique identifier for this author")
    name: str = Field(description="Author name")
    date_of_birth: date = Field(description="Date of birth")
    created_at: AwareDatetime = Field(description="When this author was added")
    updated_at: AwareDatetime = Field(description="When this author was last updated")


class BookSummary(BaseModel):
    """Book fields shown next to an author in search results."""

    id: UUID
    title: str
    price: int
    publication_status: PublicationStatus


class AuthorWithBooks(Author):
    """An author search row with the author's books."""

    books: list[BookSummary] = Field(default_factory=list)


class Book(BaseModel):
    """
    API representation of a Book with its authors.
    """

    id: UUID = Field(description="Unique identifier for this book")
    title: str = Field(description="Book title")
    price: int = Field(description="Price")
    publication_status: PublicationStatus = Field(description="Publication status")
    authors: list[Author] = Field(description="Authors of this book")
    created_at: AwareDatetime = Field(description="When this book was added")
    updated_at: AwareDatetime = Field(description="When this book was last updated")


class PageMeta(BaseModel):
    page: int = Field(ge=0, description="Zero-based page number")
    page_size: int = Field(ge=1, description="Requested page size")
    total_elements: int = Field(ge=0, description="Total distinct matches")
    total_pages: int = Field(ge=0, description="Number of pages (0 when empty)")


class PagedAuthors(BaseModel):
    content: list[AuthorWithBooks]
    meta: PageMeta


class PagedBooks(BaseModel):
    content: list[Book]
    meta: PageMeta


class ErrorResponse(BaseModel):
    message: str
