"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the database and services
for use with FastAPI's Depends() system.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

import os
from pathlib import Path
from typing import Optional

from app.domain.services import AuthorService, BookService, CatalogSearchService
from app.infrastructure.db.sqlite_author_repository import SqliteAuthorRepository
from app.infrastructure.db.sqlite_book_author_repository import SqliteBookAuthorRepository
from app.infrastructure.db.sqlite_book_repository import SqliteBookRepository
from app.infrastructure.db.sqlite_database import SqliteDatabase
from app.infrastructure.system_clock import SystemClock

# Configuration from environment
DB_PATH = Path(os.getenv("DB_PATH", "data/catalog.db"))
DB_LOCK_TIMEOUT_SECONDS = float(os.getenv("DB_LOCK_TIMEOUT_SECONDS", "5.0"))

# Module-level singletons (initialized lazily)
_database: Optional[SqliteDatabase] = None
_author_service: Optional[AuthorService] = None
_book_service: Optional[BookService] = None
_search_service: Optional[CatalogSearchService] = None


def get_database() -> SqliteDatabase:
    """Provide a singleton instance of the database."""
    global _database
    if _database is None:
        _database = SqliteDatabase(DB_PATH, lock_timeout_seconds=DB_LOCK_TIMEOUT_SECONDS)
    return _database


def build_services(
    database: SqliteDatabase,
    clock=None,
) -> tuple[AuthorService, BookService, CatalogSearchService]:
    """Wire the three services over one database. Also used by scripts and tests."""
    author_repo = SqliteAuthorRepository()
    book_repo = SqliteBookRepository()
    book_author_repo = SqliteBookAuthorRepository(book_repo)

    author_service = AuthorService(
        transactions=database,
        author_repo=author_repo,
        clock=clock or SystemClock(),
    )
    book_service = BookService(
        transactions=database,
        author_repo=author_repo,
        book_repo=book_repo,
        book_author_repo=book_author_repo,
    )
    search_service = CatalogSearchService(
        transactions=database,
        author_repo=author_repo,
        book_repo=book_repo,
        book_author_repo=book_author_repo,
    )
    return author_service, book_service, search_service


def _ensure_services() -> None:
    global _author_service, _book_service, _search_service
    if _author_service is None:
        _author_service, _book_service, _search_service = build_services(get_database())


def get_author_service() -> AuthorService:
    """Provide the Author Service with all dependencies wired."""
    _ensure_services()
    return _author_service


def get_book_service() -> BookService:
    """Provide the Book Service with all dependencies wired."""
    _ensure_services()
    return _book_service


def get_search_service() -> CatalogSearchService:
    """Provide the Catalog Search Service with all dependencies wired."""
    _ensure_services()
    return _search_service


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    This allows tests to inject dependencies by resetting
    the module state between test cases.
    """
    global _database, _author_service, _book_service, _search_service

    _database = None
    _author_service = None
    _book_service = None
    _search_service = None
