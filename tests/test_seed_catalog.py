"""
Tests for the catalog seeding script.
"""

from scripts.seed_catalog import DEMO_AUTHORS, DEMO_BOOKS, main

from app.api.v1.dependencies import build_services
from app.domain.value_objects import (
    AuthorSearchFilters,
    BookSearchFilters,
    PageRequest,
)
from app.infrastructure.db.sqlite_database import SqliteDatabase


def test_seed_creates_demo_catalog(tmp_path):
    db_path = tmp_path / "seeded.db"

    created = main(db_path)

    assert created == len(DEMO_BOOKS)
    _, _, search_service = build_services(SqliteDatabase(db_path))
    books = search_service.search_books(BookSearchFilters(), PageRequest(page_size=100))
    authors = search_service.search_authors(AuthorSearchFilters(), PageRequest(page_size=100))
    assert books.total_count == len(DEMO_BOOKS)
    assert authors.total_count == len(DEMO_AUTHORS)


def test_seeded_coauthored_book_is_found_once(tmp_path):
    db_path = tmp_path / "seeded.db"
    main(db_path)

    _, _, search_service = build_services(SqliteDatabase(db_path))
    result = search_service.search_books(
        BookSearchFilters(title="Letters"), PageRequest()
    )

    assert result.total_count == 1
    assert len(result.items[0].authors) == 2
