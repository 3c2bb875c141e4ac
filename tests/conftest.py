"""
Shared fixtures for the catalog tests.

Every test gets its own SQLite file under pytest's tmp_path, so tests are
isolated and can open several connections to the same database.
"""

from datetime import date

import pytest

from app.api.v1.dependencies import build_services
from app.infrastructure.db.sqlite_author_repository import SqliteAuthorRepository
from app.infrastructure.db.sqlite_book_author_repository import SqliteBookAuthorRepository
from app.infrastructure.db.sqlite_book_repository import SqliteBookRepository
from app.infrastructure.db.sqlite_database import SqliteDatabase


class FixedClock:
    """Clock whose current date is set by the test."""

    def __init__(self, current: date) -> None:
        self.current = current

    def today(self) -> date:
        return self.current


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test_catalog.db"


@pytest.fixture
def database(db_path):
    return SqliteDatabase(db_path, lock_timeout_seconds=10.0)


@pytest.fixture
def clock():
    return FixedClock(date(2024, 6, 1))


@pytest.fixture
def author_repo():
    return SqliteAuthorRepository()


@pytest.fixture
def book_repo():
    return SqliteBookRepository()


@pytest.fixture
def book_author_repo(book_repo):
    return SqliteBookAuthorRepository(book_repo)


@pytest.fixture
def services(database, clock):
    return build_services(database, clock=clock)


@pytest.fixture
def author_service(services):
    return services[0]


@pytest.fixture
def book_service(services):
    return services[1]


@pytest.fixture
def search_service(services):
    return services[2]
