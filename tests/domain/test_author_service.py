"""
Tests for AuthorService.
"""
from datetime import date, timedelta

import pytest

from app.domain.exceptions import NotFoundError, ValidationError
from app.domain.utils.uuid7 import uuid7
from app.domain.value_objects import AuthorSearchFilters, PageRequest


class TestCreateAuthor:

    def test_create_and_get(self, author_service):
        created = author_service.create_author("Natsume Soseki", date(1867, 2, 9))

        fetched = author_service.get_author(created.id)

        assert fetched.author == created.author
        assert fetched.created_at == created.created_at

    def test_date_of_birth_is_checked_against_the_clock(self, author_service, clock):
        with pytest.raises(ValidationError, match="date_of_birth"):
            author_service.create_author("Too Early", clock.today() + timedelta(days=1))

        # Moving the clock forward makes the same date valid
        clock.current = clock.today() + timedelta(days=1)
        created = author_service.create_author("On Time", clock.today())

        assert created.author.date_of_birth == clock.today()

    def test_invalid_author_is_not_stored(self, author_service, search_service):
        with pytest.raises(ValidationError):
            author_service.create_author("   ", date(1990, 1, 1))

        page = search_service.search_authors(AuthorSearchFilters(), PageRequest())
        assert page.total_count == 0

    def test_get_missing_author(self, author_service):
        with pytest.raises(NotFoundError, match="Author with id"):
            author_service.get_author(uuid7())


class TestUpdateAuthor:

    def test_update_replaces_fields(self, author_service):
        created = author_service.create_author("Old", date(1990, 1, 1))

        updated = author_service.update_author(created.id, "New", date(1985, 3, 3))

        assert updated.id == created.id
        assert updated.author.name == "New"
        assert author_service.get_author(created.id).author.date_of_birth == date(1985, 3, 3)

    def test_update_missing_author(self, author_service):
        with pytest.raises(NotFoundError):
            author_service.update_author(uuid7(), "Name", date(1990, 1, 1))

    def test_invalid_update_leaves_author_unchanged(self, author_service):
        created = author_service.create_author("Keep", date(1990, 1, 1))

        with pytest.raises(ValidationError):
            author_service.update_author(created.id, "x" * 201, date(1990, 1, 1))

        assert author_service.get_author(created.id).author.name == "Keep"
