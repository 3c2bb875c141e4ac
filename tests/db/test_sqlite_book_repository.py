"""
Tests for SqliteBookRepository.

Test Pattern: AAA (Arrange-Act-Assert)
"""
from datetime import date

import pytest

from app.domain.entities import Author, Book
from app.domain.exceptions import NotFoundError, UnexpectedFailure
from app.domain.utils.uuid7 import uuid7
from app.domain.value_objects import BookSearchFilters, PageRequest, PublicationStatus

TODAY = date(2024, 6, 1)


@pytest.fixture
def authors(database, author_repo):
    """Three stored authors: Natsume Soseki, Mori Ogai, Higuchi Ichiyo."""
    created = [
        Author.create("Natsume Soseki", date(1867, 2, 9), today=TODAY),
        Author.create("Mori Ogai", date(1862, 2, 17), today=TODAY),
        Author.create("Higuchi Ichiyo", date(1872, 5, 2), today=TODAY),
    ]
    with database.transaction(write=True) as tx:
        for author in created:
            author_repo.insert(tx, author)
    return created


@pytest.fixture
def store_book(database, book_repo, book_author_repo):
    def _store(title, author_ids, price=100, status=PublicationStatus.UNPUBLISHED):
        book = Book.create(title, price, status, author_ids)
        with database.transaction(write=True) as tx:
            book_repo.insert(tx, book)
            book_author_repo.insert(tx, book.id, book.author_ids)
        return book

    return _store


class TestInsertAndFind:

    def test_find_by_id_hydrates_author_ids(self, database, book_repo, authors, store_book):
        soseki, ogai, _ = authors
        book = store_book("Kokoro", [soseki.id, ogai.id], price=500)

        with database.transaction() as tx:
            retrieved = book_repo.find_by_id(tx, book.id)

        assert retrieved.book == book
        assert retrieved.book.author_ids == frozenset({soseki.id, ogai.id})
        assert retrieved.created_at == retrieved.updated_at

    def test_find_by_id_missing(self, database, book_repo):
        with database.transaction() as tx:
            assert book_repo.find_by_id(tx, uuid7()) is None

    def test_price_zero_is_stored(self, database, book_repo, authors, store_book):
        book = store_book("Free", [authors[0].id], price=0)

        with database.transaction() as tx:
            assert book_repo.find_by_id(tx, book.id).book.price == 0

    def test_schema_rejects_negative_price(self, database, book_repo, authors):
        """The CHECK constraint backs up the entity rule."""
        book = Book.create("Title", 100, PublicationStatus.UNPUBLISHED, [authors[0].id])
        object.__setattr__(book, "price", -1)

        with pytest.raises(UnexpectedFailure):
            with database.transaction(write=True) as tx:
                book_repo.insert(tx, book)


class TestUpdate:

    def test_update_keeps_created_at(self, database, book_repo, authors, store_book):
        book = store_book("Draft", [authors[0].id])
        with database.transaction() as tx:
            before = book_repo.find_by_id(tx, book.id)

        published = book.update("Final", 900, PublicationStatus.PUBLISHED, book.author_ids)
        with database.transaction(write=True) as tx:
            stored = book_repo.update(tx, published)

        assert stored.created_at == before.created_at
        with database.transaction() as tx:
            after = book_repo.find_by_id(tx, book.id)
        assert after.book.title == "Final"
        assert after.book.publication_status is PublicationStatus.PUBLISHED

    def test_update_missing_book_raises(self, database, book_repo):
        ghost = Book.create("Ghost", 1, PublicationStatus.UNPUBLISHED, [uuid7()])

        with pytest.raises(NotFoundError):
            with database.transaction(write=True) as tx:
                book_repo.update(tx, ghost)


class TestExistsAndLocking:

    def test_exists_all(self, database, book_repo, authors, store_book):
        a = store_book("A", [authors[0].id])
        b = store_book("B", [authors[0].id])

        with database.transaction() as tx:
            assert book_repo.exists(tx, a.id) is True
            assert book_repo.exists_all(tx, [a.id, b.id]) is True
            assert book_repo.exists_all(tx, [a.id, uuid7()]) is False
            assert book_repo.exists_all(tx, []) is True

    def test_find_by_ids_for_update_ascending(self, database, book_repo, authors, store_book):
        books = [store_book(f"Book {i}", [authors[0].id]) for i in range(4)]

        with database.transaction(write=True) as tx:
            locked = book_repo.find_by_ids_for_update(tx, [b.id for b in reversed(books)])

        assert [b.id for b in locked] == sorted(b.id for b in books)

    def test_find_by_id_for_update_carries_author_ids(self, database, book_repo, authors, store_book):
        book = store_book("Kokoro", [authors[0].id, authors[1].id])

        with database.transaction(write=True) as tx:
            locked = book_repo.find_by_id_for_update(tx, book.id)

        assert locked.author_ids == book.author_ids


class TestSearch:

    def test_title_is_case_insensitive(self, database, book_repo, authors, store_book):
        store_book("Kokoro", [authors[0].id])
        store_book("Botchan", [authors[0].id])

        with database.transaction() as tx:
            items, total = book_repo.search(tx, BookSearchFilters(title="KOKO"), PageRequest())

        assert total == 1
        assert items[0].book.title == "Kokoro"

    def test_title_matches_non_ascii_case_insensitively(self, database, book_repo, authors, store_book):
        store_book("Élan Vital", [authors[0].id])

        with database.transaction() as tx:
            _, total = book_repo.search(tx, BookSearchFilters(title="élan"), PageRequest())

        assert total == 1

    def test_price_range_is_inclusive(self, database, book_repo, authors, store_book):
        for price in (99, 100, 150, 200, 201):
            store_book(f"Priced {price}", [authors[0].id], price=price)

        with database.transaction() as tx:
            items, total = book_repo.search(
                tx, BookSearchFilters(price_from=100, price_to=200), PageRequest()
            )

        assert total == 3
        assert sorted(i.book.price for i in items) == [100, 150, 200]

    def test_status_filter(self, database, book_repo, authors, store_book):
        store_book("Out", [authors[0].id], status=PublicationStatus.PUBLISHED)
        store_book("Draft", [authors[0].id])

        with database.transaction() as tx:
            items, total = book_repo.search(
                tx,
                BookSearchFilters(publication_status=PublicationStatus.UNPUBLISHED),
                PageRequest(),
            )

        assert total == 1
        assert items[0].book.title == "Draft"

    def test_book_with_two_matching_authors_counted_once(
        self, database, book_repo, authors, store_book
    ):
        soseki, ogai, _ = authors
        book = store_book("Joint Work", [soseki.id, ogai.id])

        # "o" appears in both author names
        with database.transaction() as tx:
            items, total = book_repo.search(tx, BookSearchFilters(author_name="o"), PageRequest())

        assert total == 1
        assert [i.id for i in items] == [book.id]

    def test_author_name_filter_excludes_other_authors_books(
        self, database, book_repo, authors, store_book
    ):
        soseki, ogai, ichiyo = authors
        store_book("Kokoro", [soseki.id])
        store_book("Takekurabe", [ichiyo.id])

        with database.transaction() as tx:
            items, total = book_repo.search(
                tx, BookSearchFilters(author_name="ichiyo"), PageRequest()
            )

        assert total == 1
        assert items[0].book.title == "Takekurabe"

    def test_page_beyond_last_is_empty_but_counts(self, database, book_repo, authors, store_book):
        for i in range(3):
            store_book(f"Book {i}", [authors[0].id])

        with database.transaction() as tx:
            items, total = book_repo.search(
                tx, BookSearchFilters(), PageRequest(page=5, page_size=2)
            )

        assert items == []
        assert total == 3

    def test_page_items_are_ordered_by_id(self, database, book_repo, authors, store_book):
        books = [store_book(f"Book {i}", [authors[0].id]) for i in range(5)]

        with database.transaction() as tx:
            items, _ = book_repo.search(tx, BookSearchFilters(), PageRequest(page=1, page_size=2))

        assert [i.id for i in items] == sorted(b.id for b in books)[2:4]
