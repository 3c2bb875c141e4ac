"""
Concurrent writers and readers against one database file.

Each worker goes through the services, so these tests cover the
transaction boundaries and lock ordering together.
"""
from concurrent.futures import ThreadPoolExecutor
from datetime import date
import threading

import pytest

from app.domain.value_objects import PublicationStatus

WORKER_TIMEOUT_SECONDS = 30


@pytest.fixture
def three_authors(author_service):
    return [
        author_service.create_author(name, date(1900, 1, 1)).author
        for name in ("Author A", "Author B", "Author C")
    ]


class TestConcurrentWriters:

    def test_overlapping_author_sets_all_complete(self, book_service, three_authors):
        """Writers listing overlapping authors in opposite orders never deadlock."""
        a, b, c = three_authors
        author_sets = [[a.id, b.id], [c.id, b.id], [b.id, a.id], [b.id, c.id]] * 5

        def create(index, author_ids):
            return book_service.create_book(
                f"Book {index}", 100 + index, PublicationStatus.UNPUBLISHED, author_ids
            )

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = [pool.submit(create, i, ids) for i, ids in enumerate(author_sets)]
            results = [f.result(timeout=WORKER_TIMEOUT_SECONDS) for f in futures]

        assert len({r.book.id for r in results}) == len(author_sets)
        for result, ids in zip(results, author_sets):
            assert {x.id for x in result.authors} == set(ids)

    def test_concurrent_updates_of_one_book_serialize(self, book_service, three_authors):
        a, b, c = three_authors
        book = book_service.create_book("Shared", 100, PublicationStatus.UNPUBLISHED, [a.id])

        def update(price, author_ids):
            return book_service.update_book(
                book.book.id, "Shared", price, PublicationStatus.UNPUBLISHED, author_ids
            )

        work = [(p, [a.id, c.id] if p % 2 else [c.id, b.id]) for p in range(1, 21)]
        with ThreadPoolExecutor(max_workers=6) as pool:
            futures = [pool.submit(update, price, ids) for price, ids in work]
            for future in futures:
                future.result(timeout=WORKER_TIMEOUT_SECONDS)

        final = book_service.get_book_with_authors(book.book.id)
        expected = {p: set(ids) for p, ids in work}
        # Whatever write landed last, its price and author set arrived together
        assert {x.id for x in final.authors} == expected[final.book.book.price]


class TestReadersDuringWrites:

    def test_readers_never_see_a_partial_author_set(self, author_service, book_service):
        a, b, c, d = [
            author_service.create_author(f"Author {n}", date(1900, 1, 1)).author
            for n in "ABCD"
        ]
        first, second = {a.id, b.id}, {c.id, d.id}
        book = book_service.create_book("Flip", 1, PublicationStatus.UNPUBLISHED, first)
        book_id = book.book.id
        done = threading.Event()

        def writer():
            try:
                for i in range(20):
                    ids = second if i % 2 == 0 else first
                    book_service.update_book(book_id, "Flip", 1, PublicationStatus.UNPUBLISHED, ids)
            finally:
                done.set()

        def reader():
            observed = []
            while not done.is_set():
                result = book_service.get_book_with_authors(book_id)
                observed.append(frozenset(x.id for x in result.authors))
            return observed

        with ThreadPoolExecutor(max_workers=2) as pool:
            read_future = pool.submit(reader)
            write_future = pool.submit(writer)
            write_future.result(timeout=WORKER_TIMEOUT_SECONDS)
            observed = read_future.result(timeout=WORKER_TIMEOUT_SECONDS)

        assert set(observed) <= {frozenset(first), frozenset(second)}
