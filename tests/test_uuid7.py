"""
Tests for the UUIDv7 id generator.

Entity ids double as the lock order, so besides RFC 9562 layout these tests
pin down that ids sort the same way as UUIDs, as stored text, and in
creation order.
"""

import time
from uuid import UUID

from app.domain.utils.uuid7 import uuid7


class TestUuid7Layout:
    """RFC 9562 bit layout."""

    def test_returns_version_7_uuid(self):
        result = uuid7()

        assert isinstance(result, UUID)
        assert result.version == 7
        assert len(result.bytes) == 16

    def test_variant_bits_are_10(self):
        variant_bits = (uuid7().bytes[8] >> 6) & 0x03

        assert variant_bits == 0b10

    def test_leading_48_bits_are_unix_milliseconds(self):
        before_ms = int(time.time() * 1000)
        result = uuid7()
        after_ms = int(time.time() * 1000)

        extracted = int.from_bytes(result.bytes[:6], byteorder="big")

        # The counter may borrow the next millisecond under bursts
        assert before_ms <= extracted <= after_ms + 2

    def test_canonical_text_round_trips(self):
        result = uuid7()
        text = str(result)

        assert len(text) == 36
        assert text == text.lower()
        assert UUID(text) == result


class TestUuid7Ordering:
    """Creation order, UUID order and stored-text order agree."""

    def test_ids_are_unique(self):
        assert len({uuid7() for _ in range(1000)}) == 1000

    def test_consecutive_ids_strictly_increase(self):
        """Ids from one process increase even within one millisecond."""
        uuids = [uuid7() for _ in range(2000)]

        assert all(a < b for a, b in zip(uuids, uuids[1:]))

    def test_ids_across_milliseconds_increase(self):
        first = uuid7()
        time.sleep(0.002)
        second = uuid7()

        assert first < second

    def test_text_order_matches_uuid_order(self):
        """Sorting as stored TEXT gives the same order as sorting UUIDs."""
        uuids = [uuid7() for _ in range(200)]
        shuffled = list(reversed(uuids))

        assert sorted(shuffled) == uuids
        assert sorted(str(u) for u in shuffled) == [str(u) for u in uuids]

    def test_counter_overflow_stays_ordered(self):
        """More than 4096 ids in a burst still come out ordered and valid."""
        uuids = [uuid7() for _ in range(5000)]

        assert uuids == sorted(uuids)
        assert all(u.version == 7 for u in uuids)
