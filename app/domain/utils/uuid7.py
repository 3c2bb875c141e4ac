"""
UUIDv7 generator following RFC 9562.

=============================================================================
TEACHING NOTES: Why time-ordered ids matter for locking
=============================================================================

UUIDv7 layout (128 bits):
- Bits 0-47   (48 bits): Unix timestamp in milliseconds
- Bits 48-51  (4 bits):  version = 0111 (7)
- Bits 52-63  (12 bits): rand_a, used here as a sub-millisecond counter
- Bits 64-65  (2 bits):  variant = 10
- Bits 66-127 (62 bits): random

The write services lock author rows in ascending id order. That only works
if every layer agrees on what "ascending" means. For UUIDv7:

    UUID int order == UUID bytes order == canonical lowercase hex text order

so ``sorted(ids)`` in Python and ``ORDER BY id`` over the TEXT column in
SQLite produce the same sequence.

The 12-bit counter (RFC 9562, section 6.2, method 1) keeps ids generated by
this process strictly increasing even within the same millisecond. When the
counter overflows we borrow the next millisecond.
=============================================================================
"""

import os
import threading
import time
from uuid import UUID

_COUNTER_MAX = 0x0FFF

_lock = threading.Lock()
_last_timestamp_ms = 0
_counter = 0


def _next_timestamp_and_counter() -> tuple[int, int]:
    global _last_timestamp_ms, _counter

    with _lock:
        timestamp_ms = int(time.time() * 1000)

        if timestamp_ms > _last_timestamp_ms:
            # Seed the counter low so a millisecond has room for many ids
            _counter = int.from_bytes(os.urandom(2), "big") & 0x01FF
            _last_timestamp_ms = timestamp_ms
        else:
            _counter += 1
            if _counter > _COUNTER_MAX:
                _last_timestamp_ms += 1
                _counter = 0

        return _last_timestamp_ms, _counter


def uuid7() -> UUID:
    """
    Generate a UUIDv7 (time-ordered) following RFC 9562.

    Ids returned by successive calls in one process are strictly increasing.

    Returns:
        A uuid.UUID instance with version 7.

    Example:
        >>> from app.domain.utils.uuid7 import uuid7
        >>> a, b = uuid7(), uuid7()
        >>> a < b
        True
    """
    timestamp_ms, counter = _next_timestamp_and_counter()
    rand_b = int.from_bytes(os.urandom(8), "big") & ((1 << 62) - 1)

    value = (timestamp_ms & ((1 << 48) - 1)) << 80
    value |= 0x7 << 76
    value |= counter << 64
    value |= 0b10 << 62
    value |= rand_b

    return UUID(int=value)
