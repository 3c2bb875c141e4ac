"""
SQL building blocks for filtered, paginated search over a many-to-many join.

=============================================================================
TEACHING NOTES: Distinct-id search
=============================================================================

Searching books by author name needs the join

    books LEFT JOIN book_authors LEFT JOIN authors

and that join yields one row per (book, author) pair. A book with two
matching authors appears twice, so a naive ``COUNT(*)`` or ``LIMIT/OFFSET``
over the joined rows double-counts and produces short or overlapping pages.

The fix is to count and page over DISTINCT primary ids:

    1. total = SELECT COUNT(*) FROM (SELECT DISTINCT b.id FROM <join> WHERE ...)
    2. ids   = SELECT DISTINCT b.id FROM <join> WHERE ... ORDER BY b.id
               LIMIT ? OFFSET ?
    3. rows  = SELECT * FROM books WHERE id IN (ids)       -- then hydrate

Only the conditions that were supplied are added; they are AND-combined.
=============================================================================
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from app.domain.value_objects import PageRequest

from .sqlite_database import SqliteTransaction


@dataclass(frozen=True)
class SqlCondition:
    """One parameterized predicate."""

    clause: str
    params: Tuple[Any, ...] = ()


def contains_ignore_case(column: str, value: Optional[str]) -> Optional[SqlCondition]:
    """Case-insensitive substring match. None when the filter is absent."""
    if value is None:
        return None
    return SqlCondition(f"instr(casefold({column}), ?) > 0", (value.casefold(),))


def at_least(column: str, value: Any) -> Optional[SqlCondition]:
    if value is None:
        return None
    return SqlCondition(f"{column} >= ?", (value,))


def at_most(column: str, value: Any) -> Optional[SqlCondition]:
    if value is None:
        return None
    return SqlCondition(f"{column} <= ?", (value,))


def equals(column: str, value: Any) -> Optional[SqlCondition]:
    if value is None:
        return None
    return SqlCondition(f"{column} = ?", (value,))


def where_clause(conditions: Sequence[Optional[SqlCondition]]) -> Tuple[str, List[Any]]:
    """AND-combine the supplied conditions, skipping absent ones."""
    present = [c for c in conditions if c is not None]
    if not present:
        return "", []

    sql = " WHERE " + " AND ".join(f"({c.clause})" for c in present)
    params = [p for c in present for p in c.params]
    return sql, params


def count_distinct(
    tx: SqliteTransaction,
    id_column: str,
    from_clause: str,
    conditions: Sequence[Optional[SqlCondition]],
) -> int:
    """Number of distinct primary ids matching the conditions over the join."""
    where, params = where_clause(conditions)
    row = tx.execute(
        f"SELECT COUNT(*) AS cnt FROM (SELECT DISTINCT {id_column} FROM {from_clause}{where})",
        params,
    ).fetchone()
    return row["cnt"]


def page_distinct_ids(
    tx: SqliteTransaction,
    id_column: str,
    from_clause: str,
    conditions: Sequence[Optional[SqlCondition]],
    page: PageRequest,
) -> List[str]:
    """One page of distinct primary ids, ordered ascending."""
    where, params = where_clause(conditions)
    rows = tx.execute(
        f"SELECT DISTINCT {id_column} AS id FROM {from_clause}{where} "
        f"ORDER BY {id_column} LIMIT ? OFFSET ?",
        [*params, page.limit, page.offset],
    ).fetchall()
    return [row["id"] for row in rows]
