"""
Domain exceptions for the author/book catalog.

These exceptions represent domain-level failures and are independent of
infrastructure concerns (HTTP, SQLite). Each kind maps to a different
externally-visible outcome, so callers should catch the specific subclass
rather than the base.
"""

from typing import Any, Optional


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(CatalogError, ValueError):
    """Raised when a value violates a domain invariant (blank, length, range, empty set)."""

    def __init__(self, field: str, reason: str, value: Any = None):
        super().__init__(
            message=f"{field}: {reason}",
            details={"field": field, "reason": reason, "value": value},
        )
        self.field = field


class NotFoundError(CatalogError):
    """Raised when a lookup by id finds nothing."""

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} with id '{entity_id}' not found",
            details={"entity": entity, "id": str(entity_id)},
        )


class ReferentialError(CatalogError):
    """Raised when one or more referenced authors do not exist."""

    def __init__(self, missing_ids):
        missing = sorted(str(i) for i in missing_ids)
        super().__init__(
            message=f"Referenced authors not found: {', '.join(missing)}",
            details={"missing_author_ids": missing},
        )
        self.missing_ids = missing


class StateTransitionError(CatalogError):
    """Raised when a publication status change is not allowed."""

    def __init__(self, current: Any, requested: Any):
        super().__init__(
            message=f"Cannot change publication status from {current} to {requested}",
            details={"current": str(current), "requested": str(requested)},
        )


class UnexpectedFailure(CatalogError, RuntimeError):
    """Raised for storage failures not covered by the other kinds."""


class LockTimeoutError(UnexpectedFailure):
    """Raised when a lock wait exceeds the configured timeout. Safe to retry."""
