"""
Domain service for author writes and reads.
"""

import logging
from datetime import date
from uuid import UUID

from app.domain.entities import Author, TimestampedAuthor
from app.domain.exceptions import NotFoundError
from app.domain.ports import AuthorRepository, Clock, TransactionManager

logger = logging.getLogger(__name__)


class AuthorService:
    """
    Creates and updates authors, one transaction per write.

    "Today" comes from the injected clock so date-of-birth checks are
    deterministic under test.
    """

    def __init__(
        self,
        transactions: TransactionManager,
        author_repo: AuthorRepository,
        clock: Clock,
    ) -> None:
        self._transactions = transactions
        self._author_repo = author_repo
        self._clock = clock

    def create_author(self, name: str, date_of_birth: date) -> TimestampedAuthor:
        """
        Raises:
            ValidationError: If the name is blank/too long or the date is in the future
        """
        # Validated before any storage work
        author = Author.create(name=name, date_of_birth=date_of_birth, today=self._clock.today())

        with self._transactions.transaction(write=True) as tx:
            stored = self._author_repo.insert(tx, author)

        logger.info("Created author %s", author.id)
        return stored

    def get_author(self, author_id: UUID) -> TimestampedAuthor:
        """
        Raises:
            NotFoundError: If the author does not exist
        """
        with self._transactions.transaction() as tx:
            author = self._author_repo.find_by_id(tx, author_id)
        if author is None:
            raise NotFoundError("Author", author_id)
        return author

    def update_author(self, author_id: UUID, name: str, date_of_birth: date) -> TimestampedAuthor:
        """
        Replace an author's name and date of birth under a row lock.

        Raises:
            NotFoundError: If the author does not exist
            ValidationError: If the new values are invalid
        """
        with self._transactions.transaction(write=True) as tx:
            existing = self._author_repo.find_by_id_for_update(tx, author_id)
            if existing is None:
                raise NotFoundError("Author", author_id)

            updated = existing.update(
                name=name, date_of_birth=date_of_birth, today=self._clock.today()
            )
            stored = self._author_repo.update(tx, updated)

        logger.info("Updated author %s", author_id)
        return stored
