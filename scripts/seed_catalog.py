#!/usr/bin/env python3
"""
Catalog Seeding Script.

Creates a small demo catalog through the services, so the same validation
and locking rules apply as for API writes.

Usage:
    python -m scripts.seed_catalog --db-path data/catalog.db
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

from app.api.v1.dependencies import build_services
from app.domain.exceptions import CatalogError
from app.domain.value_objects import PublicationStatus
from app.infrastructure.db.sqlite_database import SqliteDatabase

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/catalog.db")

DEMO_AUTHORS = [
    ("Natsume Soseki", date(1867, 2, 9)),
    ("Akutagawa Ryunosuke", date(1892, 3, 1)),
    ("Miyazawa Kenji", date(1896, 8, 27)),
]

# (title, price, status, indexes into DEMO_AUTHORS)
DEMO_BOOKS = [
    ("Kokoro", 500, PublicationStatus.PUBLISHED, [0]),
    ("Botchan", 400, PublicationStatus.PUBLISHED, [0]),
    ("Rashomon", 350, PublicationStatus.PUBLISHED, [1]),
    ("Night on the Galactic Railroad", 600, PublicationStatus.UNPUBLISHED, [2]),
    ("Letters Between Friends", 800, PublicationStatus.UNPUBLISHED, [0, 1]),
]


def main(db_path: Path) -> int:
    """
    Seed the catalog.

    Args:
        db_path: SQLite file to write to (created if missing)

    Returns:
        Number of books created
    """
    logger.info(f"Seeding catalog at {db_path}")

    database = SqliteDatabase(db_path)
    author_service, book_service, _ = build_services(database)

    author_ids = [
        author_service.create_author(name, dob).id for name, dob in DEMO_AUTHORS
    ]

    for title, price, status, author_indexes in DEMO_BOOKS:
        book_service.create_book(
            title=title,
            price=price,
            publication_status=status,
            author_ids=[author_ids[i] for i in author_indexes],
        )

    logger.info(f"Created {len(author_ids)} authors and {len(DEMO_BOOKS)} books")
    return len(DEMO_BOOKS)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the catalog with demo data")
    parser.add_argument(
        "--db-path",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"SQLite database path (default: {DEFAULT_DB_PATH})",
    )
    args = parser.parse_args()

    try:
        main(args.db_path)
    except CatalogError as e:
        logger.error(f"Seeding failed: {e}")
        sys.exit(1)
