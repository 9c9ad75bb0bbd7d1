"""Create the configured database, its tables and the default categories."""
from __future__ import annotations

import argparse
import logging
import sys
from urllib.parse import urlsplit, urlunsplit

import psycopg
from psycopg import sql
from sqlalchemy import select
from sqlalchemy.orm import Session

from ventboard.core.settings import settings
from ventboard.db.session import create_tables, session_scope
from ventboard.models import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES: tuple[tuple[str, str], ...] = (
    ("Work", "work"),
    ("Relationships", "relationships"),
    ("Technology", "technology"),
    ("Health", "health"),
    ("Parenting", "parenting"),
    ("Finance", "finance"),
    ("Daily Life", "daily-life"),
    ("Social", "social"),
    ("Other", "other"),
)


def ensure_postgres_database(db_url: str) -> None:
    """Create the target Postgres database through the maintenance database if missing."""
    _, rest = db_url.split("://", 1)
    parts = urlsplit(f"postgresql://{rest}")
    target_db = parts.path.lstrip("/") or "postgres"
    admin_url = urlunsplit(("postgresql", parts.netloc, "/postgres", parts.query, ""))

    with psycopg.connect(admin_url, autocommit=True) as conn, conn.cursor() as cur:
        cur.execute("SELECT 1 FROM pg_database WHERE datname = %s", (target_db,))
        if cur.fetchone() is None:
            cur.execute(sql.SQL("CREATE DATABASE {}").format(sql.Identifier(target_db)))
            logger.info("Created database %s", target_db)
        else:
            logger.info("Database %s already exists", target_db)


def seed_categories(db: Session) -> int:
    """Insert the default categories that are missing and return how many were added."""
    existing = set(db.scalars(select(Category.slug)).all())
    added = 0
    for name, slug in DEFAULT_CATEGORIES:
        if slug not in existing:
            db.add(Category(name=name, slug=slug))
            added += 1
    db.commit()
    return added


def main() -> None:
    parser = argparse.ArgumentParser(description="Initialise the ventboard database")
    parser.add_argument(
        "--skip-seed",
        action="store_true",
        help="Create tables only, without the default categories.",
    )
    args = parser.parse_args()
    logging.basicConfig(level=settings.log_level.upper())

    url = settings.sqlalchemy_url
    try:
        if url.startswith("postgresql"):
            ensure_postgres_database(url)
        create_tables()
        if not args.skip_seed:
            with session_scope() as db:
                added = seed_categories(db)
            logger.info("Seeded %d categories", added)
    except Exception as exc:
        logger.error("Database initialisation failed: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
