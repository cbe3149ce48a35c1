"""
Database initialization script for the typing test backend.

Creates the tables the backend needs and seeds the default texts.
Usage: python init_db.py [path/to/database.db]
"""
import logging
import sys

from config import Settings
from db import init_db
from models.text_manager import TextManager

logger = logging.getLogger("init_db")


def main(argv: list[str]) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    db_path = argv[1] if len(argv) > 1 else Settings.from_env().database
    logger.info("Initializing database at: %s", db_path)

    with init_db(db_path) as db_manager:
        added = TextManager(db_manager).ensure_default_texts()
        logger.info("Added %d default texts", added)
        logger.info("Tables in the database: %s", ", ".join(db_manager.list_tables()))
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv))
