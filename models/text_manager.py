"""
TextManager: Class for managing typing-test texts in the database.
"""

import logging
import random
import sqlite3
from datetime import datetime
from typing import List, Optional

from db.database_manager import DatabaseManager
from models.text import Text

logger = logging.getLogger(__name__)

DEFAULT_TEXTS: List[dict[str, str]] = [
    {
        "title": "Python Basics",
        "content": (
            "Python is an interpreted, high-level, general-purpose programming language. "
            "Created by Guido van Rossum and first released in 1991, Python has a design "
            "philosophy that emphasizes code readability, notably using significant whitespace."
        ),
    },
    {
        "title": "Shakespeare - Hamlet",
        "content": (
            "To be, or not to be, that is the question: Whether 'tis nobler in the mind to "
            "suffer The slings and arrows of outrageous fortune, Or to take arms against a sea "
            "of troubles And by opposing end them."
        ),
    },
    {
        "title": "Theory of Relativity",
        "content": (
            "In physics, the theory of relativity is the scientific theory regarding the "
            "relationship between space and time. Albert Einstein's theory of relativity is a "
            "set of two theories: special relativity and general relativity."
        ),
    },
    {
        "title": "Pangram",
        "content": "The quick brown fox jumps over the lazy dog.",
    },
]


def _row_to_text(row: sqlite3.Row) -> Text:
    return Text(
        text_id=str(row["text_id"]),
        title=str(row["title"]),
        content=str(row["content"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


class TextManager:
    """Manages source texts with create, lookup and listing operations."""

    DEFAULT_LIST_LIMIT = 50

    def __init__(self, db_manager: DatabaseManager) -> None:
        """Initialize the TextManager with a database manager."""
        self.db = db_manager

    def save_text(self, text: Text) -> Text:
        """Insert a text and return it.

        Raises:
            DatabaseError: If the insert fails.
        """
        created_at = text.created_at.isoformat() if text.created_at else None
        self.db.execute(
            "INSERT INTO texts (text_id, title, content, created_at) VALUES (?, ?, ?, ?)",
            (text.text_id, text.title, text.content, created_at),
        )
        return text

    def get_text_by_id(self, text_id: str) -> Optional[Text]:
        """Return a text by ID, or None if it does not exist."""
        row = self.db.fetchone(
            "SELECT text_id, title, content, created_at FROM texts WHERE text_id = ?",
            (text_id,),
        )
        return _row_to_text(row) if row else None

    def list_texts(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Text]:
        """Return up to `limit` texts ordered by title."""
        rows = self.db.fetchall(
            "SELECT text_id, title, content, created_at FROM texts "
            "ORDER BY title COLLATE NOCASE LIMIT ?",
            (limit,),
        )
        return [_row_to_text(row) for row in rows]

    def random_text(self, rng: Optional[random.Random] = None) -> Optional[Text]:
        """Pick one text uniformly at random, or None when the table is empty."""
        rows = self.db.fetchall("SELECT text_id FROM texts")
        if not rows:
            return None
        chooser = rng or random
        return self.get_text_by_id(str(chooser.choice(rows)["text_id"]))

    def count_texts(self) -> int:
        row = self.db.fetchone("SELECT COUNT(*) AS total FROM texts")
        return int(row["total"]) if row else 0

    def ensure_default_texts(self) -> int:
        """Seed the built-in texts when the table is empty; returns how many were added."""
        if self.count_texts() > 0:
            return 0
        for entry in DEFAULT_TEXTS:
            self.save_text(Text(**entry))
        logger.info("Seeded %d default texts", len(DEFAULT_TEXTS))
        return len(DEFAULT_TEXTS)
