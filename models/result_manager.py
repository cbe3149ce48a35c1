"""
ResultManager: persistence and history queries for typing-test results.
"""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from db.database_manager import DatabaseManager
from db.exceptions import ForeignKeyError
from models.result import Result, ResultStats

logger = logging.getLogger(__name__)

_RESULT_COLUMNS = "result_id, user_id, text_id, wpm, accuracy, created_at"


class ResultValidationError(Exception):
    """Raised when a result references a missing user or text."""

    def __init__(self, message: str = "Result validation failed") -> None:
        self.message = message
        super().__init__(self.message)


def _row_to_result(row: sqlite3.Row) -> Result:
    return Result(
        result_id=str(row["result_id"]),
        user_id=str(row["user_id"]),
        text_id=str(row["text_id"]),
        wpm=float(row["wpm"]),
        accuracy=float(row["accuracy"]),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )


class ResultManager:
    """Create-once storage and per-user history for `Result` records."""

    DEFAULT_HISTORY_LIMIT = 50

    def __init__(self, db_manager: DatabaseManager) -> None:
        self.db = db_manager

    def save_result(self, result: Result) -> Result:
        """Insert a result record.

        Raises:
            ResultValidationError: If the user or text does not exist.
        """
        try:
            self.db.execute(
                f"INSERT INTO results ({_RESULT_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                (
                    result.result_id,
                    result.user_id,
                    result.text_id,
                    result.wpm,
                    result.accuracy,
                    result.created_at.isoformat(),
                ),
            )
        except ForeignKeyError as e:
            raise ResultValidationError(
                f"Unknown user or text for result {result.result_id}"
            ) from e
        logger.info(
            "Saved result %s for user %s (wpm=%.1f, accuracy=%.1f)",
            result.result_id,
            result.user_id,
            result.wpm,
            result.accuracy,
        )
        return result

    def get_result_for_user(self, *, result_id: str, user_id: str) -> Optional[Result]:
        """Return one of the user's results, or None if absent or owned by someone else."""
        row = self.db.fetchone(
            f"SELECT {_RESULT_COLUMNS} FROM results WHERE result_id = ? AND user_id = ?",
            (result_id, user_id),
        )
        return _row_to_result(row) if row else None

    def list_results_for_user(
        self, *, user_id: str, limit: int = DEFAULT_HISTORY_LIMIT
    ) -> List[Result]:
        """Return the user's results, newest first."""
        rows = self.db.fetchall(
            f"SELECT {_RESULT_COLUMNS} FROM results WHERE user_id = ? "
            "ORDER BY created_at DESC, rowid DESC LIMIT ?",
            (user_id, limit),
        )
        return [_row_to_result(row) for row in rows]

    def stats_for_user(self, *, user_id: str) -> ResultStats:
        """Aggregate count, best speed and averages over the user's results."""
        row = self.db.fetchone(
            "SELECT COUNT(*) AS total, MAX(wpm) AS best_wpm, AVG(wpm) AS average_wpm, "
            "AVG(accuracy) AS average_accuracy FROM results WHERE user_id = ?",
            (user_id,),
        )
        if not row or not row["total"]:
            return ResultStats()
        return ResultStats(
            count=int(row["total"]),
            best_wpm=round(float(row["best_wpm"]), 1),
            average_wpm=round(float(row["average_wpm"]), 1),
            average_accuracy=round(float(row["average_accuracy"]), 1),
        )
