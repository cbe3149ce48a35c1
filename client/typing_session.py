"""
Typing session state machine and the pure scoring functions behind it.

READY --(first input / start)--> ACTIVE --(full text typed / time up / end)--> COMPLETED

A completed session is read-only until :meth:`TypingSession.reset`.
"""

import enum
import logging
import math
import time
from typing import Callable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

CHARS_PER_WORD = 5


class TypingState(enum.Enum):
    READY = "ready"
    ACTIVE = "active"
    COMPLETED = "completed"


class CharState(enum.Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    ACTIVE = "active"
    PENDING = "pending"


def classify_char(index: int, source: str, typed: str) -> CharState:
    """Classify one source position against what has been typed so far."""
    if index < len(typed):
        return CharState.CORRECT if typed[index] == source[index] else CharState.INCORRECT
    if index == len(typed):
        return CharState.ACTIVE
    return CharState.PENDING


def classify_text(source: str, typed: str) -> List[CharState]:
    return [classify_char(i, source, typed) for i in range(len(source))]


def count_correct(source: str, typed: str) -> int:
    return sum(1 for expected, actual in zip(source, typed) if expected == actual)


def compute_wpm(typed_chars: int, elapsed_seconds: float) -> float:
    """Words per minute, one word being five typed characters. Zero when no time has passed."""
    if elapsed_seconds <= 0:
        return 0.0
    return (typed_chars / CHARS_PER_WORD) / (elapsed_seconds / 60.0)


def compute_accuracy(correct_chars: int, typed_chars: int) -> float:
    """Percentage of typed characters that matched, in [0, 100]; 100 when nothing was typed."""
    if typed_chars <= 0:
        return 100.0
    return max(0.0, min(100.0, correct_chars / typed_chars * 100.0))


class TypingResults(BaseModel):
    model_config = ConfigDict(frozen=True)

    wpm: float = Field(ge=0)
    accuracy: float = Field(ge=0, le=100)
    typed_chars: int = Field(ge=0)
    correct_chars: int = Field(ge=0)
    elapsed_seconds: float = Field(ge=0)

    def display(self) -> str:
        return f"WPM: {round(self.wpm)} | Accuracy: {self.accuracy:.1f}%"


CompletionListener = Callable[[TypingResults], None]


class TypingSession:
    """One typing test over a fixed source text.

    Args:
        source_text: The text to reproduce. Must not be empty.
        duration: Optional time limit in seconds. When set, :meth:`tick` completes
            the test once it runs out and the timer counts down.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        source_text: str,
        *,
        duration: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if duration is not None and duration <= 0:
            raise ValueError("duration must be positive")
        self.duration = duration
        self._clock = clock
        self._listeners: List[CompletionListener] = []
        self._load(source_text)

    def _load(self, source_text: str) -> None:
        if not source_text:
            raise ValueError("source_text must not be empty")
        self.source_text = source_text
        self.typed = ""
        self.state = TypingState.READY
        self._started_at: Optional[float] = None
        self._ended_at: Optional[float] = None
        self.results: Optional[TypingResults] = None

    def on_complete(self, listener: CompletionListener) -> None:
        self._listeners.append(listener)

    @property
    def is_active(self) -> bool:
        return self.state is TypingState.ACTIVE

    @property
    def is_read_only(self) -> bool:
        return self.state is TypingState.COMPLETED

    @property
    def active_index(self) -> Optional[int]:
        """Index of the next character to type, or None once everything is typed."""
        return len(self.typed) if len(self.typed) < len(self.source_text) else None

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._ended_at if self._ended_at is not None else self._clock()
        elapsed = max(0.0, end - self._started_at)
        if self.duration is not None:
            elapsed = min(elapsed, self.duration)
        return elapsed

    @property
    def timer(self) -> int:
        """Whole seconds shown on the timer: remaining time for timed tests, elapsed otherwise."""
        if self.duration is not None:
            return max(0, math.ceil(self.duration - self.elapsed_seconds))
        return int(self.elapsed_seconds)

    def classifications(self) -> List[CharState]:
        return classify_text(self.source_text, self.typed)

    def start(self) -> None:
        if self.state is not TypingState.READY:
            return
        self._started_at = self._clock()
        self.state = TypingState.ACTIVE
        logger.debug("Typing test started (%d chars)", len(self.source_text))

    def handle_input(self, value: str) -> None:
        """Replace the typed text with the input field's current value.

        Input that arrives after a timed test has run out is dropped and the test
        is completed with what was typed before the deadline.
        """
        self.tick()
        if self.is_read_only:
            return
        if self.state is TypingState.READY:
            if not value:
                return
            self.start()
        self.typed = value[: len(self.source_text)]
        if len(self.typed) == len(self.source_text):
            self.end_test()

    def type_char(self, char: str) -> None:
        self.handle_input(self.typed + char)

    def backspace(self) -> None:
        if self.is_active and self.typed:
            self.handle_input(self.typed[:-1])

    def tick(self) -> None:
        """Advance a timed test; completes it when the time limit is reached."""
        if self.is_active and self.time_up:
            self.end_test()

    @property
    def time_up(self) -> bool:
        """True once a timed test has used its whole duration."""
        return self.duration is not None and self.timer <= 0

    def end_test(self) -> Optional[TypingResults]:
        """Freeze the test and compute results. Only the first call has any effect."""
        if self.state is not TypingState.ACTIVE:
            return self.results
        self._ended_at = self._clock()
        self.state = TypingState.COMPLETED
        elapsed = self.elapsed_seconds
        typed_chars = len(self.typed)
        correct = count_correct(self.source_text, self.typed)
        wpm = compute_wpm(typed_chars, elapsed)
        self.results = TypingResults(
            wpm=wpm if math.isfinite(wpm) else 0.0,
            accuracy=compute_accuracy(correct, typed_chars),
            typed_chars=typed_chars,
            correct_chars=correct,
            elapsed_seconds=elapsed,
        )
        logger.info("Typing test completed: %s", self.results.display())
        for listener in list(self._listeners):
            listener(self.results)
        return self.results

    def reset(self, source_text: Optional[str] = None) -> None:
        """Return to READY, optionally with a new source text."""
        self._load(source_text if source_text is not None else self.source_text)
