"""Tests for the typing session state machine and scoring functions."""

from typing import List

import pytest

from client.typing_session import (
    CharState,
    TypingResults,
    TypingSession,
    TypingState,
    classify_char,
    classify_text,
    compute_accuracy,
    compute_wpm,
    count_correct,
)


class FakeClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestScoring:
    def test_classify_char(self) -> None:
        assert classify_char(0, "cat", "c") is CharState.CORRECT
        assert classify_char(0, "cat", "x") is CharState.INCORRECT
        assert classify_char(1, "cat", "c") is CharState.ACTIVE
        assert classify_char(2, "cat", "c") is CharState.PENDING

    def test_classify_text_empty_input(self) -> None:
        assert classify_text("cat", "") == [CharState.ACTIVE, CharState.PENDING, CharState.PENDING]

    def test_count_correct(self) -> None:
        assert count_correct("cat", "cax") == 2
        assert count_correct("cat", "") == 0

    def test_wpm(self) -> None:
        assert compute_wpm(50, 60) == 10.0
        assert compute_wpm(25, 30) == 10.0
        assert compute_wpm(10, 0) == 0.0

    def test_accuracy(self) -> None:
        assert compute_accuracy(2, 3) == pytest.approx(66.6667, rel=1e-4)
        assert compute_accuracy(0, 0) == 100.0
        assert compute_accuracy(5, 5) == 100.0
        assert compute_accuracy(0, 4) == 0.0

    def test_display(self) -> None:
        results = TypingResults(wpm=41.6, accuracy=200 / 3, typed_chars=3, correct_chars=2, elapsed_seconds=1)
        assert results.display() == "WPM: 42 | Accuracy: 66.7%"


class TestTypingSession:
    def test_initial_state(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        assert session.state is TypingState.READY
        assert not session.is_active
        assert session.results is None
        assert session.timer == 0
        assert session.active_index == 0

    def test_empty_source_rejected(self) -> None:
        with pytest.raises(ValueError):
            TypingSession("")

    def test_invalid_duration(self) -> None:
        with pytest.raises(ValueError):
            TypingSession("cat", duration=0)

    def test_first_keystroke_starts(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.type_char("c")
        assert session.state is TypingState.ACTIVE
        clock.advance(2.5)
        assert session.elapsed_seconds == 2.5
        assert session.timer == 2

    def test_empty_input_does_not_start(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.handle_input("")
        assert session.state is TypingState.READY

    def test_cat_scenario(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        completed: List[TypingResults] = []
        session.on_complete(completed.append)

        session.type_char("c")
        clock.advance(1)
        session.type_char("a")
        assert session.classifications() == [CharState.CORRECT, CharState.CORRECT, CharState.ACTIVE]
        clock.advance(1)
        session.type_char("x")

        assert session.classifications() == [CharState.CORRECT, CharState.CORRECT, CharState.INCORRECT]
        assert session.state is TypingState.COMPLETED
        assert session.is_read_only
        assert session.active_index is None
        assert session.results is not None
        assert round(session.results.accuracy, 1) == 66.7
        assert session.results.wpm == pytest.approx(compute_wpm(3, 2))
        assert completed == [session.results]

    def test_input_frozen_after_completion(self, clock: FakeClock) -> None:
        session = TypingSession("ab", clock=clock)
        session.handle_input("ab")
        results = session.results
        session.backspace()
        session.type_char("z")
        session.handle_input("")
        assert session.typed == "ab"
        assert session.results is results
        assert session.end_test() is results

    def test_backspace(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.type_char("x")
        session.backspace()
        assert session.typed == ""
        assert session.state is TypingState.ACTIVE
        assert session.classifications()[0] is CharState.ACTIVE

    def test_input_truncated_to_source_length(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.handle_input("cats and dogs")
        assert session.typed == "cat"
        assert session.state is TypingState.COMPLETED
        assert session.results is not None
        assert session.results.accuracy == 100.0

    def test_end_test_early(self, clock: FakeClock) -> None:
        session = TypingSession("the quick brown fox", clock=clock)
        session.handle_input("the q")
        clock.advance(6)
        results = session.end_test()
        assert results is not None
        assert session.state is TypingState.COMPLETED
        assert results.typed_chars == 5
        assert results.wpm == pytest.approx(10.0)

    def test_end_test_when_ready_is_noop(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        assert session.end_test() is None
        assert session.state is TypingState.READY

    def test_completion_fires_once(self, clock: FakeClock) -> None:
        session = TypingSession("ab", clock=clock)
        fired: List[TypingResults] = []
        session.on_complete(fired.append)
        session.handle_input("ab")
        session.end_test()
        session.tick()
        assert len(fired) == 1

    def test_countdown_completes_on_tick(self, clock: FakeClock) -> None:
        session = TypingSession("a long passage", duration=10, clock=clock)
        assert session.timer == 10
        session.handle_input("a lo")
        clock.advance(4.2)
        assert session.timer == 6
        session.tick()
        assert session.state is TypingState.ACTIVE

        clock.advance(10)
        assert session.timer == 0
        session.tick()
        assert session.state is TypingState.COMPLETED
        assert session.results is not None
        assert session.results.elapsed_seconds == 10
        assert session.results.wpm == pytest.approx(compute_wpm(4, 10))

    def test_input_after_deadline_is_dropped(self, clock: FakeClock) -> None:
        source = "abcde" * 20
        session = TypingSession(source, duration=10, clock=clock)
        session.handle_input("abcde")
        clock.advance(60)
        session.handle_input(source)
        assert session.state is TypingState.COMPLETED
        assert session.typed == "abcde"
        assert session.results is not None
        assert session.results.typed_chars == 5
        assert session.results.elapsed_seconds == 10
        assert session.results.wpm == pytest.approx(compute_wpm(5, 10))

    def test_input_before_deadline_is_kept(self, clock: FakeClock) -> None:
        session = TypingSession("abcdefghij", duration=10, clock=clock)
        session.type_char("a")
        clock.advance(9.5)
        assert not session.time_up
        session.type_char("b")
        assert session.typed == "ab"
        assert session.state is TypingState.ACTIVE

    def test_tick_without_duration(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.type_char("c")
        clock.advance(1000)
        session.tick()
        assert session.state is TypingState.ACTIVE

    def test_reset(self, clock: FakeClock) -> None:
        session = TypingSession("cat", clock=clock)
        session.handle_input("cat")
        session.reset("dog")
        assert session.source_text == "dog"
        assert session.state is TypingState.READY
        assert session.typed == ""
        assert session.results is None
        assert session.timer == 0

        session.handle_input("d")
        session.reset()
        assert session.source_text == "dog"
        assert session.state is TypingState.READY

    def test_zero_elapsed_gives_zero_wpm(self, clock: FakeClock) -> None:
        session = TypingSession("ab", clock=clock)
        session.handle_input("ab")
        assert session.results is not None
        assert session.results.wpm == 0.0
        assert session.results.accuracy == 100.0
