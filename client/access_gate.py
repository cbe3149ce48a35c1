"""Route-level guard for views that need a signed-in user."""

import enum
from dataclasses import dataclass
from typing import Callable, List, Optional, Set

from client.auth_session import AuthSession, AuthState

DEFAULT_LOGIN_PATH = "/login"


class GateDecision(enum.Enum):
    PLACEHOLDER = "placeholder"
    RENDER = "render"
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GateOutcome:
    """What to show for a protected path.

    ``path`` is the protected path for PLACEHOLDER/RENDER and the login path for
    REDIRECT. Redirects always replace the current history entry.
    """

    decision: GateDecision
    path: str

    @property
    def replace(self) -> bool:
        return self.decision is GateDecision.REDIRECT


class Navigator:
    """Minimal browser-style history stack."""

    def __init__(self, start: str = "/") -> None:
        self._history: List[str] = [start]

    @property
    def current(self) -> str:
        return self._history[-1]

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def push(self, path: str) -> None:
        self._history.append(path)

    def replace(self, path: str) -> None:
        self._history[-1] = path

    def back(self) -> Optional[str]:
        """Pop the current entry; returns the new current path, or None at the start."""
        if len(self._history) == 1:
            return None
        self._history.pop()
        return self.current


class AccessGate:
    """Decides between a loading placeholder, the protected view, or a login redirect."""

    def __init__(self, session: AuthSession, login_path: str = DEFAULT_LOGIN_PATH) -> None:
        self.session = session
        self.login_path = login_path
        self._guarded: Set[str] = set()

    def evaluate(self, path: str) -> GateOutcome:
        state = self.session.state
        if state is AuthState.INITIALIZING:
            return GateOutcome(GateDecision.PLACEHOLDER, path)
        if state is AuthState.AUTHENTICATED:
            return GateOutcome(GateDecision.RENDER, path)
        return GateOutcome(GateDecision.REDIRECT, self.login_path)

    def navigate(self, navigator: Navigator, path: str) -> GateOutcome:
        """Navigate to a protected path, redirecting with replace semantics if needed."""
        self._guarded.add(path)
        navigator.push(path)
        return self._apply(navigator, path)

    def refresh(self, navigator: Navigator) -> GateOutcome:
        """Re-evaluate the current entry, e.g. once the session finishes initializing.

        Only paths previously opened through :meth:`navigate` are guarded; anything
        else (the login page, public pages) always renders.
        """
        if navigator.current not in self._guarded:
            return GateOutcome(GateDecision.RENDER, navigator.current)
        return self._apply(navigator, navigator.current)

    def watch(self, navigator: Navigator) -> Callable[[], None]:
        """Refresh the navigator on every session change; returns the unsubscribe function."""
        return self.session.subscribe(lambda _session: self.refresh(navigator))

    def _apply(self, navigator: Navigator, path: str) -> GateOutcome:
        outcome = self.evaluate(path)
        if outcome.decision is GateDecision.REDIRECT:
            navigator.replace(self.login_path)
        return outcome
