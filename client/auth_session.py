"""Auth session manager: the client's explicitly owned login state.

One ``AuthSession`` is created at startup and handed to whatever needs it (the
access gate, the practice runner, the CLI). State changes go through its methods
only, and listeners registered with :meth:`AuthSession.subscribe` are told about
every change.

States::

    INITIALIZING --(profile ok)----------> AUTHENTICATED
    INITIALIZING --(no token / failure)--> ANONYMOUS
    ANONYMOUS    --(login)---------------> AUTHENTICATED
    AUTHENTICATED --(logout/invalidate)--> ANONYMOUS

INITIALIZING is left exactly once and never re-entered.
"""

import enum
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from client.api_client import ApiClient
from client.token_store import TokenStore
from helpers.error_utils import TypingTestError
from models.user import User

logger = logging.getLogger(__name__)


class AuthState(enum.Enum):
    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


Listener = Callable[["AuthSession"], None]


class AuthSession:
    """Tracks the current user, the loading flag and the bearer credential."""

    def __init__(self, *, api: ApiClient, token_store: TokenStore) -> None:
        self.api = api
        self.token_store = token_store
        self._user: Optional[User] = None
        self._loading = True
        self._credential: Optional[str] = None
        self._listeners: List[Listener] = []

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def credential(self) -> Optional[str]:
        """The bearer token to pass to authenticated requests, if any."""
        return self._credential

    @property
    def state(self) -> AuthState:
        if self._loading:
            return AuthState.INITIALIZING
        return AuthState.AUTHENTICATED if self._user is not None else AuthState.ANONYMOUS

    @property
    def is_authenticated(self) -> bool:
        return self.state is AuthState.AUTHENTICATED

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener for state changes; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def _clear_local(self) -> None:
        self.token_store.clear()
        self._credential = None
        self._user = None
        self._loading = False

    def initialize(self) -> AuthState:
        """Resolve the startup state from the persisted token."""
        token = self.token_store.get()
        if not token:
            self._user = None
            self._loading = False
            self._notify()
            return self.state
        self._credential = token
        self.fetch_profile()
        return self.state

    def fetch_profile(self) -> None:
        """Validate the current credential against the server.

        Never raises: any failure, expected or not, leaves the session signed out
        with the stored token removed.
        """
        if self._credential is None:
            self._clear_local()
            self._notify()
            return
        try:
            self._user = self.api.fetch_profile(self._credential)
            self._loading = False
        except TypingTestError as e:
            logger.info("Profile check failed (%s); continuing signed out", e)
            self._clear_local()
        except Exception:
            logger.warning("Profile check raised unexpectedly; continuing signed out", exc_info=True)
            self._clear_local()
        self._notify()

    def login(self, user_data: Union[User, Dict[str, Any]], token: Optional[str] = None) -> None:
        """Record a successful login; persists and attaches the token when given."""
        if token:
            self.token_store.set(token)
            self._credential = token
        self._user = user_data if isinstance(user_data, User) else User.model_validate(user_data)
        self._loading = False
        self._notify()

    def authenticate(self, email_address: str, password: str) -> User:
        """Log in with credentials.

        Raises:
            InvalidCredential: If the server rejects the email/password.
            NetworkFailure: If the server cannot be reached.
        """
        user, token = self.api.login(email_address, password)
        self.login(user, token)
        return user

    def register(self, username: str, email_address: str, password: str) -> User:
        """Create an account and log straight in.

        Raises:
            ValidationFailure: If the server rejects the registration data.
            NetworkFailure: If the server cannot be reached.
        """
        user, token = self.api.register(username, email_address, password)
        self.login(user, token)
        return user

    def logout(self) -> None:
        """Tell the server, then clear local state whatever the outcome.

        Application errors from the server call are logged. Anything else still
        propagates, but only after the local state has been cleared.
        """
        token = self._credential
        try:
            if token:
                self.api.logout(token)
        except TypingTestError as e:
            logger.warning("Logout failed: %s", e)
        finally:
            self._clear_local()
            self._notify()

    def invalidate(self) -> None:
        """Drop the session locally after the server has rejected the credential."""
        logger.info("Session invalidated by the server")
        self._clear_local()
        self._notify()
