"""Client library for the typing test backend.

Token persistence, the auth session, the access gate, the typing session state
machine and the terminal front end.
"""

from .access_gate import AccessGate, GateDecision, Navigator
from .api_client import ApiClient
from .auth_session import AuthSession, AuthState
from .token_store import TokenStore
from .typing_session import TypingSession, TypingState

__all__ = [
    "AccessGate",
    "ApiClient",
    "AuthSession",
    "AuthState",
    "GateDecision",
    "Navigator",
    "TokenStore",
    "TypingSession",
    "TypingState",
]
