"""Functions for issuing and verifying bearer tokens on user requests.

Tokens are HS256 JWTs carrying the user id (``sub``), issue/expiry times and a
unique ``jti``. Verification is stateless apart from the revocation table, which
records the ``jti`` of every token that has been logged out.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import BaseModel

from db.database_manager import DatabaseManager
from helpers.error_utils import ExpiredToken, InvalidCredential

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(days=7)


class TokenClaims(BaseModel):
    """Verified contents of a bearer token."""

    user_id: str
    jti: str
    issued_at: datetime
    expires_at: datetime

    model_config = {"frozen": True}


class TokenService:
    """Issue, verify and revoke bearer tokens."""

    def __init__(
        self,
        *,
        secret_key: str,
        db_manager: DatabaseManager,
        ttl: timedelta = DEFAULT_TTL,
    ) -> None:
        if not secret_key:
            raise ValueError("secret_key must not be empty")
        self.secret_key = secret_key
        self.db_manager = db_manager
        self.ttl = ttl

    def issue(self, user_id: str, ttl: Optional[timedelta] = None) -> str:
        """Encode a new token for the given user."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": user_id,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + (ttl if ttl is not None else self.ttl),
        }
        return jwt.encode(payload, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Decode a token and check that it has not been revoked.

        Raises:
            ExpiredToken: If the token is past its expiry time.
            InvalidCredential: If the token is malformed, forged or revoked.
        """
        try:
            data: dict = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "jti", "iat", "exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise ExpiredToken("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidCredential("Not a valid token") from e

        claims = TokenClaims(
            user_id=str(data["sub"]),
            jti=str(data["jti"]),
            issued_at=datetime.fromtimestamp(data["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(data["exp"], tz=timezone.utc),
        )
        if self.is_revoked(claims.jti):
            raise InvalidCredential("Token has been revoked")
        return claims

    def is_revoked(self, jti: str) -> bool:
        row = self.db_manager.fetchone("SELECT 1 FROM revoked_tokens WHERE jti = ?", (jti,))
        return row is not None

    def revoke(self, claims: TokenClaims) -> None:
        """Record the token's jti so later requests carrying it are rejected."""
        self.db_manager.execute(
            "INSERT OR IGNORE INTO revoked_tokens (jti, expires_at) VALUES (?, ?)",
            (claims.jti, claims.expires_at.isoformat()),
        )
        self.purge_expired()
        logger.info("Revoked token %s for user %s", claims.jti, claims.user_id)

    def purge_expired(self) -> int:
        """Drop revocation entries whose tokens would fail the expiry check anyway."""
        cursor = self.db_manager.execute(
            "DELETE FROM revoked_tokens WHERE expires_at < ?",
            (datetime.now(timezone.utc).isoformat(),),
        )
        return cursor.rowcount
