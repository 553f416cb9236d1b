from __future__ import annotations

import time
from collections.abc import Callable

import jwt
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..logging_conf import get_logger

__all__ = [
    "SESSION_ALGORITHM",
    "SESSION_LIFETIME_S",
    "SessionData",
    "SessionIssuer",
]

SESSION_ALGORITHM = "HS256"
SESSION_LIFETIME_S = 24 * 60 * 60

logger = get_logger("domain.session")


class SessionData(BaseModel):
    """Claims carried by an admin session token.

    Field aliases keep the wire names used by existing clients.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    is_authenticated: bool = Field(..., alias="isAuthenticated")
    timestamp: int  # issued-at, epoch milliseconds
    exp: int | None = None  # expiry, epoch seconds; absent for header sessions


class SessionIssuer:
    """Mints and verifies signed, time-limited admin session tokens.

    There is no server-side session table: a token stays valid until its
    expiry, and logout only discards the client's copy.
    """

    def __init__(
        self,
        secret: str,
        *,
        lifetime_s: int = SESSION_LIFETIME_S,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise ValueError("session secret must be a non-empty string")
        self._secret = secret
        self._lifetime_s = lifetime_s
        self._clock = clock

    @property
    def lifetime_s(self) -> int:
        return self._lifetime_s

    def issue(self) -> str:
        now = self._clock()
        issued_at = int(now)
        claims = {
            "isAuthenticated": True,
            "timestamp": int(now * 1000),
            "iat": issued_at,
            "exp": issued_at + self._lifetime_s,
        }
        return jwt.encode(claims, self._secret, algorithm=SESSION_ALGORITHM)

    def verify(self, token: str | None) -> SessionData | None:
        """Return the decoded session, or None for any invalid token.

        Bad signatures, expired tokens, garbage input and payloads that do not
        claim an authenticated session all collapse to None.
        """
        if not token:
            return None
        try:
            # Time claims are checked against self._clock below, not the wall clock.
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[SESSION_ALGORITHM],
                options={"require": ["exp"], "verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidTokenError as e:
            logger.info(
                "session.rejected",
                extra={"event": "session_rejected", "reason": type(e).__name__},
            )
            return None

        try:
            session = SessionData.model_validate(claims)
        except ValidationError:
            return None
        if not session.is_authenticated or session.exp is None:
            return None
        if session.exp <= self._clock():
            logger.info("session.rejected", extra={"event": "session_rejected", "reason": "expired"})
            return None
        return session

    def synthesize(self) -> SessionData:
        """Build an unsigned session for callers authenticated by other means."""
        return SessionData(is_authenticated=True, timestamp=int(self._clock() * 1000))
