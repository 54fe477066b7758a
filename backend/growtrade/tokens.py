"""Session tokens (HS256 JWT)."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from .accounts import User

ALGORITHM = "HS256"


class TokenError(Exception):
    """Raised for a token that is malformed, forged, expired or missing claims."""


class TokenService:
    """Issues and verifies signed session tokens carrying the user identity."""

    def __init__(self, secret: str, ttl: timedelta = timedelta(hours=24)) -> None:
        if not secret:
            raise ValueError("Token secret must not be empty")
        self._secret = secret
        self._ttl = ttl

    def issue(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        claims = {
            "user_id": user.id,
            "username": user.username,
            "iat": now,
            "exp": now + self._ttl,
        }
        return jwt.encode(claims, self._secret, algorithm=ALGORITHM)

    def verify(self, token: str) -> dict:
        """Decode ``token`` and return its claims. Expiry is always enforced."""
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "user_id"]},
            )
        except jwt.InvalidTokenError as e:
            raise TokenError(str(e)) from e

        user_id = claims.get("user_id")
        if not isinstance(user_id, int) or isinstance(user_id, bool):
            raise TokenError("Invalid user_id claim")
        return claims
