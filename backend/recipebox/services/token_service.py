"""
RecipeBox Backend: Token Service
==================================

What:  Issues and verifies signed, expiring identity tokens (JWT, HS256).
How:   PyJWT encodes the claims `{userId, username, iat, exp}` with the
       process-wide secret; `verify()` checks signature, expiry and the
       presence of both identity claims.
Who:   AuthService issues tokens; the authorization dependency verifies them.

Claim schema:
    The claim names live in one place (TokenClaims / `issue()`), so tokens
    from signup and login are structurally identical.

    {
        "userId": 1,
        "username": "john_chef",
        "iat": 1700000000,
        "exp": 1700604800      # iat + 7 days
    }

Verification result:
    Bad signature, expired, malformed and incomplete tokens all raise the
    same InvalidTokenError with the same message. Callers cannot tell which
    check failed.

A token only asserts "this is user X". It carries no roles or permissions.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

import jwt

from recipebox.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 7 * 24 * 60 * 60


class InvalidTokenError(Exception):
    """The token could not be verified. Deliberately carries no detail."""

    def __init__(self) -> None:
        super().__init__("Invalid or expired token")


@dataclass(frozen=True)
class TokenClaims:
    """Decoded identity carried by a valid token."""

    user_id: int
    username: str


class TokenService:
    """
    Signs and verifies identity tokens with one process-wide secret.

    Attributes:
        ttl_seconds: Validity window from issuance (default 7 days)
        algorithm:   JWT signing algorithm (default HS256)
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        algorithm: str = "HS256",
    ):
        if not secret or not secret.strip():
            raise ConfigurationError(
                "Token signing secret is empty",
                context={"missing": ["JWT_SECRET"]},
            )
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    def issue(self, user_id: int, username: str, now: Optional[int] = None) -> str:
        """Return a signed token asserting (user_id, username)."""
        issued_at = int(time.time()) if now is None else now
        payload = {
            "userId": int(user_id),
            "username": str(username),
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and validate `token`.

        Raises:
            InvalidTokenError: signature mismatch, expiry, malformed token or
                missing identity claims
        """
        raw = (token or "").strip()
        if not raw:
            raise InvalidTokenError()

        try:
            payload = jwt.decode(
                raw,
                self._secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "iat"]},
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", type(exc).__name__)
            raise InvalidTokenError() from None

        user_id = payload.get("userId")
        username = payload.get("username")
        if not isinstance(user_id, int) or isinstance(user_id, bool) or not isinstance(username, str):
            logger.debug("Token rejected: missing identity claims")
            raise InvalidTokenError()

        return TokenClaims(user_id=user_id, username=username)
