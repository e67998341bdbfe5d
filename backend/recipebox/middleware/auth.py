"""
RecipeBox Backend: Authorization Dependency
=============================================

What:  Gatekeeper for the recipe write routes (create, update, delete).
How:   A FastAPI dependency that reads `Authorization: Bearer <token>`,
       verifies the token with the app's TokenService and returns the
       caller's identity. Route logic never runs for a rejected request.

Outcomes:
    no header / not "Bearer" / empty token  → 401 "Access denied. No token provided."
    token fails verification                → 403 "Invalid or expired token"
    valid                                   → TokenClaims(user_id, username),
                                              also stored on request.state.identity

Stateless: there is no session store and no revocation list. A token stays
valid until it expires.
"""

import logging
from typing import Optional

from fastapi import Header, Request

from recipebox.exceptions import AuthenticationError, AuthorizationError
from recipebox.services.token_service import InvalidTokenError, TokenClaims, TokenService

logger = logging.getLogger(__name__)

NO_TOKEN = "Access denied. No token provided."
BAD_TOKEN = "Invalid or expired token"


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from a `Bearer <token>` header, or raise 401."""
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise AuthenticationError(NO_TOKEN)

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise AuthenticationError(NO_TOKEN)
    return token


async def require_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
) -> TokenClaims:
    token = extract_bearer_token(authorization)

    tokens: TokenService = request.app.state.token_service
    try:
        identity = tokens.verify(token)
    except InvalidTokenError:
        logger.info("Rejected bearer token on %s %s", request.method, request.url.path)
        raise AuthorizationError(BAD_TOKEN)

    request.state.identity = identity
    return identity
