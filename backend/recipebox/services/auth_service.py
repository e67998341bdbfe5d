"""
RecipeBox Backend: Auth Service (Signup & Login)
==================================================

What:  Registers users and authenticates them by email and password.
How:   Validates input, checks uniqueness, hashes with CredentialService,
       persists the User and issues a token through TokenService.
Who:   Called by the /api/auth route handlers.

Signup order of checks:
    1. username, email and password all present   → 400 Missing required fields
    2. password at least 6 characters             → 400
    3. username not taken                         → 400 Username already taken
    4. email not registered                       → 400 Email already registered

Login failure:
    An unknown email and a wrong password produce the same
    AuthenticationError with the same message, so a caller cannot probe
    which emails are registered.
"""

import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ValidationError,
)
from recipebox.models import User
from recipebox.schemas.auth import AuthResponse, LoginRequest, SignupRequest, UserPublic
from recipebox.services.credential_service import CredentialService, credential_service
from recipebox.services.token_service import TokenService

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72
SIGNUP_FIELDS = ("username", "email", "password")
LOGIN_FIELDS = ("email", "password")
INVALID_LOGIN = "Invalid email or password"


class AuthService:
    """
    Signup and login workflows.

    Attributes:
        credentials: Password hasher (bcrypt). Injectable for tests.
    """

    def __init__(self, credentials: Optional[CredentialService] = None):
        self.credentials = credentials or credential_service

    async def signup(
        self, db: AsyncSession, payload: SignupRequest, tokens: TokenService
    ) -> AuthResponse:
        """
        Create a user and return it with a fresh token.

        Raises:
            ValidationError: Missing field or short password
            ConflictError:   Username or email already in use
            DatabaseError:   Insert failed
        """
        if not payload.username or not payload.email or not payload.password:
            raise ValidationError.missing_fields(SIGNUP_FIELDS)

        if len(payload.password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(
                message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        # bcrypt only reads the first 72 bytes
        if len(payload.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(
                message=f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        if await self._find_user(db, User.username == payload.username) is not None:
            raise ConflictError("Username already taken")
        if await self._find_user(db, User.email == payload.email) is not None:
            raise ConflictError("Email already registered")

        hashed = await run_in_threadpool(self.credentials.hash, payload.password)
        user = User(username=payload.username, email=payload.email, password=hashed)

        try:
            db.add(user)
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same username/email
            raise ConflictError("Username or email already registered")
        except SQLAlchemyError as e:
            logger.error("Database error during signup: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user.",
                context={"error_type": type(e).__name__},
            )

        logger.info("User %d signed up (%s)", user.id, user.username)
        return AuthResponse(
            message="User created successfully",
            user=UserPublic.model_validate(user),
            token=tokens.issue(user.id, user.username),
        )

    async def login(
        self, db: AsyncSession, payload: LoginRequest, tokens: TokenService
    ) -> AuthResponse:
        """
        Verify email and password and return the user with a fresh token.

        Raises:
            ValidationError:     Missing email or password
            AuthenticationError: Unknown email or wrong password (same message)
        """
        if not payload.email or not payload.password:
            raise ValidationError.missing_fields(LOGIN_FIELDS)

        user = await self._find_user(db, User.email == payload.email)
        if user is None:
            logger.info("Login failed: unknown email")
            raise AuthenticationError(INVALID_LOGIN)

        matches = await run_in_threadpool(self.credentials.verify, payload.password, user.password)
        if not matches:
            logger.info("Login failed: wrong password for user %d", user.id)
            raise AuthenticationError(INVALID_LOGIN)

        logger.info("User %d logged in", user.id)
        return AuthResponse(
            message="Login successful",
            user=UserPublic.model_validate(user),
            token=tokens.issue(user.id, user.username),
        )

    async def _find_user(self, db: AsyncSession, condition) -> Optional[User]:
        try:
            result = await db.execute(select(User).where(condition))
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Database error looking up user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not look up the user.",
                context={"error_type": type(e).__name__},
            )


auth_service = AuthService()
