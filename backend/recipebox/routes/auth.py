"""
RecipeBox Backend: Auth Route Handlers
========================================

What:  POST /api/auth/signup and POST /api/auth/login.
How:   Passes the body, the request's session and the app's TokenService
       to AuthService.
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from recipebox.database import get_db_session
from recipebox.schemas.auth import AuthResponse, LoginRequest, SignupRequest
from recipebox.schemas.common import ErrorResponse
from recipebox.services.auth_service import auth_service

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "Missing field, short password or duplicate user", "model": ErrorResponse}},
    summary="Register a new user",
)
async def signup(
    payload: SignupRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.signup(db, payload, request.app.state.token_service)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={
        400: {"description": "Missing email or password", "model": ErrorResponse},
        401: {"description": "Invalid email or password", "model": ErrorResponse},
    },
    summary="Log in with email and password",
)
async def login(
    payload: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(db, payload, request.app.state.token_service)
