"""
RecipeBox Backend: Auth Request/Response Schemas
==================================================

What:  Pydantic models for signup and login.

Security:
    UserPublic is the only user shape that leaves the service. It has no
    password field, so a hash can never be serialized by accident.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    # Optional so AuthService can report all missing fields in one response
    username: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    email: Optional[str] = Field(default=None, max_length=320)
    password: Optional[str] = Field(default=None, max_length=128)


class UserPublic(BaseModel):
    id: int
    username: str
    email: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by both signup (201) and login (200)."""

    message: str
    user: UserPublic
    token: str = Field(description="Bearer token, valid for 7 days")
