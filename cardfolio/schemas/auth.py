"""
Pydantic schemas for authentication endpoints (register and login).

Pydantic validates incoming data automatically; if a required field is
missing or the wrong type, FastAPI returns a 422 error before our code
even runs.
"""

import uuid

from pydantic import BaseModel, EmailStr, Field


class UserRegisterRequest(BaseModel):
    """Request body for POST /auth/register."""
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: EmailStr
    password: str = Field(min_length=8)


class UserLoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    username: str
    password: str


class TokenResponse(BaseModel):
    """Response body for successful login — contains the JWT."""
    token: str
    token_type: str = "bearer"


class RegisterResponse(BaseModel):
    """Response body for successful registration — user info + JWT."""
    user_id: uuid.UUID
    username: str
    email: str
    role: str
    token: str
    token_type: str = "bearer"
