"""
Authentication router — registration, login and identity.

Endpoints:
  POST /auth/register  — Register a new user and get a token
  POST /auth/login     — Authenticate and get a token
  GET  /auth/me        — The current user

Plaintext passwords exist only in memory during request processing; they
are hashed before any database operation and never logged.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.dependencies import get_current_user
from cardfolio.models.user import User
from cardfolio.schemas.auth import (
    RegisterResponse,
    TokenResponse,
    UserLoginRequest,
    UserRegisterRequest,
)
from cardfolio.schemas.user import UserResponse
from cardfolio.services import auth_service

router = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
async def register(
    request: UserRegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Register a new user with the default USER role.

    Returns a JWT token so the user is immediately logged in.

    - **username**: 3-50 characters, unique
    - **email**: Must be a valid email format and not already registered
    - **password**: Minimum 8 characters
    """
    user, token = await auth_service.register(
        db=db,
        username=request.username,
        email=request.email,
        password=request.password,
    )

    return RegisterResponse(
        user_id=user.id,
        username=user.username,
        email=user.email,
        role=user.role.value,
        token=token,
    )


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate and get a token",
)
async def login(
    request: UserLoginRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Authenticate with username and password.

    Include the returned token on subsequent requests:

        Authorization: Bearer <token>
    """
    _, token = await auth_service.login(
        db=db,
        username=request.username,
        password=request.password,
    )
    return TokenResponse(token=token)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get the current user",
)
async def me(user: User = Depends(get_current_user)):
    return user
