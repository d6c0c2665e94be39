"""
FastAPI dependencies for authentication and authorization.

  get_optional_user (JWT? -> User | None)     anonymous allowed
      └── get_current_user (User)             401 without a valid token
              └── require_admin (User)        403 unless ADMIN

get_device_id reads the X-Device-Id header that anonymous clients send to
prove they hold an unowned card.
"""

import uuid

from fastapi import Depends, Header
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.exceptions import ForbiddenError, UnauthorizedError
from cardfolio.models.user import User, UserRole
from cardfolio.repositories.users import UserRepository
from cardfolio.security import decode_access_token


# auto_error=False: a missing token yields None so public routes can still
# tell signed-in visitors apart from anonymous ones.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


async def get_optional_user(
    token: str | None = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User | None:
    """
    Resolve the caller's identity, if any.

    Returns:
        The authenticated User, or None when no token was sent.

    Raises:
        UnauthorizedError: If a token was sent but is invalid or its user
            no longer exists.
    """
    if token is None:
        return None

    try:
        payload = decode_access_token(token)
        user_id_str: str | None = payload.get("sub")
        if user_id_str is None:
            raise UnauthorizedError()
        user_id = uuid.UUID(user_id_str)
    except (JWTError, ValueError):
        raise UnauthorizedError()

    user = await UserRepository(db).get(user_id)
    if user is None:
        raise UnauthorizedError()
    return user


async def get_current_user(
    user: User | None = Depends(get_optional_user),
) -> User:
    """Require an authenticated user."""
    if user is None:
        raise UnauthorizedError("Not authenticated")
    return user


def require_role(user: User, role: UserRole) -> bool:
    return user.role == role


async def require_admin(
    user: User = Depends(get_current_user),
) -> User:
    """Require the authenticated user to have the ADMIN role."""
    if not require_role(user, UserRole.ADMIN):
        raise ForbiddenError("Admin access required")
    return user


async def get_device_id(
    x_device_id: str | None = Header(default=None, max_length=64),
) -> str | None:
    return x_device_id
