"""
Authentication service — registration and login business logic.

Registration flow:
  1. Check that neither the username nor the email is taken
  2. Hash the password with Argon2id
  3. Create the User
  4. Return a JWT token so the user is immediately logged in

Login flow:
  1. Look up user by username
  2. Verify password against stored hash
  3. Return a JWT token

Login returns the same error for "wrong password" and "unknown username"
to prevent user enumeration.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.config import settings
from cardfolio.exceptions import DuplicateEmailError, DuplicateUsernameError, InvalidCredentialsError
from cardfolio.models.user import User, UserRole
from cardfolio.repositories.users import UserRepository
from cardfolio.security import create_access_token, hash_password, verify_password

logger = logging.getLogger(__name__)


async def register(
    db: AsyncSession,
    username: str,
    email: str,
    password: str,
    role: UserRole = UserRole.USER,
) -> tuple[User, str]:
    """
    Register a new user.

    Args:
        db: Database session.
        username: Login name (must be unique).
        email: Contact email (must be unique).
        password: Plaintext password (hashed before storage).
        role: Only seed/bootstrap code passes anything but USER.

    Returns:
        Tuple of (User instance, JWT token string).

    Raises:
        DuplicateUsernameError: If the username is taken.
        DuplicateEmailError: If the email is already registered.
    """
    users = UserRepository(db)
    for existing in await users.find_conflicts(username, email):
        if existing.username == username:
            raise DuplicateUsernameError(username)
        raise DuplicateEmailError(email)

    user = await users.create(
        username=username,
        email=email,
        hashed_password=hash_password(password),
        role=role,
    )
    logger.info("Registered user %s (%s)", user.username, user.role.value)

    token = create_access_token(data={"sub": str(user.id)})
    return user, token


async def login(
    db: AsyncSession,
    username: str,
    password: str,
) -> tuple[User, str]:
    """
    Authenticate a user and return a JWT token.

    Raises:
        InvalidCredentialsError: If the username doesn't exist or the
            password is wrong.
    """
    user = await UserRepository(db).get_by_username(username)

    # Same error for unknown user and wrong password
    if not user:
        raise InvalidCredentialsError()

    if not verify_password(password, user.hashed_password):
        raise InvalidCredentialsError()

    token = create_access_token(data={"sub": str(user.id)})
    return user, token


async def ensure_bootstrap_admin(db: AsyncSession) -> User | None:
    """
    Create the configured bootstrap admin if it doesn't exist yet.

    Does nothing unless BOOTSTRAP_ADMIN_USERNAME, BOOTSTRAP_ADMIN_EMAIL and
    BOOTSTRAP_ADMIN_PASSWORD are all set. An existing user with that
    username is left untouched, whatever its role.
    """
    username = settings.BOOTSTRAP_ADMIN_USERNAME
    email = settings.BOOTSTRAP_ADMIN_EMAIL
    password = settings.BOOTSTRAP_ADMIN_PASSWORD
    if not (username and email and password):
        return None

    users = UserRepository(db)
    if await users.get_by_username(username) is not None:
        return None

    user, _ = await register(db, username, email, password, role=UserRole.ADMIN)
    logger.info("Created bootstrap admin %s", username)
    return user
