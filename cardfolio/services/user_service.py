"""
User administration — admin-only listing, role changes and deletion.

Deleting a user removes their cards, and with them every public link bound
to those cards.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.exceptions import InvalidArgumentError, UserNotFoundError
from cardfolio.models.user import User, UserRole
from cardfolio.repositories.users import UserRepository

logger = logging.getLogger(__name__)


async def list_users(db: AsyncSession) -> list[User]:
    return await UserRepository(db).list_all()


async def get_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    user = await UserRepository(db).get(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


async def set_role(
    db: AsyncSession,
    user_id: uuid.UUID,
    role: UserRole,
    acting_admin: User,
) -> User:
    """
    Change a user's role.

    Raises:
        UserNotFoundError: If the user doesn't exist.
        InvalidArgumentError: If an admin tries to demote themselves.
    """
    user = await get_user(db, user_id)
    if user.id == acting_admin.id and role != UserRole.ADMIN:
        raise InvalidArgumentError("Admins cannot remove their own admin role")

    user = await UserRepository(db).set_role(user, role)
    logger.info("User %s role set to %s by %s", user.username, role.value, acting_admin.username)
    return user


async def delete_user(
    db: AsyncSession,
    user_id: uuid.UUID,
    acting_admin: User,
) -> None:
    """
    Hard-delete a user and everything they own.

    Raises:
        UserNotFoundError: If the user doesn't exist.
        InvalidArgumentError: If an admin tries to delete themselves.
    """
    user = await get_user(db, user_id)
    if user.id == acting_admin.id:
        raise InvalidArgumentError("Admins cannot delete their own account")

    await UserRepository(db).delete(user)
    logger.info("User %s deleted by %s", user.username, acting_admin.username)
