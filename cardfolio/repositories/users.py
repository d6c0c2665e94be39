"""UserRepository — persistence for login identities."""

import uuid

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError

from cardfolio.exceptions import DuplicateEmailError, DuplicateUsernameError
from cardfolio.models.user import User, UserRole
from cardfolio.repositories.base import Repository, translate_store_errors


class UserRepository(Repository):

    @translate_store_errors
    async def get(self, user_id: uuid.UUID) -> User | None:
        result = await self.session.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @translate_store_errors
    async def get_by_username(self, username: str) -> User | None:
        result = await self.session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def find_conflicts(self, username: str, email: str) -> list[User]:
        """Users already holding this username or email."""
        result = await self.session.execute(
            select(User).where(or_(User.username == username, User.email == email))
        )
        return list(result.scalars().all())

    @translate_store_errors
    async def create(
        self,
        username: str,
        email: str,
        hashed_password: str,
        role: UserRole = UserRole.USER,
    ) -> User:
        user = User(
            username=username,
            email=email,
            hashed_password=hashed_password,
            role=role,
        )
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent registration
            if "email" in str(exc.orig):
                raise DuplicateEmailError(email) from exc
            raise DuplicateUsernameError(username) from exc
        return user

    @translate_store_errors
    async def set_role(self, user: User, role: UserRole) -> User:
        user.role = role
        await self.session.flush()
        return user

    @translate_store_errors
    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await self.session.flush()

    @translate_store_errors
    async def list_all(self) -> list[User]:
        result = await self.session.execute(select(User).order_by(User.created_at))
        return list(result.scalars().all())
