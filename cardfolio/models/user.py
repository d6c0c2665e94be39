"""
User model — the authentication identity.

Each User is a login credential (username + hashed password) with a role:

  - USER: the default role for registration; owns business cards and can
    claim pre-generated NFC links.
  - ADMIN: manages templates, batch-generates links, toggles and deletes
    any link, and administers users.

A user is immutable after registration except for role changes made by an
admin. Deleting a user cascades to their cards and, through those, to the
public links bound to them.

The password is stored as an Argon2id hash, never in plaintext.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Enum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardfolio.database import Base


class UserRole(str, enum.Enum):
    """
    Defines the role a user holds.

    Inherits from str so the enum value serializes naturally to JSON.
    """
    USER = "user"
    ADMIN = "admin"


class User(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # Login identifier
    username: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True,
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )

    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole),
        default=UserRole.USER,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    # ORM-level cascade so deleting a user through the session removes
    # their cards (and each card's links) even without DB-level cascades.
    cards: Mapped[list["BusinessCard"]] = relationship(
        back_populates="owner",
        cascade="all",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
