"""
BusinessCard model — a named bundle of profile fields.

Addressing:
  A card is found either through its owning user (owner_user_id) or through
  an opaque, client-generated device id that lets anonymous visitors
  autosave and come back to their card without an account. Every ordinary
  card has at least one of the two; a claimed card has both.

Templates:
  Cards with is_template=True are presets created by an admin. They are
  owned by that admin, have no device id, and are copied field-by-field
  into the new card when a pre-generated link stamped with their id is
  claimed. Only PRESENTABLE_FIELDS are copied; identity columns are not.

Deleting a card deletes every public link bound to it. Links that merely
reference the card as their template keep existing with template_id cleared.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Boolean, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardfolio.database import Base


class CardTemplate(str, enum.Enum):
    """Visual theme the frontend renders the card with."""
    CLASSIC = "Classic"
    MODERN = "Modern"
    VIBRANT = "Vibrant"
    FRESH = "Fresh"
    MINIMAL = "Minimal"


# Columns a template contributes to a claimed card
PRESENTABLE_FIELDS = (
    "first_name",
    "last_name",
    "job_title",
    "company",
    "email",
    "phone",
    "website",
    "bio",
    "profile_image",
    "social_media",
    "template",
)


class BusinessCard(Base):
    __tablename__ = "business_cards"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    # NULL for anonymous, device-only cards
    owner_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    device_id: Mapped[str | None] = mapped_column(
        String(64),
        nullable=True,
        index=True,
    )

    # --- Presentable profile fields ---
    first_name: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    job_title: Mapped[str] = mapped_column(String(150), default="", nullable=False)
    company: Mapped[str] = mapped_column(String(150), default="", nullable=False)
    email: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    bio: Mapped[str | None] = mapped_column(String(200), nullable=True)

    # Image reference only (URL or data URL); uploads are handled client-side
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)

    # List of {"platform": ..., "url": ...}
    social_media: Mapped[list[dict]] = mapped_column(
        JSON,
        default=list,
        nullable=False,
    )

    template: Mapped[CardTemplate] = mapped_column(
        Enum(CardTemplate),
        default=CardTemplate.CLASSIC,
        nullable=False,
    )

    is_template: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
        index=True,
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
    owner: Mapped["User"] = relationship(
        back_populates="cards",
    )

    # Links bound to this card; removed together with it
    public_links: Mapped[list["PublicLink"]] = relationship(
        back_populates="business_card",
        foreign_keys="PublicLink.business_card_id",
        cascade="all",
    )

    def presentable_fields(self) -> dict:
        """Copy of the profile fields, safe to feed into a new card."""
        fields = {name: getattr(self, name) for name in PRESENTABLE_FIELDS}
        fields["social_media"] = [dict(item) for item in self.social_media or []]
        return fields
