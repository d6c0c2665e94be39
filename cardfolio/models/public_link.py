"""
PublicLink model — a slug-addressed window onto a business card.

Two kinds of link share this table:

  - Share links (is_pre_generated=False): created by a card owner and bound
    to their card immediately. They are never claimable.
  - Pre-generated links (is_pre_generated=True): created in batches by an
    admin ahead of printing NFC tags. They start unbound
    (business_card_id IS NULL) and are bound exactly once by a claim.

Claim state (is_claimed, claimed_at, claimed_by_user_id, business_card_id)
is written by a single conditional UPDATE in LinkRepository.mark_claimed;
see services/claim_service.py for the workflow around it.

unique_slug is unique across both kinds. is_active is an admin toggle: an
inactive link resolves as not found no matter its claim state.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from cardfolio.database import Base


class PublicLink(Base):
    __tablename__ = "public_links"

    id: Mapped[uuid.UUID] = mapped_column(
        primary_key=True,
        default=uuid.uuid4,
    )

    unique_slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )

    # NULL until a pre-generated link is claimed
    business_card_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("business_cards.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    is_pre_generated: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    is_claimed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )

    claimed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    claimed_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Template card copied into the new card at claim time
    template_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("business_cards.id", ondelete="SET NULL"),
        nullable=True,
    )

    view_count: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    # --- Relationships ---
    business_card: Mapped["BusinessCard"] = relationship(
        back_populates="public_links",
        foreign_keys=[business_card_id],
    )
