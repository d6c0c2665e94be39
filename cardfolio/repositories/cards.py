"""
CardRepository — persistence for business cards.

Deletion goes through the ORM so the BusinessCard.public_links cascade
removes bound links in the same flush (the FK also carries ON DELETE
CASCADE for deletes issued outside the ORM).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import select

from cardfolio.models.business_card import BusinessCard
from cardfolio.repositories.base import Repository, translate_store_errors


class CardRepository(Repository):

    @translate_store_errors
    async def get(self, card_id: uuid.UUID) -> BusinessCard | None:
        result = await self.session.execute(
            select(BusinessCard).where(BusinessCard.id == card_id)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def get_by_device_id(self, device_id: str) -> BusinessCard | None:
        """Most recently created card saved under this device id."""
        result = await self.session.execute(
            select(BusinessCard)
            .where(BusinessCard.device_id == device_id)
            .where(BusinessCard.is_template.is_(False))
            .order_by(BusinessCard.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def create(self, **fields) -> BusinessCard:
        card = BusinessCard(**fields)
        self.session.add(card)
        await self.session.flush()
        return card

    @translate_store_errors
    async def update(self, card: BusinessCard, changes: dict) -> BusinessCard:
        for name, value in changes.items():
            setattr(card, name, value)
        # Bumped explicitly so an empty patch still counts as a mutation
        card.updated_at = datetime.now(timezone.utc)
        await self.session.flush()
        return card

    @translate_store_errors
    async def delete(self, card: BusinessCard) -> None:
        await self.session.delete(card)
        await self.session.flush()

    @translate_store_errors
    async def list_by_owner(self, user_id: uuid.UUID) -> list[BusinessCard]:
        result = await self.session.execute(
            select(BusinessCard)
            .where(BusinessCard.owner_user_id == user_id)
            .where(BusinessCard.is_template.is_(False))
            .order_by(BusinessCard.created_at)
        )
        return list(result.scalars().all())

    @translate_store_errors
    async def list_templates(self) -> list[BusinessCard]:
        result = await self.session.execute(
            select(BusinessCard)
            .where(BusinessCard.is_template.is_(True))
            .order_by(BusinessCard.created_at)
        )
        return list(result.scalars().all())

    @translate_store_errors
    async def list_all(self) -> list[BusinessCard]:
        result = await self.session.execute(
            select(BusinessCard).order_by(BusinessCard.created_at)
        )
        return list(result.scalars().all())
