"""
Card service — business card storage and access rules.

Who may manage a card:
  - an admin, any card
  - the owning user, their cards
  - anyone presenting the card's device id, for cards with no owner yet
    (anonymous autosave before signing up)

A card must be addressable: it needs an owner, a device id, or both.
Templates are owned by the admin that created them and have no device id.
"""

import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.exceptions import CardNotFoundError, ForbiddenError, InvalidArgumentError
from cardfolio.models.business_card import BusinessCard
from cardfolio.models.user import User
from cardfolio.repositories.cards import CardRepository

logger = logging.getLogger(__name__)


def can_manage(card: BusinessCard, user: User | None, device_id: str | None = None) -> bool:
    if user is not None and (user.is_admin or card.owner_user_id == user.id):
        return True
    return (
        card.owner_user_id is None
        and device_id is not None
        and card.device_id == device_id
    )


def ensure_can_manage(card: BusinessCard, user: User | None, device_id: str | None = None) -> None:
    """
    Raises:
        ForbiddenError: If the caller is neither admin, owner, nor holder
            of an unowned card's device id.
    """
    if not can_manage(card, user, device_id):
        raise ForbiddenError("You do not have access to this business card")


async def create_card(
    db: AsyncSession,
    fields: dict,
    owner_user_id: uuid.UUID | None = None,
    device_id: str | None = None,
) -> BusinessCard:
    """
    Create a card from presentable fields.

    Raises:
        InvalidArgumentError: If neither an owner nor a device id is given.
    """
    if owner_user_id is None and not device_id:
        raise InvalidArgumentError("A card needs an owner or a device id")

    card = await CardRepository(db).create(
        **fields,
        owner_user_id=owner_user_id,
        device_id=device_id,
    )
    logger.info("Created card %s (owner=%s)", card.id, owner_user_id)
    return card


async def get_card(db: AsyncSession, card_id: uuid.UUID) -> BusinessCard:
    card = await CardRepository(db).get(card_id)
    if card is None:
        raise CardNotFoundError(card_id)
    return card


async def get_managed_card(
    db: AsyncSession,
    card_id: uuid.UUID,
    user: User | None,
    device_id: str | None = None,
) -> BusinessCard:
    """Fetch a card the caller is allowed to manage."""
    card = await get_card(db, card_id)
    ensure_can_manage(card, user, device_id)
    return card


async def get_card_by_device_id(db: AsyncSession, device_id: str) -> BusinessCard | None:
    return await CardRepository(db).get_by_device_id(device_id)


async def list_cards_for_owner(db: AsyncSession, user_id: uuid.UUID) -> list[BusinessCard]:
    return await CardRepository(db).list_by_owner(user_id)


async def list_all_cards(db: AsyncSession) -> list[BusinessCard]:
    return await CardRepository(db).list_all()


async def list_templates(db: AsyncSession) -> list[BusinessCard]:
    return await CardRepository(db).list_templates()


async def update_card(
    db: AsyncSession,
    card_id: uuid.UUID,
    changes: dict,
    user: User | None,
    device_id: str | None = None,
) -> BusinessCard:
    """
    Merge a validated patch into a card. updated_at is always refreshed.

    Raises:
        CardNotFoundError: If the card doesn't exist.
        ForbiddenError: If the caller can't manage the card.
    """
    card = await get_managed_card(db, card_id, user, device_id)
    return await CardRepository(db).update(card, changes)


async def delete_card(
    db: AsyncSession,
    card_id: uuid.UUID,
    user: User | None,
    device_id: str | None = None,
) -> None:
    """Hard-delete a card together with every link bound to it."""
    card = await get_managed_card(db, card_id, user, device_id)
    await CardRepository(db).delete(card)
    logger.info("Deleted card %s", card_id)


async def auto_save(
    db: AsyncSession,
    device_id: str,
    changes: dict,
    owner: User | None = None,
) -> tuple[BusinessCard, bool]:
    """
    Upsert the card saved under a device id.

    An anonymous card is adopted by the signed-in user who saves it.

    Returns:
        Tuple of (card, created).

    Raises:
        ForbiddenError: If the device's card already belongs to another user.
    """
    cards = CardRepository(db)
    owner_id = owner.id if owner is not None else None
    existing = await cards.get_by_device_id(device_id)

    if existing is None:
        card = await create_card(db, changes, owner_user_id=owner_id, device_id=device_id)
        return card, True

    if existing.owner_user_id is not None and existing.owner_user_id != owner_id:
        raise ForbiddenError("This device's card belongs to another user")

    if existing.owner_user_id is None and owner_id is not None:
        changes = {**changes, "owner_user_id": owner_id}
    return await cards.update(existing, changes), False


async def create_template(
    db: AsyncSession,
    admin: User,
    fields: dict,
) -> BusinessCard:
    """Create a template card owned by `admin`."""
    card = await CardRepository(db).create(
        **fields,
        owner_user_id=admin.id,
        device_id=None,
        is_template=True,
    )
    logger.info("Admin %s created template card %s", admin.username, card.id)
    return card
