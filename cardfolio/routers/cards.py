"""
Business cards router — create, edit and delete cards.

Endpoints:
  POST   /business-cards                 — Create a card (owner or device id)
  GET    /business-cards?device_id=...   — Look up the card saved on a device
  GET    /business-cards/mine            — List the signed-in user's cards
  POST   /business-cards/auto-save       — Upsert the device's card
  GET    /business-cards/{card_id}       — Get a card you manage
  PUT    /business-cards/{card_id}       — Patch a card you manage
  DELETE /business-cards/{card_id}       — Delete a card and its links

Anonymous callers prove access to an unowned card with the X-Device-Id
header; signed-in callers by owning the card.
"""

import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.dependencies import get_current_user, get_device_id, get_optional_user
from cardfolio.exceptions import InvalidArgumentError
from cardfolio.models.user import User
from cardfolio.schemas.card import (
    AutoSaveRequest,
    BusinessCardCreateRequest,
    BusinessCardResponse,
    BusinessCardUpdateRequest,
)
from cardfolio.services import card_service

router = APIRouter()


@router.post(
    "",
    response_model=BusinessCardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a business card",
)
async def create_card(
    request: BusinessCardCreateRequest,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a card. Signed-in users own it; anonymous callers must supply a
    device_id to find it again.
    """
    return await card_service.create_card(
        db,
        request.to_columns(),
        owner_user_id=user.id if user is not None else None,
        device_id=request.device_id,
    )


@router.get(
    "",
    response_model=BusinessCardResponse | None,
    summary="Get the card saved on a device",
)
async def get_card_by_device(
    device_id: str = Query(min_length=1, max_length=64),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Returns null when nothing is saved under this device id."""
    card = await card_service.get_card_by_device_id(db, device_id)
    if card is None or not card_service.can_manage(card, user, device_id):
        return None
    return card


@router.get(
    "/mine",
    response_model=list[BusinessCardResponse],
    summary="List your business cards",
)
async def list_my_cards(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await card_service.list_cards_for_owner(db, user.id)


@router.post(
    "/auto-save",
    response_model=BusinessCardResponse,
    summary="Auto-save the card for a device",
)
async def auto_save(
    request: AutoSaveRequest,
    response: Response,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create the device's card on first save (201), update it afterwards (200).
    """
    card, created = await card_service.auto_save(
        db,
        request.device_id,
        request.to_changes(),
        owner=user,
    )
    if created:
        response.status_code = status.HTTP_201_CREATED
    return card


@router.get(
    "/{card_id}",
    response_model=BusinessCardResponse,
    summary="Get a business card",
)
async def get_card(
    card_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    device_id: str | None = Depends(get_device_id),
    db: AsyncSession = Depends(get_db),
):
    return await card_service.get_managed_card(db, card_id, user, device_id)


@router.put(
    "/{card_id}",
    response_model=BusinessCardResponse,
    summary="Update a business card",
)
async def update_card(
    card_id: uuid.UUID,
    request: BusinessCardUpdateRequest,
    user: User | None = Depends(get_optional_user),
    device_id: str | None = Depends(get_device_id),
    db: AsyncSession = Depends(get_db),
):
    """
    Patch a card. Only the fields present in the body change; unknown
    fields are rejected with 422.
    """
    changes = request.to_changes()
    if not changes:
        raise InvalidArgumentError("No fields to update")
    return await card_service.update_card(db, card_id, changes, user, device_id)


@router.delete(
    "/{card_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a business card",
)
async def delete_card(
    card_id: uuid.UUID,
    user: User | None = Depends(get_optional_user),
    device_id: str | None = Depends(get_device_id),
    db: AsyncSession = Depends(get_db),
):
    """Deletes the card and every public link bound to it."""
    await card_service.delete_card(db, card_id, user, device_id)
