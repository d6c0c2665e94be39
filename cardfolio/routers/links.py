"""
Public links router — share links and public card viewing.

Endpoints:
  POST   /public-links                    — Create a share link for your card
  GET    /public-links/by-card/{card_id}  — List links for your card
  DELETE /public-links/{link_id}          — Delete a link on your card
  GET    /public-links/{slug}             — Public view (anonymous, counts views)
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.dependencies import get_current_user
from cardfolio.models.user import User
from cardfolio.schemas.link import (
    PublicLinkCreateRequest,
    PublicLinkResponse,
    PublicViewResponse,
    ShareLinkResponse,
)
from cardfolio.services import link_service

router = APIRouter()


@router.post(
    "",
    response_model=ShareLinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a share link",
)
async def create_link(
    request: PublicLinkCreateRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Create a public link bound to one of your cards. The response carries
    the printable share URL.

    - **unique_slug**: Optional; 3-64 URL-safe characters. A random
      10-character slug is generated when omitted.
    """
    link = await link_service.create_link_for_owner(
        db,
        user,
        request.business_card_id,
        request.unique_slug,
    )
    return ShareLinkResponse(
        **PublicLinkResponse.model_validate(link).model_dump(),
        share_url=link_service.share_url(link.unique_slug),
    )


@router.get(
    "/by-card/{card_id}",
    response_model=list[PublicLinkResponse],
    summary="List links for a card",
)
async def list_links_for_card(
    card_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await link_service.list_links_for_owner(db, user, card_id)


@router.delete(
    "/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a share link",
)
async def delete_link(
    link_id: uuid.UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await link_service.delete_link_for_owner(db, user, link_id)


@router.get(
    "/{slug}",
    response_model=PublicViewResponse,
    summary="View a card by its public slug",
)
async def view_card(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    """
    Resolve a slug to its card and count the view. Inactive and unclaimed
    links return 404.
    """
    link, card = await link_service.resolve_for_view(db, slug)
    return PublicViewResponse(
        slug=link.unique_slug,
        view_count=link.view_count,
        card=card,
    )
