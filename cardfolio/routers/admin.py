"""
Admin router — link provisioning, templates and user management.

All endpoints require ADMIN role.

Endpoints:
  POST   /admin/generate-links            — Batch pre-generate NFC links
  GET    /admin/unassigned-links          — Active, unclaimed NFC links
  GET    /admin/public-links              — Every link
  PATCH  /admin/public-links/{link_id}    — Activate / deactivate a link
  DELETE /admin/public-links/{link_id}    — Delete any link
  GET    /admin/template-cards            — List template cards
  POST   /admin/template-cards            — Create a template card
  GET    /admin/business-cards            — Every card
  GET    /admin/users                     — Every user
  PATCH  /admin/users/{user_id}           — Change a user's role
  DELETE /admin/users/{user_id}           — Delete a user, their cards and links

Consolidating admin routes in one router avoids route-ordering conflicts
with the member routers' parameterized paths.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.dependencies import require_admin
from cardfolio.models.user import User
from cardfolio.schemas.card import BusinessCardFields, BusinessCardResponse
from cardfolio.schemas.link import (
    BatchGenerateRequest,
    BatchGenerateResponse,
    LinkActiveUpdateRequest,
    PublicLinkResponse,
)
from cardfolio.schemas.user import RoleUpdateRequest, UserResponse
from cardfolio.services import card_service, link_service, user_service

router = APIRouter()


# ---------------------------------------------------------------------------
# Link admin endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/generate-links",
    response_model=BatchGenerateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Batch-generate NFC links",
)
async def generate_links(
    request: BatchGenerateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """
    Pre-generate `count` (1-1000) unbound links for printing onto NFC tags.

    Either every link is created or none is.
    """
    links = await link_service.batch_generate(
        db,
        count=request.count,
        prefix=request.prefix or None,
        template_id=request.template_id,
    )
    slugs = [link.unique_slug for link in links]
    return BatchGenerateResponse(
        count=len(links),
        slugs=slugs,
        claim_urls=[link_service.claim_url(slug) for slug in slugs],
        links=links,
    )


@router.get(
    "/unassigned-links",
    response_model=list[PublicLinkResponse],
    summary="[Admin] List unclaimed NFC links",
)
async def list_unassigned_links(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await link_service.list_unassigned(db)


@router.get(
    "/public-links",
    response_model=list[PublicLinkResponse],
    summary="[Admin] List all links",
)
async def list_all_links(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await link_service.list_all(db)


@router.patch(
    "/public-links/{link_id}",
    response_model=PublicLinkResponse,
    summary="[Admin] Activate or deactivate a link",
)
async def toggle_link(
    link_id: uuid.UUID,
    request: LinkActiveUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """An inactive link resolves as not found and can't be claimed."""
    return await link_service.toggle_active(db, link_id, request.is_active)


@router.delete(
    "/public-links/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete any link",
)
async def delete_link(
    link_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    await link_service.delete_link(db, link_id)


# ---------------------------------------------------------------------------
# Card admin endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/template-cards",
    response_model=list[BusinessCardResponse],
    summary="[Admin] List template cards",
)
async def list_template_cards(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await card_service.list_templates(db)


@router.post(
    "/template-cards",
    response_model=BusinessCardResponse,
    status_code=status.HTTP_201_CREATED,
    summary="[Admin] Create a template card",
)
async def create_template_card(
    request: BusinessCardFields,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Templates are copied into new cards when NFC links stamped with them are claimed."""
    return await card_service.create_template(db, admin, request.to_columns())


@router.get(
    "/business-cards",
    response_model=list[BusinessCardResponse],
    summary="[Admin] List all cards",
)
async def list_all_cards(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await card_service.list_all_cards(db)


# ---------------------------------------------------------------------------
# User admin endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/users",
    response_model=list[UserResponse],
    summary="[Admin] List all users",
)
async def list_users(
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.list_users(db)


@router.patch(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="[Admin] Change a user's role",
)
async def update_user_role(
    user_id: uuid.UUID,
    request: RoleUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    return await user_service.set_role(db, user_id, request.role, acting_admin=admin)


@router.delete(
    "/users/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="[Admin] Delete a user",
)
async def delete_user(
    user_id: uuid.UUID,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deletes the user together with their cards and those cards' links."""
    await user_service.delete_user(db, user_id, acting_admin=admin)
