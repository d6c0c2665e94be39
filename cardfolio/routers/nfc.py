"""
NFC router — the claim page backend for pre-generated links.

Endpoints:
  GET  /nfc-links/{slug}        — Claim status (anonymous, read-only)
  POST /nfc-links/{slug}/claim  — Claim the link (signed-in users)

Failed claims carry a distinct error_type (not_found, link_inactive,
not_claimable, already_claimed) so the page can tell the visitor why their
card didn't work.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.database import get_db
from cardfolio.dependencies import get_current_user
from cardfolio.models.user import User
from cardfolio.schemas.link import ClaimResponse, LinkStatusResponse
from cardfolio.services import claim_service, link_service

router = APIRouter()


@router.get(
    "/{slug}",
    response_model=LinkStatusResponse,
    summary="Check whether an NFC link can be claimed",
)
async def get_link_status(
    slug: str,
    db: AsyncSession = Depends(get_db),
):
    return await link_service.resolve_for_claim_check(db, slug)


@router.post(
    "/{slug}/claim",
    response_model=ClaimResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Claim an NFC link",
)
async def claim_link(
    slug: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """
    Bind an unclaimed NFC link to a new card owned by you. The card starts
    as a copy of the link's template, if it has one.
    """
    return await claim_service.claim(db, slug, user.id)
