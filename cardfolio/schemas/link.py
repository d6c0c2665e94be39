"""
Pydantic schemas for public links and the NFC claim flow.

Slug and prefix formats are validated in the service layer rather than
here, so the same rules apply to callers that bypass HTTP (seed scripts,
tests) and violations surface as invalid_argument errors.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from cardfolio.schemas.card import PublicCardResponse


class PublicLinkCreateRequest(BaseModel):
    """Request body for POST /public-links."""
    business_card_id: uuid.UUID
    unique_slug: str | None = None


class PublicLinkResponse(BaseModel):
    id: uuid.UUID
    unique_slug: str
    business_card_id: uuid.UUID | None
    is_active: bool
    is_pre_generated: bool
    is_claimed: bool
    claimed_at: datetime | None
    claimed_by_user_id: uuid.UUID | None
    template_id: uuid.UUID | None
    view_count: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ShareLinkResponse(PublicLinkResponse):
    """Response for POST /public-links."""
    share_url: str


class LinkActiveUpdateRequest(BaseModel):
    """Request body for PATCH /admin/public-links/{link_id}."""
    is_active: bool


class BatchGenerateRequest(BaseModel):
    """Request body for POST /admin/generate-links."""
    count: int
    prefix: str | None = None
    template_id: uuid.UUID | None = None


class BatchGenerateResponse(BaseModel):
    count: int
    slugs: list[str]
    # Ready to print on NFC tags
    claim_urls: list[str]
    links: list[PublicLinkResponse]


class PublicViewResponse(BaseModel):
    """Response for GET /public-links/{slug}."""
    slug: str
    view_count: int
    card: PublicCardResponse


class LinkStatusResponse(BaseModel):
    """Response for GET /nfc-links/{slug} (claim page)."""
    slug: str
    is_active: bool
    is_pre_generated: bool
    is_claimed: bool
    template_card: PublicCardResponse | None = None


class ClaimResponse(BaseModel):
    business_card_id: uuid.UUID
    link: PublicLinkResponse
