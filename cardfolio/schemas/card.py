"""
Pydantic schemas for BusinessCard endpoints.

Updates use an explicit patch model: every editable column is listed, unknown
keys are rejected (extra="forbid"), and only the keys the client actually
sent are merged into the stored card. Identity columns (id, owner, device id,
template flag, timestamps) are never patchable.
"""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field, HttpUrl

from cardfolio.models.business_card import CardTemplate


SocialMediaPlatform = Literal[
    "LinkedIn",
    "Twitter",
    "Instagram",
    "Facebook",
    "GitHub",
    "YouTube",
    "TikTok",
    "Pinterest",
    "Reddit",
    "Snapchat",
    "Other",
]


class SocialMediaLink(BaseModel):
    platform: SocialMediaPlatform
    url: HttpUrl


def _social_media_columns(links: list[SocialMediaLink]) -> list[dict]:
    return [{"platform": link.platform, "url": str(link.url)} for link in links]


class BusinessCardFields(BaseModel):
    """
    The presentable profile fields of a card.

    Everything has a default so an autosave can store a half-filled form,
    and a claimed card with no template starts out blank.
    """
    first_name: str = Field(default="", max_length=100)
    last_name: str = Field(default="", max_length=100)
    job_title: str = Field(default="", max_length=150)
    company: str = Field(default="", max_length=150)
    email: EmailStr | Literal[""] = ""
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    bio: str | None = Field(default=None, max_length=200)
    profile_image: str | None = None
    social_media: list[SocialMediaLink] = Field(default_factory=list)
    template: CardTemplate = CardTemplate.CLASSIC

    model_config = {"extra": "forbid"}

    def to_columns(self) -> dict:
        data = self.model_dump(exclude={"device_id", "social_media"})
        data["social_media"] = _social_media_columns(self.social_media)
        return data


class BusinessCardCreateRequest(BusinessCardFields):
    """Request body for POST /business-cards."""
    # Required for anonymous callers; optional for signed-in owners
    device_id: str | None = Field(default=None, min_length=1, max_length=64)


class BusinessCardUpdateRequest(BaseModel):
    """
    Request body for PUT /business-cards/{card_id}.

    A default of None means "not sent". Sending an explicit null is only
    accepted for the nullable columns.
    """
    first_name: str = Field(default=None, max_length=100)
    last_name: str = Field(default=None, max_length=100)
    job_title: str = Field(default=None, max_length=150)
    company: str = Field(default=None, max_length=150)
    email: EmailStr | Literal[""] = None
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    bio: str | None = Field(default=None, max_length=200)
    profile_image: str | None = None
    social_media: list[SocialMediaLink] = None
    template: CardTemplate = None

    model_config = {"extra": "forbid"}

    def to_changes(self) -> dict:
        """Only the fields present in the request body."""
        changes = self.model_dump(exclude_unset=True, exclude={"device_id", "social_media"})
        if "social_media" in self.model_fields_set:
            changes["social_media"] = _social_media_columns(self.social_media or [])
        return changes


class AutoSaveRequest(BusinessCardUpdateRequest):
    """Request body for POST /business-cards/auto-save."""
    device_id: str = Field(min_length=1, max_length=64)


class BusinessCardResponse(BaseModel):
    id: uuid.UUID
    owner_user_id: uuid.UUID | None
    device_id: str | None
    first_name: str
    last_name: str
    job_title: str
    company: str
    email: str
    phone: str | None
    website: str | None
    bio: str | None
    profile_image: str | None
    social_media: list[SocialMediaLink]
    template: CardTemplate
    is_template: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class PublicCardResponse(BaseModel):
    """A card as seen by an anonymous visitor (no owner or device id)."""
    id: uuid.UUID
    first_name: str
    last_name: str
    job_title: str
    company: str
    email: str
    phone: str | None
    website: str | None
    bio: str | None
    profile_image: str | None
    social_media: list[SocialMediaLink]
    template: CardTemplate

    model_config = {"from_attributes": True}
