"""
Claim workflow — the one-shot binding of a pre-generated NFC link.

State machine for a pre-generated link:

    [unbound, is_claimed=False]
            | claim(user) succeeds
            v
    [bound, is_claimed=True, claimed_by_user_id=user, claimed_at=now]
            (terminal)

Steps:
  1. Resolve the slug and run the read-time guards
     (not found -> inactive -> not claimable -> already claimed).
  2. Build the new card for the claimant: a copy of the template's
     presentable fields when the link has a resolvable template, blank
     defaults otherwise. The card always gets a fresh device id.
  3. Persist the card.
  4. Bind the link with one conditional UPDATE that only matches an active,
     unclaimed row (LinkRepository.mark_claimed).

Concurrency:
  Two claims of the same slug can both pass step 1. Only one UPDATE in
  step 4 can match the row, so the database picks the winner; the loser
  gets AlreadyClaimedError even though its read-time check passed. The
  loser's request transaction rolls back, taking its card with it. A link
  deactivated between the read and the write is reported as LinkInactiveError.

Nothing here is retried. The visitor decides whether to try again
(e.g. by re-scanning the tag).
"""

import logging
import uuid
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.config import settings
from cardfolio.exceptions import (
    AlreadyClaimedError,
    LinkInactiveError,
    LinkNotFoundError,
    NotClaimableError,
)
from cardfolio.repositories.cards import CardRepository
from cardfolio.repositories.links import LinkRepository
from cardfolio.security import generate_token

logger = logging.getLogger(__name__)


async def claim(db: AsyncSession, slug: str, user_id: uuid.UUID) -> dict:
    """
    Claim a pre-generated link for a user.

    Args:
        db: Database session.
        slug: The slug printed on the NFC tag.
        user_id: The authenticated claimant.

    Returns:
        Dict with business_card_id and the updated link.

    Raises:
        LinkNotFoundError: If no link has this slug.
        LinkInactiveError: If an admin deactivated the link, including while
            this claim was in flight.
        NotClaimableError: If the link is an owner's share link.
        AlreadyClaimedError: If the link is (or just became) claimed.
    """
    links = LinkRepository(db)
    cards = CardRepository(db)

    link = await links.get_by_slug(slug)
    if link is None:
        raise LinkNotFoundError(slug)
    if not link.is_active:
        raise LinkInactiveError(slug)
    if not link.is_pre_generated:
        raise NotClaimableError(slug)
    if link.is_claimed:
        raise AlreadyClaimedError(slug)

    fields = {}
    if link.template_id is not None:
        template = await cards.get(link.template_id)
        if template is not None:
            fields = template.presentable_fields()

    card = await cards.create(
        **fields,
        owner_user_id=user_id,
        device_id=generate_token(settings.DEVICE_ID_LENGTH),
        is_template=False,
    )

    won = await links.mark_claimed(
        link,
        card_id=card.id,
        user_id=user_id,
        claimed_at=datetime.now(timezone.utc),
    )
    if not won:
        # Tell a concurrent deactivation apart from a concurrent claim
        await db.refresh(link)
        if not link.is_active:
            logger.warning("Claim of %s by %s hit a deactivated link", slug, user_id)
            raise LinkInactiveError(slug)
        logger.warning("Claim of %s by %s lost to a concurrent claim", slug, user_id)
        raise AlreadyClaimedError(slug)

    logger.info("Link %s claimed by %s as card %s", slug, user_id, card.id)
    return {"business_card_id": card.id, "link": link}
