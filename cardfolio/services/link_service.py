"""
Link registry — creation, lookup and administration of public links.

Slugs:
  A slug is either chosen by the card owner (validated and checked for
  collisions) or drawn from the random token generator. Random slugs are
  collision-checked against the store and retried at most
  SLUG_MAX_ATTEMPTS times per slug; running out of attempts raises
  GenerationExhaustedError instead of looping. The bound matters for batch
  generation under a short shared prefix, where collisions get likelier.

Batch generation is all-or-nothing:
  Every slug in the batch is generated (unique against the store and
  within the batch) before anything is written. If a single slug runs out
  of attempts the batch fails as a whole, since a partial batch would leave
  the printed tag count out of step with the database. The template id is
  validated once, up front.

Public resolution:
  resolve_for_view is what a visitor's browser hits. Missing, inactive,
  unbound and orphaned links all look the same (not found). Each successful
  view bumps view_count with a single UPDATE statement; lost increments
  under heavy load are acceptable.
"""

import logging
import re
import uuid
from collections.abc import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.config import settings
from cardfolio.exceptions import (
    ForbiddenError,
    GenerationExhaustedError,
    InvalidArgumentError,
    LinkNotFoundError,
    SlugConflictError,
)
from cardfolio.models.business_card import BusinessCard
from cardfolio.models.public_link import PublicLink
from cardfolio.models.user import User
from cardfolio.repositories.cards import CardRepository
from cardfolio.repositories.links import LinkRepository
from cardfolio.security import TokenGenerator, generate_token
from cardfolio.services import card_service

logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r"^[A-Za-z0-9_-]{3,64}$")
PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,32}$")


def share_url(slug: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/s/{slug}"


def claim_url(slug: str) -> str:
    return f"{settings.PUBLIC_BASE_URL.rstrip('/')}/nfc/{slug}"


async def _generate_slugs(
    links: LinkRepository,
    count: int,
    make_candidate: Callable[[], str],
) -> list[str]:
    """
    Draw `count` slugs that are unused and distinct from each other.

    Works in rounds: each round gives every still-missing slug one more
    attempt and checks the whole round against the store in one query.
    A slug still missing after SLUG_MAX_ATTEMPTS rounds exhausts the call.
    """
    accepted: list[str] = []
    seen: set[str] = set()

    for _ in range(settings.SLUG_MAX_ATTEMPTS):
        candidates = []
        for _ in range(count - len(accepted)):
            candidate = make_candidate()
            # A repeat within the batch burns this attempt
            if candidate not in seen:
                seen.add(candidate)
                candidates.append(candidate)

        taken = await links.existing_slugs(candidates)
        accepted.extend(c for c in candidates if c not in taken)
        if len(accepted) == count:
            return accepted

        logger.warning(
            "Slug generation collided (%d of %d still missing)",
            count - len(accepted),
            count,
        )

    raise GenerationExhaustedError(settings.SLUG_MAX_ATTEMPTS)


# ---------------------------------------------------------------------------
# Link registry operations
# ---------------------------------------------------------------------------

async def create_link(
    db: AsyncSession,
    card_id: uuid.UUID,
    requested_slug: str | None = None,
    token_generator: TokenGenerator = generate_token,
) -> PublicLink:
    """
    Create an active share link bound to an existing card.

    Args:
        db: Database session.
        card_id: The card the link shows.
        requested_slug: Owner-chosen slug; a random one is drawn if omitted.
        token_generator: Source of random slugs.

    Returns:
        The new PublicLink (is_active=True, view_count=0).

    Raises:
        CardNotFoundError: If the card doesn't exist.
        InvalidArgumentError: If the requested slug isn't URL-safe.
        SlugConflictError: If the requested slug is taken.
        GenerationExhaustedError: If every random candidate collided.
    """
    card = await card_service.get_card(db, card_id)
    links = LinkRepository(db)

    if requested_slug is not None:
        if not SLUG_PATTERN.match(requested_slug):
            raise InvalidArgumentError(
                "Slug must be 3-64 characters of letters, digits, '-' or '_'"
            )
        if await links.get_by_slug(requested_slug) is not None:
            raise SlugConflictError(requested_slug)
        slug = requested_slug
    else:
        [slug] = await _generate_slugs(
            links, 1, lambda: token_generator(settings.SLUG_LENGTH)
        )

    link = await links.add(
        PublicLink(
            unique_slug=slug,
            business_card_id=card.id,
            is_active=True,
            is_pre_generated=False,
            is_claimed=False,
            view_count=0,
        )
    )
    logger.info("Created share link %s for card %s", slug, card.id)
    return link


async def batch_generate(
    db: AsyncSession,
    count: int,
    prefix: str | None = None,
    template_id: uuid.UUID | None = None,
    token_generator: TokenGenerator = generate_token,
) -> list[PublicLink]:
    """
    Pre-generate unbound, claimable links for printing onto NFC tags.

    Slugs are "<prefix>-<BATCH_SUFFIX_LENGTH random chars>" when a prefix
    is given, otherwise a plain SLUG_LENGTH token.

    Raises:
        InvalidArgumentError: If count is outside [1, BATCH_MAX_COUNT] or the
            prefix isn't URL-safe.
        CardNotFoundError: If template_id doesn't reference a card.
        GenerationExhaustedError: If any slug can't be generated; nothing
            is persisted in that case.
    """
    if not 1 <= count <= settings.BATCH_MAX_COUNT:
        raise InvalidArgumentError(
            f"count must be between 1 and {settings.BATCH_MAX_COUNT}, got {count}"
        )
    if prefix is not None and not PREFIX_PATTERN.match(prefix):
        raise InvalidArgumentError(
            "Prefix must be 1-32 characters of letters, digits, '-' or '_'"
        )
    if template_id is not None:
        await card_service.get_card(db, template_id)

    if prefix:
        def make_candidate() -> str:
            return f"{prefix}-{token_generator(settings.BATCH_SUFFIX_LENGTH)}"
    else:
        def make_candidate() -> str:
            return token_generator(settings.SLUG_LENGTH)

    links = LinkRepository(db)
    slugs = await _generate_slugs(links, count, make_candidate)

    created = await links.add_all([
        PublicLink(
            unique_slug=slug,
            business_card_id=None,
            is_active=True,
            is_pre_generated=True,
            is_claimed=False,
            template_id=template_id,
            view_count=0,
        )
        for slug in slugs
    ])
    logger.info(
        "Generated %d NFC links (prefix=%s, template=%s)", count, prefix, template_id
    )
    return created


async def get_link(db: AsyncSession, link_id: uuid.UUID) -> PublicLink:
    link = await LinkRepository(db).get(link_id)
    if link is None:
        raise LinkNotFoundError(link_id)
    return link


async def resolve_for_view(
    db: AsyncSession,
    slug: str,
) -> tuple[PublicLink, BusinessCard]:
    """
    Resolve a slug for a public visitor and count the view.

    Raises:
        LinkNotFoundError: If the link is missing, inactive, not yet claimed,
            or its card has vanished.
    """
    links = LinkRepository(db)
    link = await links.get_by_slug(slug)
    if link is None or not link.is_active:
        raise LinkNotFoundError(slug)
    if link.business_card_id is None:
        raise LinkNotFoundError(slug, f"Link '{slug}' has not been claimed yet")

    card = await CardRepository(db).get(link.business_card_id)
    if card is None:
        raise LinkNotFoundError(slug)

    await links.increment_view_count(link)
    return link, card


async def resolve_for_claim_check(db: AsyncSession, slug: str) -> dict:
    """
    Report a link's claim status for the claim page. Read-only.

    Inactive links report is_active=False and never reveal their template.

    Raises:
        LinkNotFoundError: If no link has this slug.
    """
    link = await LinkRepository(db).get_by_slug(slug)
    if link is None:
        raise LinkNotFoundError(slug)

    template_card = None
    if link.is_active and link.template_id is not None:
        template_card = await CardRepository(db).get(link.template_id)

    return {
        "slug": link.unique_slug,
        "is_active": link.is_active,
        "is_pre_generated": link.is_pre_generated,
        "is_claimed": link.is_claimed,
        "template_card": template_card,
    }


async def toggle_active(
    db: AsyncSession,
    link_id: uuid.UUID,
    is_active: bool,
) -> PublicLink:
    link = await get_link(db, link_id)
    link = await LinkRepository(db).set_active(link, is_active)
    logger.info("Link %s is_active=%s", link.unique_slug, is_active)
    return link


async def delete_link(db: AsyncSession, link_id: uuid.UUID) -> None:
    link = await get_link(db, link_id)
    await LinkRepository(db).delete(link)
    logger.info("Deleted link %s", link.unique_slug)


async def list_by_card(db: AsyncSession, card_id: uuid.UUID) -> list[PublicLink]:
    return await LinkRepository(db).list_by_card(card_id)


async def list_unassigned(db: AsyncSession) -> list[PublicLink]:
    """Active pre-generated links nobody has claimed yet."""
    return await LinkRepository(db).list_unassigned()


async def list_all(db: AsyncSession) -> list[PublicLink]:
    return await LinkRepository(db).list_all()


# ---------------------------------------------------------------------------
# Owner-scoped wrappers
# ---------------------------------------------------------------------------

async def create_link_for_owner(
    db: AsyncSession,
    user: User,
    card_id: uuid.UUID,
    requested_slug: str | None = None,
) -> PublicLink:
    await card_service.get_managed_card(db, card_id, user)
    return await create_link(db, card_id, requested_slug)


async def list_links_for_owner(
    db: AsyncSession,
    user: User,
    card_id: uuid.UUID,
) -> list[PublicLink]:
    await card_service.get_managed_card(db, card_id, user)
    return await list_by_card(db, card_id)


async def delete_link_for_owner(
    db: AsyncSession,
    user: User,
    link_id: uuid.UUID,
) -> None:
    """
    Delete a link bound to one of the caller's cards.

    Raises:
        LinkNotFoundError: If the link doesn't exist.
        ForbiddenError: If the link is unbound or bound to someone else's card.
    """
    link = await get_link(db, link_id)
    if not user.is_admin:
        if link.business_card_id is None:
            raise ForbiddenError("Only admins can delete unclaimed NFC links")
        await card_service.get_managed_card(db, link.business_card_id, user)
    await delete_link(db, link_id)
