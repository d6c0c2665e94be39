"""
LinkRepository — persistence for public links.

Two writes here are single statements on purpose:

  - increment_view_count: UPDATE ... SET view_count = view_count + 1, so
    concurrent views don't overwrite each other's reads.
  - mark_claimed: a conditional UPDATE that only matches an active,
    unclaimed row. The database decides the winner of concurrent claims;
    a caller whose statement matches zero rows lost the race.
"""

import uuid
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError

from cardfolio.exceptions import SlugConflictError
from cardfolio.models.public_link import PublicLink
from cardfolio.repositories.base import Repository, translate_store_errors


class LinkRepository(Repository):

    @translate_store_errors
    async def get(self, link_id: uuid.UUID) -> PublicLink | None:
        result = await self.session.execute(
            select(PublicLink).where(PublicLink.id == link_id)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def get_by_slug(self, slug: str) -> PublicLink | None:
        result = await self.session.execute(
            select(PublicLink).where(PublicLink.unique_slug == slug)
        )
        return result.scalar_one_or_none()

    @translate_store_errors
    async def existing_slugs(self, slugs: list[str]) -> set[str]:
        """Subset of `slugs` already used by some link."""
        taken: set[str] = set()
        # Chunked to stay under SQLite's bound-parameter limit
        for start in range(0, len(slugs), 500):
            chunk = slugs[start:start + 500]
            result = await self.session.execute(
                select(PublicLink.unique_slug).where(PublicLink.unique_slug.in_(chunk))
            )
            taken.update(result.scalars().all())
        return taken

    @translate_store_errors
    async def add(self, link: PublicLink) -> PublicLink:
        self.session.add(link)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            # Lost a race with another insert of the same slug
            raise SlugConflictError(link.unique_slug) from exc
        return link

    @translate_store_errors
    async def add_all(self, links: list[PublicLink]) -> list[PublicLink]:
        self.session.add_all(links)
        try:
            await self.session.flush()
        except IntegrityError as exc:
            raise SlugConflictError(
                None,
                f"A slug in this batch of {len(links)} was taken concurrently",
            ) from exc
        return links

    @translate_store_errors
    async def set_active(self, link: PublicLink, is_active: bool) -> PublicLink:
        link.is_active = is_active
        await self.session.flush()
        return link

    @translate_store_errors
    async def delete(self, link: PublicLink) -> None:
        await self.session.delete(link)
        await self.session.flush()

    @translate_store_errors
    async def increment_view_count(self, link: PublicLink) -> int:
        await self.session.execute(
            update(PublicLink)
            .where(PublicLink.id == link.id)
            .values(view_count=PublicLink.view_count + 1)
            .execution_options(synchronize_session=False)
        )
        await self.session.refresh(link, attribute_names=["view_count"])
        return link.view_count

    @translate_store_errors
    async def mark_claimed(
        self,
        link: PublicLink,
        card_id: uuid.UUID,
        user_id: uuid.UUID,
        claimed_at: datetime,
    ) -> bool:
        """
        Bind an unclaimed link to a card in one conditional write.

        Returns:
            True if this call won the claim, False if the row was already
            claimed (or deactivated) by the time the write ran.
        """
        result = await self.session.execute(
            update(PublicLink)
            .where(PublicLink.id == link.id)
            .where(PublicLink.is_claimed.is_(False))
            .where(PublicLink.is_active.is_(True))
            .values(
                business_card_id=card_id,
                is_claimed=True,
                claimed_by_user_id=user_id,
                claimed_at=claimed_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        await self.session.refresh(link)
        return True

    @translate_store_errors
    async def list_by_card(self, card_id: uuid.UUID) -> list[PublicLink]:
        result = await self.session.execute(
            select(PublicLink)
            .where(PublicLink.business_card_id == card_id)
            .order_by(PublicLink.created_at)
        )
        return list(result.scalars().all())

    @translate_store_errors
    async def list_unassigned(self) -> list[PublicLink]:
        result = await self.session.execute(
            select(PublicLink)
            .where(PublicLink.is_pre_generated.is_(True))
            .where(PublicLink.is_claimed.is_(False))
            .where(PublicLink.is_active.is_(True))
            .order_by(PublicLink.created_at)
        )
        return list(result.scalars().all())

    @translate_store_errors
    async def list_all(self) -> list[PublicLink]:
        result = await self.session.execute(
            select(PublicLink).order_by(PublicLink.created_at)
        )
        return list(result.scalars().all())
