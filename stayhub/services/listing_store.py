from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.models.discount import Discount, ListingDiscount
from stayhub.models.enums import ListingStatus
from stayhub.models.listing import Listing, listing_discount_links
from stayhub.models.listing_photo import ListingPhoto
from stayhub.services.listing_steps import DiscountSpec, PhotoSpec


class ListingStore:
    """
    Persistence for the Listing aggregate and its child rows.

    All writes run inside the caller's session transaction; the endpoint commits
    once, so a delete-then-insert replacement is never visible half done.
    Reads always repopulate identity-map rows so child collections reflect the
    latest replacement.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, listing_id: str) -> Listing | None:
        stmt = (
            select(Listing)
            .where(Listing.id == listing_id)
            .execution_options(populate_existing=True)
        )
        return (await self.db.execute(stmt)).scalar_one_or_none()

    async def create(self, **fields: Any) -> Listing:
        listing = Listing(**fields)
        self.db.add(listing)
        await self.db.flush()
        return await self.get(listing.id)

    async def save(self, listing: Listing) -> Listing:
        await self.db.flush()
        return await self.get(listing.id)

    async def delete(self, listing_id: str) -> None:
        # explicit cascade: children first, then the listing row
        await self.db.execute(delete(ListingPhoto).where(ListingPhoto.listing_id == listing_id))
        await self.db.execute(delete(ListingDiscount).where(ListingDiscount.listing_id == listing_id))
        await self.db.execute(
            delete(listing_discount_links).where(listing_discount_links.c.listing_id == listing_id)
        )
        await self.db.execute(delete(Listing).where(Listing.id == listing_id))
        await self.db.flush()

    async def _list(self, *criteria) -> list[Listing]:
        stmt = (
            select(Listing)
            .where(*criteria)
            .order_by(Listing.created_at.desc(), Listing.id.desc())
            .execution_options(populate_existing=True)
        )
        return list((await self.db.execute(stmt)).scalars().all())

    async def list_by_host(self, host_id: str) -> list[Listing]:
        return await self._list(Listing.host_id == host_id)

    async def list_published(self) -> list[Listing]:
        return await self._list(Listing.status == ListingStatus.PUBLISHED.value)

    async def list_all(self) -> list[Listing]:
        return await self._list()

    async def replace_photos(self, listing_id: str, photos: Iterable[PhotoSpec]) -> None:
        await self.db.execute(delete(ListingPhoto).where(ListingPhoto.listing_id == listing_id))
        self.db.add_all([
            ListingPhoto(
                listing_id=listing_id,
                public_id=p.public_id,
                secure_url=p.secure_url,
                order=p.order,
            )
            for p in photos
        ])
        await self.db.flush()

    async def replace_discounts(self, listing_id: str, discounts: Iterable[DiscountSpec]) -> None:
        await self.db.execute(delete(ListingDiscount).where(ListingDiscount.listing_id == listing_id))
        self.db.add_all([
            ListingDiscount(
                listing_id=listing_id,
                name=d.name,
                description=d.description,
                discount_percentage=d.discount_percentage,
                is_active=d.is_active,
                position=d.position,
            )
            for d in discounts
        ])
        await self.db.flush()

    async def find_discounts_by_ids(self, ids: list[str], *, active_only: bool) -> list[Discount]:
        if not ids:
            return []
        stmt = select(Discount).where(Discount.id.in_(ids))
        if active_only:
            stmt = stmt.where(Discount.is_active.is_(True))
        return list((await self.db.execute(stmt)).scalars().all())

    async def replace_discount_links(self, listing_id: str, discount_ids: list[str]) -> None:
        await self.db.execute(
            delete(listing_discount_links).where(listing_discount_links.c.listing_id == listing_id)
        )
        if discount_ids:
            await self.db.execute(
                insert(listing_discount_links),
                [{"listing_id": listing_id, "discount_id": d} for d in discount_ids],
            )
        await self.db.flush()
