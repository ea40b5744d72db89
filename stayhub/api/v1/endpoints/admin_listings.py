from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.schemas.listing import ListingOut
from stayhub.services import listings as listing_service
from stayhub.services.auth import Actor, require_admin
from stayhub.services.discount_policy import DiscountPolicy, current_discount_policy

router = APIRouter()

@router.get("/admin/listings", response_model=list[ListingOut])
async def admin_list_listings(
    actor: Actor = Depends(require_admin),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> list[ListingOut]:
    listings = await listing_service.list_all_listings(db)
    return [listing_service.serialize_listing(l, policy) for l in listings]


@router.get("/admin/listings/{listing_id}", response_model=ListingOut)
async def admin_get_listing(
    listing_id: str,
    actor: Actor = Depends(require_admin),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.get_listing_for_actor(db, actor=actor, listing_id=listing_id)
    return listing_service.serialize_listing(listing, policy)
