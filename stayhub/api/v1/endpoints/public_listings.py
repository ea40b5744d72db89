from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.schemas.listing import ListingOut
from stayhub.services import listings as listing_service
from stayhub.services.discount_policy import DiscountPolicy, current_discount_policy

router = APIRouter()

# No auth: only published listings are visible here.

@router.get("/public/listings", response_model=list[ListingOut])
async def list_public_listings(
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> list[ListingOut]:
    listings = await listing_service.list_published_listings(db)
    return [listing_service.serialize_listing(l, policy) for l in listings]


@router.get("/public/listings/{listing_id}", response_model=ListingOut)
async def get_public_listing(
    listing_id: str,
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.get_published_listing(db, listing_id=listing_id)
    return listing_service.serialize_listing(listing, policy)
