from __future__ import annotations

import logging
from typing import Literal

from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.models.enums import ListingStatus
from stayhub.models.listing import Listing
from stayhub.schemas.listing import ListingOut, PhotoOut, Step1In, Step2In, Step3In
from stayhub.services import listing_state
from stayhub.services.audit import audit
from stayhub.services.auth import Actor
from stayhub.services.discount_policy import DiscountPolicy, get_discount_policy
from stayhub.services.listing_guard import authorize_public_read, authorize_read, authorize_write
from stayhub.services.listing_steps import (
    StepResult,
    build_step1,
    build_step2,
    build_step3,
    ensure_can_complete,
    merge_step,
)
from stayhub.services.listing_store import ListingStore


log = logging.getLogger(__name__)

StepMode = Literal["complete", "update"]


def serialize_listing(listing: Listing, policy: DiscountPolicy | None = None) -> ListingOut:
    policy = policy or get_discount_policy()
    return ListingOut(
        id=listing.id,
        host_id=listing.host_id,
        status=listing.status,
        step1_completed=listing.step1_completed,
        step2_completed=listing.step2_completed,
        step3_completed=listing.step3_completed,
        step4_completed=listing.step4_completed,
        category=listing.category,
        place_type=listing.place_type,
        country=listing.country,
        street_address=listing.street_address,
        floor=listing.floor,
        city=listing.city,
        state=listing.state,
        postal_code=listing.postal_code,
        guests=listing.guests,
        bedrooms=listing.bedrooms,
        beds=listing.beds,
        home_precise=listing.home_precise,
        bedroom_lock=listing.bedroom_lock,
        private_bathroom=listing.private_bathroom,
        dedicated_bathroom=listing.dedicated_bathroom,
        shared_bathroom=listing.shared_bathroom,
        bathroom_usage=listing.bathroom_usage,
        favorites=listing.favorites or [],
        amenities=listing.amenities or [],
        safety_items=listing.safety_items or [],
        photos=[
            PhotoOut(id=p.id, public_id=p.public_id, secure_url=p.secure_url, order=p.order, created_at=p.created_at)
            for p in listing.photos
        ],
        title=listing.title,
        highlights=listing.highlights or [],
        description=listing.description,
        booking_setting=listing.booking_setting,
        weekday_price=listing.weekday_price,
        weekday_after_tax_price=listing.weekday_after_tax_price,
        weekend_price=listing.weekend_price,
        weekend_after_tax_price=listing.weekend_after_tax_price,
        weekend_charge_percentage=listing.weekend_charge_percentage,
        safety_details=listing.safety_details or [],
        host_country=listing.host_country,
        host_street_address=listing.host_street_address,
        host_apt_floor=listing.host_apt_floor,
        host_city=listing.host_city,
        host_state=listing.host_state,
        host_postal_code=listing.host_postal_code,
        hosting_as_business=listing.hosting_as_business,
        discounts=policy.listing_discounts(listing),
        created_at=listing.created_at,
        updated_at=listing.updated_at,
    )


async def create_draft(db: AsyncSession, *, actor: Actor) -> Listing:
    store = ListingStore(db)
    listing = await store.create(host_id=actor.user_id, status=ListingStatus.DRAFT.value)
    await audit(db, actor_user_id=actor.user_id, action="listing.created", target_type="listing", target_id=listing.id)
    log.info("listing %s created as draft by host %s", listing.id, actor.user_id)
    return listing


async def create_with_step1(db: AsyncSession, *, actor: Actor, data: Step1In) -> Listing:
    store = ListingStore(db)
    result = build_step1(data)
    listing = Listing(host_id=actor.user_id, status=ListingStatus.DRAFT.value)
    merge_step(listing, result)
    db.add(listing)
    await db.flush()
    await audit(
        db, actor_user_id=actor.user_id, action="listing.created", target_type="listing", target_id=listing.id,
        detail={"steps": [1]},
    )
    log.info("listing %s created with step 1 by host %s", listing.id, actor.user_id)
    return await store.get(listing.id)


async def get_listing_for_actor(db: AsyncSession, *, actor: Actor, listing_id: str) -> Listing:
    return authorize_read(actor, await ListingStore(db).get(listing_id))


async def get_host_listing(db: AsyncSession, *, actor: Actor, listing_id: str) -> Listing:
    return authorize_write(actor, await ListingStore(db).get(listing_id))


async def get_published_listing(db: AsyncSession, *, listing_id: str) -> Listing:
    return authorize_public_read(await ListingStore(db).get(listing_id))


async def list_host_listings(db: AsyncSession, *, actor: Actor) -> list[Listing]:
    return await ListingStore(db).list_by_host(actor.user_id)


async def list_published_listings(db: AsyncSession) -> list[Listing]:
    return await ListingStore(db).list_published()


async def list_all_listings(db: AsyncSession) -> list[Listing]:
    return await ListingStore(db).list_all()


def build_step(step: int, payload: BaseModel, policy: DiscountPolicy) -> StepResult:
    if step == 1:
        return build_step1(payload)
    if step == 2:
        return build_step2(payload)
    if step == 3:
        return build_step3(payload)
    if step == 4:
        return policy.build_step4(payload)
    raise ValueError(f"unknown step: {step}")


async def apply_step(
    db: AsyncSession,
    *,
    actor: Actor,
    listing_id: str,
    step: int,
    payload: Step1In | Step2In | Step3In | BaseModel,
    mode: StepMode,
    policy: DiscountPolicy | None = None,
) -> Listing:
    """
    Apply one wizard step to a listing the actor owns.

    "complete" refuses a step whose flag is already set; "update" always
    replaces the step's data. Child collections (photos for step 2,
    discounts for step 4) are replaced in full within the same transaction.
    """
    policy = policy or get_discount_policy()
    store = ListingStore(db)

    listing = authorize_write(actor, await store.get(listing_id))
    if mode == "complete":
        ensure_can_complete(listing, step)

    # validation and reference checks happen before any write
    result = build_step(step, payload, policy)

    if step == 2 and result.photos is not None:
        await store.replace_photos(listing.id, result.photos)
    if step == 4:
        await policy.apply_step4(store, listing, result)

    merge_step(listing, result)
    await audit(
        db, actor_user_id=actor.user_id, action=f"listing.step{step}.{mode}", target_type="listing",
        target_id=listing.id,
    )
    log.info("listing %s step %d applied (%s)", listing.id, step, mode)
    return await store.save(listing)


async def publish_listing(db: AsyncSession, *, actor: Actor, listing_id: str) -> Listing:
    store = ListingStore(db)
    listing = authorize_write(actor, await store.get(listing_id))
    was_published = listing_state.is_published(listing)
    listing_state.publish(listing)
    if not was_published:
        await audit(db, actor_user_id=actor.user_id, action="listing.published", target_type="listing",
                    target_id=listing.id)
        log.info("listing %s published", listing.id)
    return await store.save(listing)


async def unpublish_listing(db: AsyncSession, *, actor: Actor, listing_id: str) -> Listing:
    store = ListingStore(db)
    listing = authorize_write(actor, await store.get(listing_id))
    was_published = listing_state.is_published(listing)
    listing_state.unpublish(listing)
    if was_published:
        await audit(db, actor_user_id=actor.user_id, action="listing.unpublished", target_type="listing",
                    target_id=listing.id)
        log.info("listing %s unpublished", listing.id)
    return await store.save(listing)


async def delete_listing(db: AsyncSession, *, actor: Actor, listing_id: str) -> None:
    store = ListingStore(db)
    listing = authorize_write(actor, await store.get(listing_id))
    await store.delete(listing.id)
    await audit(db, actor_user_id=actor.user_id, action="listing.deleted", target_type="listing",
                target_id=listing_id)
    log.info("listing %s deleted", listing_id)
