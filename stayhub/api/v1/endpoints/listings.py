from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.schemas.listing import (
    ListingDeletedOut,
    ListingOut,
    Step1In,
    Step2In,
    Step3In,
    UploadedPhotoOut,
)
from stayhub.services import listings as listing_service
from stayhub.services.auth import Actor, get_actor, require_host
from stayhub.services.discount_policy import DiscountPolicy, current_discount_policy
from stayhub.services.media import ImageFile, MediaUploader, get_media_uploader, upload_listing_photos

router = APIRouter()


async def _apply(
    db: AsyncSession,
    *,
    actor: Actor,
    listing_id: str,
    step: int,
    payload,
    mode: str,
    policy: DiscountPolicy,
) -> ListingOut:
    listing = await listing_service.apply_step(
        db, actor=actor, listing_id=listing_id, step=step, payload=payload, mode=mode, policy=policy
    )
    out = listing_service.serialize_listing(listing, policy)
    await db.commit()
    return out


def _parse_step4(body: dict, policy: DiscountPolicy):
    # the step 4 shape depends on the active discount policy
    try:
        return policy.step4_schema.model_validate(body)
    except ValidationError as e:
        raise RequestValidationError(e.errors())


@router.post("/listings/draft", response_model=ListingOut, status_code=201)
async def create_draft(
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.create_draft(db, actor=actor)
    out = listing_service.serialize_listing(listing, policy)
    await db.commit()
    return out


@router.post("/listings", response_model=ListingOut, status_code=201)
async def create_listing(
    payload: Step1In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.create_with_step1(db, actor=actor, data=payload)
    out = listing_service.serialize_listing(listing, policy)
    await db.commit()
    return out


@router.get("/listings", response_model=list[ListingOut])
async def list_my_listings(
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> list[ListingOut]:
    listings = await listing_service.list_host_listings(db, actor=actor)
    return [listing_service.serialize_listing(l, policy) for l in listings]


@router.post("/listings/photos/upload", response_model=list[UploadedPhotoOut])
async def upload_photos(
    photos: list[UploadFile] | None = File(default=None),
    actor: Actor = Depends(require_host),
    uploader: MediaUploader = Depends(get_media_uploader),
) -> list[UploadedPhotoOut]:
    images = [
        ImageFile(
            data=await f.read(),
            filename=f.filename or "upload",
            content_type=f.content_type or "application/octet-stream",
        )
        for f in photos or []
    ]
    uploaded = await upload_listing_photos(uploader, images)
    return [UploadedPhotoOut(public_id=u.public_id, secure_url=u.secure_url) for u in uploaded]


@router.get("/listings/{listing_id}", response_model=ListingOut)
async def get_listing(
    listing_id: str,
    actor: Actor = Depends(get_actor),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.get_listing_for_actor(db, actor=actor, listing_id=listing_id)
    return listing_service.serialize_listing(listing, policy)


# --- Steps: POST completes a step once, PATCH updates it any time ---

@router.post("/listings/{listing_id}/step-1", response_model=ListingOut, status_code=201)
async def complete_step1(
    listing_id: str,
    payload: Step1In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=1, payload=payload, mode="complete",
                        policy=policy)


@router.patch("/listings/{listing_id}/step-1", response_model=ListingOut)
async def update_step1(
    listing_id: str,
    payload: Step1In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=1, payload=payload, mode="update",
                        policy=policy)


@router.post("/listings/{listing_id}/step-2", response_model=ListingOut, status_code=201)
async def complete_step2(
    listing_id: str,
    payload: Step2In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=2, payload=payload, mode="complete",
                        policy=policy)


@router.patch("/listings/{listing_id}/step-2", response_model=ListingOut)
async def update_step2(
    listing_id: str,
    payload: Step2In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=2, payload=payload, mode="update",
                        policy=policy)


@router.post("/listings/{listing_id}/step-3", response_model=ListingOut, status_code=201)
async def complete_step3(
    listing_id: str,
    payload: Step3In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=3, payload=payload, mode="complete",
                        policy=policy)


@router.patch("/listings/{listing_id}/step-3", response_model=ListingOut)
async def update_step3(
    listing_id: str,
    payload: Step3In,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    return await _apply(db, actor=actor, listing_id=listing_id, step=3, payload=payload, mode="update",
                        policy=policy)


@router.post("/listings/{listing_id}/step-4", response_model=ListingOut, status_code=201)
async def complete_step4(
    listing_id: str,
    body: dict = Body(...),
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    payload = _parse_step4(body, policy)
    return await _apply(db, actor=actor, listing_id=listing_id, step=4, payload=payload, mode="complete",
                        policy=policy)


@router.patch("/listings/{listing_id}/step-4", response_model=ListingOut)
async def update_step4(
    listing_id: str,
    body: dict = Body(...),
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    payload = _parse_step4(body, policy)
    return await _apply(db, actor=actor, listing_id=listing_id, step=4, payload=payload, mode="update",
                        policy=policy)


# --- Lifecycle ---

@router.post("/listings/{listing_id}/publish", response_model=ListingOut)
async def publish_listing(
    listing_id: str,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.publish_listing(db, actor=actor, listing_id=listing_id)
    out = listing_service.serialize_listing(listing, policy)
    await db.commit()
    return out


@router.post("/listings/{listing_id}/unpublish", response_model=ListingOut)
async def unpublish_listing(
    listing_id: str,
    actor: Actor = Depends(require_host),
    policy: DiscountPolicy = Depends(current_discount_policy),
    db: AsyncSession = Depends(get_db),
) -> ListingOut:
    listing = await listing_service.unpublish_listing(db, actor=actor, listing_id=listing_id)
    out = listing_service.serialize_listing(listing, policy)
    await db.commit()
    return out


@router.delete("/listings/{listing_id}", response_model=ListingDeletedOut)
async def delete_listing(
    listing_id: str,
    actor: Actor = Depends(require_host),
    db: AsyncSession = Depends(get_db),
) -> ListingDeletedOut:
    await listing_service.delete_listing(db, actor=actor, listing_id=listing_id)
    await db.commit()
    return ListingDeletedOut(status="deleted", listing_id=listing_id)
