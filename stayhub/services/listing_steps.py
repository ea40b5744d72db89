"""
Step application engine.

Turns a validated step payload into a StepResult: the scalar columns to write
on the listing plus, for steps that own child rows, the complete replacement
set. Nothing here touches the database; the listing service persists the
result inside one transaction.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from stayhub.core.config import settings
from stayhub.core.errors import BusinessRuleError, ListingValidationError
from stayhub.models.base import utcnow
from stayhub.models.listing import Listing
from stayhub.schemas.listing import Step1In, Step2In, Step3In
from stayhub.schemas.validators import dedupe


STEP_NAMES = {
    1: "Property Details",
    2: "Amenities & Media",
    3: "Booking & Pricing",
    4: "Discounts",
}


@dataclass(frozen=True)
class PhotoSpec:
    public_id: str
    secure_url: str
    order: int


@dataclass(frozen=True)
class DiscountSpec:
    name: str
    description: str | None
    discount_percentage: float
    is_active: bool
    position: int


@dataclass
class StepResult:
    step: int
    fields: dict[str, Any] = field(default_factory=dict)

    # None means "leave the collection as it is"
    photos: list[PhotoSpec] | None = None
    discounts: list[DiscountSpec] | None = None
    discount_ids: list[str] | None = None


def step_flag(step: int) -> str:
    if step not in STEP_NAMES:
        raise ValueError(f"unknown step: {step}")
    return f"step{step}_completed"


def step_label(step: int) -> str:
    return f"Step {step} ({STEP_NAMES[step]})"


def ensure_can_complete(listing: Listing, step: int) -> None:
    """Complete mode is first-time only; re-application must go through update mode."""
    if getattr(listing, step_flag(step)):
        raise BusinessRuleError(f"Step {step} already completed. Use PATCH to update.")


def build_step1(data: Step1In) -> StepResult:
    return StepResult(
        step=1,
        fields={
            "category": data.category.value,
            "place_type": data.place_type.value,
            "country": data.country,
            "street_address": data.street_address,
            "floor": data.floor,
            "city": data.city,
            "state": data.state,
            "postal_code": data.postal_code,
            "guests": data.guests,
            "bedrooms": data.bedrooms,
            "beds": data.beds,
            "home_precise": data.home_precise,
            "bedroom_lock": data.bedroom_lock,
            "private_bathroom": data.private_bathroom,
            "dedicated_bathroom": data.dedicated_bathroom,
            "shared_bathroom": data.shared_bathroom,
            "bathroom_usage": data.bathroom_usage.value,
        },
    )


def build_step2(data: Step2In, *, max_photos: int | None = None) -> StepResult:
    limit = settings.max_listing_photos if max_photos is None else max_photos
    if data.photos is not None and len(data.photos) > limit:
        raise ListingValidationError(f"Maximum {limit} photos allowed")

    photos = None
    # an absent or empty photo list keeps the current photos
    if data.photos:
        photos = [
            PhotoSpec(public_id=p.public_id, secure_url=p.secure_url, order=i)
            for i, p in enumerate(data.photos)
        ]

    return StepResult(
        step=2,
        fields={
            "favorites": [v.value for v in dedupe(data.favorites)],
            "amenities": [v.value for v in dedupe(data.amenities)],
            "safety_items": [v.value for v in dedupe(data.safety_items)],
            "title": data.title,
            "highlights": [v.value for v in dedupe(data.highlights)],
            "description": data.description,
        },
        photos=photos,
    )


def build_step3(data: Step3In) -> StepResult:
    return StepResult(
        step=3,
        fields={
            "booking_setting": data.booking_setting.value,
            "weekday_price": data.weekday_price,
            "weekend_price": data.weekend_price,
            "weekday_after_tax_price": data.weekday_after_tax_price,
            "weekend_after_tax_price": data.weekend_after_tax_price,
        },
    )


def merge_step(listing: Listing, result: StepResult) -> Listing:
    """Overwrite the step's columns and (re)affirm its completion flag."""
    for name, value in result.fields.items():
        setattr(listing, name, value)
    setattr(listing, step_flag(result.step), True)
    listing.updated_at = utcnow()
    return listing
