"""
Discount association policies.

Two models exist and exactly one is active per deployment
(settings.discount_policy):

- "owned": step 4 carries the discounts themselves; they belong to the
  listing and are replaced wholesale on every step 4 write.
- "referenced": admins curate a global catalog; step 4 carries catalog ids,
  every id must resolve to an active discount at write time, and the
  listing's links are replaced wholesale.

The active policy drives step 4 parsing, persistence and how discounts are
rendered on listing reads.
"""
from __future__ import annotations

from typing import Any, Protocol, Type

from fastapi import Depends, HTTPException
from pydantic import BaseModel

from stayhub.core.config import settings
from stayhub.core.errors import BusinessRuleError
from stayhub.models.listing import Listing
from stayhub.schemas.listing import DiscountOut, Step4DiscountRefsIn, Step4DiscountsIn
from stayhub.schemas.validators import dedupe
from stayhub.services.listing_steps import DiscountSpec, StepResult
from stayhub.services.listing_store import ListingStore


def _host_detail_fields(data: Step4DiscountsIn | Step4DiscountRefsIn) -> dict[str, Any]:
    return {
        "safety_details": list(data.safety_details or []),
        "host_country": data.host_country,
        "host_street_address": data.host_street_address,
        "host_apt_floor": data.host_apt_floor,
        "host_city": data.host_city,
        "host_state": data.host_state,
        "host_postal_code": data.host_postal_code,
        "hosting_as_business": data.hosting_as_business,
    }


def discount_out(d) -> DiscountOut:
    return DiscountOut(
        id=d.id,
        name=d.name,
        description=d.description,
        discount_percentage=d.discount_percentage,
        is_active=d.is_active,
        created_at=d.created_at,
        updated_at=d.updated_at,
    )


class DiscountPolicy(Protocol):
    name: str
    step4_schema: Type[BaseModel]

    def build_step4(self, data: BaseModel) -> StepResult: ...

    async def apply_step4(self, store: ListingStore, listing: Listing, result: StepResult) -> None: ...

    def listing_discounts(self, listing: Listing) -> list[DiscountOut]: ...


class OwnedDiscountPolicy:
    name = "owned"
    step4_schema = Step4DiscountsIn

    def build_step4(self, data: Step4DiscountsIn) -> StepResult:
        discounts = [
            DiscountSpec(
                name=d.name,
                description=d.description,
                discount_percentage=d.discount_percentage,
                is_active=True if d.is_active is None else d.is_active,
                position=i,
            )
            for i, d in enumerate(data.discounts or [])
        ]
        return StepResult(step=4, fields=_host_detail_fields(data), discounts=discounts)

    async def apply_step4(self, store: ListingStore, listing: Listing, result: StepResult) -> None:
        await store.replace_discounts(listing.id, result.discounts or [])

    def listing_discounts(self, listing: Listing) -> list[DiscountOut]:
        return [discount_out(d) for d in listing.owned_discounts]


class ReferencedDiscountPolicy:
    name = "referenced"
    step4_schema = Step4DiscountRefsIn

    def build_step4(self, data: Step4DiscountRefsIn) -> StepResult:
        return StepResult(step=4, fields=_host_detail_fields(data), discount_ids=dedupe(data.discount_ids))

    async def apply_step4(self, store: ListingStore, listing: Listing, result: StepResult) -> None:
        requested = result.discount_ids or []
        found = await store.find_discounts_by_ids(requested, active_only=True)
        if len(found) < len(requested):
            found_ids = {d.id for d in found}
            invalid_ids = [i for i in requested if i not in found_ids]
            raise BusinessRuleError(
                f"Invalid or inactive discount IDs: {', '.join(invalid_ids)}",
                details=invalid_ids,
            )
        await store.replace_discount_links(listing.id, requested)

    def listing_discounts(self, listing: Listing) -> list[DiscountOut]:
        return [discount_out(d) for d in listing.catalog_discounts]


_POLICIES: dict[str, DiscountPolicy] = {
    "owned": OwnedDiscountPolicy(),
    "referenced": ReferencedDiscountPolicy(),
}


def get_discount_policy(name: str | None = None) -> DiscountPolicy:
    key = (name or settings.discount_policy).lower().strip()
    try:
        return _POLICIES[key]
    except KeyError:
        raise ValueError(f"Unsupported discount policy: {key}")


def current_discount_policy() -> DiscountPolicy:
    return get_discount_policy()


def require_discount_catalog(policy: DiscountPolicy = Depends(current_discount_policy)) -> DiscountPolicy:
    if policy.name != ReferencedDiscountPolicy.name:
        raise HTTPException(status_code=404, detail="Discount catalog is disabled")
    return policy
