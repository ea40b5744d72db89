from __future__ import annotations

from stayhub.core.errors import BusinessRuleError
from stayhub.models.enums import ListingStatus
from stayhub.models.listing import Listing
from stayhub.services.listing_steps import step_flag, step_label

# step 4 (discounts) is optional for publishing
PUBLISH_REQUIRED_STEPS = (1, 2, 3)


def missing_publish_steps(listing: Listing) -> list[str]:
    return [step_label(s) for s in PUBLISH_REQUIRED_STEPS if not getattr(listing, step_flag(s))]


def is_published(listing: Listing) -> bool:
    return listing.status == ListingStatus.PUBLISHED.value


def publish(listing: Listing) -> Listing:
    missing = missing_publish_steps(listing)
    if missing:
        raise BusinessRuleError(
            f"Cannot publish listing. Incomplete steps: {', '.join(missing)}",
            details=missing,
        )
    listing.status = ListingStatus.PUBLISHED.value
    return listing


def unpublish(listing: Listing) -> Listing:
    # step flags survive so the listing can be republished as-is
    listing.status = ListingStatus.DRAFT.value
    return listing
