"""
Ownership & visibility rules for a single listing.

Existence is always checked first. Admins read everything, hosts read and
write only their own listings, and plain users only ever see published
listings: a draft answers "not found" so its existence is not revealed.
Decisions are made per call from the freshly loaded row, never cached.
"""
from __future__ import annotations

from stayhub.core.errors import ForbiddenError, NotFoundError
from stayhub.models.listing import Listing
from stayhub.services.auth import Actor
from stayhub.services.listing_state import is_published

LISTING_NOT_FOUND = "Listing not found"
NO_ACCESS = "You do not have access to this listing"


def authorize_read(actor: Actor, listing: Listing | None) -> Listing:
    if listing is None:
        raise NotFoundError(LISTING_NOT_FOUND)

    if actor.is_admin:
        return listing

    if actor.is_host:
        if listing.host_id != actor.user_id:
            raise ForbiddenError(NO_ACCESS)
        return listing

    if not is_published(listing):
        raise NotFoundError(LISTING_NOT_FOUND)
    return listing


def authorize_write(actor: Actor, listing: Listing | None) -> Listing:
    if listing is None:
        raise NotFoundError(LISTING_NOT_FOUND)
    if not actor.is_host or listing.host_id != actor.user_id:
        raise ForbiddenError(NO_ACCESS)
    return listing


def authorize_public_read(listing: Listing | None) -> Listing:
    if listing is None or not is_published(listing):
        raise NotFoundError(LISTING_NOT_FOUND)
    return listing
