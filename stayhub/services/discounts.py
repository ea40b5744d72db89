from __future__ import annotations

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.errors import NotFoundError
from stayhub.models.base import utcnow
from stayhub.models.discount import Discount
from stayhub.models.listing import listing_discount_links
from stayhub.schemas.discount import DiscountCreate, DiscountUpdate
from stayhub.services.audit import audit
from stayhub.services.auth import Actor


log = logging.getLogger(__name__)


async def get_discount(db: AsyncSession, *, discount_id: str) -> Discount:
    discount = (await db.execute(select(Discount).where(Discount.id == discount_id))).scalar_one_or_none()
    if discount is None:
        raise NotFoundError("Discount not found")
    return discount


async def list_discounts(db: AsyncSession, *, active_only: bool = False) -> list[Discount]:
    stmt = select(Discount).order_by(Discount.created_at.desc(), Discount.id.desc())
    if active_only:
        stmt = stmt.where(Discount.is_active.is_(True))
    return list((await db.execute(stmt)).scalars().all())


async def create_discount(db: AsyncSession, *, actor: Actor, data: DiscountCreate) -> Discount:
    discount = Discount(
        name=data.name,
        description=data.description,
        discount_percentage=data.discount_percentage,
        is_active=data.is_active,
    )
    db.add(discount)
    await db.flush()
    await audit(db, actor_user_id=actor.user_id, action="discount.created", target_type="discount",
                target_id=discount.id)
    log.info("discount %s created", discount.id)
    return discount


async def update_discount(db: AsyncSession, *, actor: Actor, discount_id: str, data: DiscountUpdate) -> Discount:
    discount = await get_discount(db, discount_id=discount_id)

    # only fields present in the request body change
    changes = data.model_dump(exclude_unset=True)
    for name, value in changes.items():
        if name in ("name", "discount_percentage", "is_active") and value is None:
            continue
        setattr(discount, name, value)
    discount.updated_at = utcnow()

    await db.flush()
    await audit(db, actor_user_id=actor.user_id, action="discount.updated", target_type="discount",
                target_id=discount.id, detail={"fields": sorted(changes)})
    return discount


async def delete_discount(db: AsyncSession, *, actor: Actor, discount_id: str) -> None:
    discount = await get_discount(db, discount_id=discount_id)
    await db.execute(delete(listing_discount_links).where(listing_discount_links.c.discount_id == discount.id))
    await db.execute(delete(Discount).where(Discount.id == discount.id))
    await audit(db, actor_user_id=actor.user_id, action="discount.deleted", target_type="discount",
                target_id=discount_id)
    log.info("discount %s deleted", discount_id)
