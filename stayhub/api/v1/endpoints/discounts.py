from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.schemas.discount import DiscountCreate, DiscountUpdate
from stayhub.schemas.listing import DiscountOut
from stayhub.services import discounts as discount_service
from stayhub.services.auth import Actor, get_actor, require_admin
from stayhub.services.discount_policy import discount_out, require_discount_catalog

# Global discount catalog; only mounted in effect under the referenced policy.
router = APIRouter(dependencies=[Depends(require_discount_catalog)])


@router.get("/discounts", response_model=list[DiscountOut])
async def list_active_discounts(
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> list[DiscountOut]:
    return [discount_out(d) for d in await discount_service.list_discounts(db, active_only=True)]


@router.post("/admin/discounts", response_model=DiscountOut, status_code=201)
async def admin_create_discount(
    payload: DiscountCreate,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DiscountOut:
    discount = await discount_service.create_discount(db, actor=actor, data=payload)
    await db.commit()
    return discount_out(discount)


@router.get("/admin/discounts", response_model=list[DiscountOut])
async def admin_list_discounts(
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> list[DiscountOut]:
    return [discount_out(d) for d in await discount_service.list_discounts(db)]


@router.get("/admin/discounts/{discount_id}", response_model=DiscountOut)
async def admin_get_discount(
    discount_id: str,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DiscountOut:
    return discount_out(await discount_service.get_discount(db, discount_id=discount_id))


@router.put("/admin/discounts/{discount_id}", response_model=DiscountOut)
async def admin_update_discount(
    discount_id: str,
    payload: DiscountUpdate,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> DiscountOut:
    discount = await discount_service.update_discount(db, actor=actor, discount_id=discount_id, data=payload)
    await db.commit()
    return discount_out(discount)


@router.delete("/admin/discounts/{discount_id}")
async def admin_delete_discount(
    discount_id: str,
    actor: Actor = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
) -> dict:
    await discount_service.delete_discount(db, actor=actor, discount_id=discount_id)
    await db.commit()
    return {"status": "deleted", "discount_id": discount_id}
