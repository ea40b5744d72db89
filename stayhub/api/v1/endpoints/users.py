import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.core.security import generate_api_key
from stayhub.models.api_key import ApiKey
from stayhub.models.base import utcnow
from stayhub.models.user import User
from stayhub.schemas.user import UserBootstrap, UserKeyOut
from stayhub.services.audit import audit
from stayhub.services.internal_admin import require_internal_admin


log = logging.getLogger(__name__)
router = APIRouter()

@router.post(
    "/users/bootstrap",
    response_model=UserKeyOut,
    status_code=201,
    dependencies=[Depends(require_internal_admin)],
)
async def bootstrap_user(payload: UserBootstrap, db: AsyncSession = Depends(get_db)) -> UserKeyOut:
    """
    Internal-only user provisioning.
    Returns the user's first API key; it is never shown again.
    """
    user = User(name=payload.name, email=str(payload.email).lower(), role=payload.role.value)
    key = generate_api_key()

    try:
        db.add(user)
        await db.flush()  # user row first, the key references it
        db.add(ApiKey(user_id=user.id, key_prefix=key.prefix, key_hash=key.hashed, is_active=True))
        await audit(db, actor_user_id=None, action="user.bootstrapped", target_type="user", target_id=user.id,
                    detail={"role": user.role})
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("user bootstrap failed: integrity error")
        raise HTTPException(status_code=409, detail="Constraint violation")

    return UserKeyOut(user_id=user.id, role=user.role, api_key=key.plain)


@router.post(
    "/users/{user_id}/rotate-key",
    response_model=UserKeyOut,
    dependencies=[Depends(require_internal_admin)],
)
async def rotate_user_key(user_id: str, db: AsyncSession = Depends(get_db)) -> UserKeyOut:
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    # Deactivate previous keys for that user
    await db.execute(
        update(ApiKey)
        .where(ApiKey.user_id == user.id, ApiKey.is_active.is_(True))
        .values(is_active=False, rotated_at=utcnow())
    )

    key = generate_api_key()
    db.add(ApiKey(user_id=user.id, key_prefix=key.prefix, key_hash=key.hashed, is_active=True))
    await audit(db, actor_user_id=None, action="user.key_rotated", target_type="user", target_id=user.id)
    await db.commit()

    return UserKeyOut(user_id=user.id, role=user.role, api_key=key.plain)
