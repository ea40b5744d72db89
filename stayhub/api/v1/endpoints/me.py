from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.models.user import User
from stayhub.schemas.user import MeOut
from stayhub.services.auth import Actor, get_actor

router = APIRouter()

@router.get("/me", response_model=MeOut)
async def me(actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> MeOut:
    user = (await db.execute(select(User).where(User.id == actor.user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return MeOut(
        user_id=user.id,
        name=user.name,
        email=user.email,
        role=actor.role,
        api_key_id=actor.api_key_id,
    )
