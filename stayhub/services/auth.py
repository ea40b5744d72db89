from dataclasses import dataclass
from fastapi import Depends, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from stayhub.core.db import get_db
from stayhub.core.security import hash_api_key
from stayhub.models.api_key import ApiKey
from stayhub.models.enums import Role
from stayhub.models.user import User

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass(frozen=True)
class Actor:
    user_id: str
    role: str  # "admin" | "host" | "user"
    api_key_id: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @property
    def is_host(self) -> bool:
        return self.role == Role.HOST.value


async def get_actor(
    api_key: str | None = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> Actor:
    if not api_key:
        raise HTTPException(status_code=401, detail="Missing X-API-Key")

    hashed = hash_api_key(api_key)
    stmt = (
        select(ApiKey, User)
        .join(User, User.id == ApiKey.user_id)
        .where(ApiKey.key_hash == hashed, ApiKey.is_active.is_(True), User.is_active.is_(True))
    )
    row = (await db.execute(stmt)).first()
    if not row:
        raise HTTPException(status_code=401, detail="Invalid API key")

    key, user = row
    return Actor(user_id=user.id, role=user.role, api_key_id=key.id)


def require_host(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_host:
        raise HTTPException(status_code=403, detail="Host role required")
    return actor


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return actor
