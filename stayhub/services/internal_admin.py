import secrets

from fastapi import Header, HTTPException

from stayhub.core.config import settings


async def require_internal_admin(
    x_internal_admin_key: str | None = Header(default=None, alias="X-Internal-Admin-Key"),
) -> None:
    """Guards user provisioning; callers are ops tooling, never end users."""
    expected = settings.internal_admin_key
    if not x_internal_admin_key or not secrets.compare_digest(x_internal_admin_key.encode(), expected.encode()):
        raise HTTPException(status_code=403, detail="Internal admin key required")
