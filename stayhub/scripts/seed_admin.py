import asyncio
import os

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from stayhub.core.config import settings
from stayhub.core.security import generate_api_key
from stayhub.models.api_key import ApiKey
from stayhub.models.enums import Role
from stayhub.models.user import User


async def main():
    email = os.getenv("SEED_ADMIN_EMAIL", "admin@stayhub.local").lower()
    name = os.getenv("SEED_ADMIN_NAME", "Admin")

    engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    Session = async_sessionmaker(engine, expire_on_commit=False)

    async with Session() as db:
        existing = (await db.execute(select(User).where(User.email == email))).scalar_one_or_none()
        if not existing:
            user = User(name=name, email=email, role=Role.ADMIN.value)
            db.add(user)
            await db.flush()
            key = generate_api_key()
            db.add(ApiKey(user_id=user.id, key_prefix=key.prefix, key_hash=key.hashed, is_active=True))
            await db.commit()
            print(f"Created admin {email} ({user.id})")
            print(f"API key (shown once): {key.plain}")
        else:
            print(f"{email} already exists")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
# Seeds the first admin user and prints its API key; safe to re-run.
