import pytest_asyncio
from stayhub.core.security import generate_api_key
from stayhub.models.api_key import ApiKey
from stayhub.models.user import User


async def _make_user(db_session, *, name: str, email: str, role: str) -> dict:
    user = User(name=name, email=email, role=role)
    db_session.add(user)
    await db_session.flush()

    key = generate_api_key()
    key_row = ApiKey(user_id=user.id, key_prefix=key.prefix, key_hash=key.hashed, is_active=True)
    db_session.add(key_row)
    await db_session.flush()

    return {
        "user_id": user.id,
        "api_key": key.plain,
        "api_key_id": key_row.id,
        "headers": {"X-API-Key": key.plain},
    }


@pytest_asyncio.fixture
async def seed_users(db_session):
    users = {
        "host": await _make_user(db_session, name="Host One", email="host1@test.com", role="host"),
        "other_host": await _make_user(db_session, name="Host Two", email="host2@test.com", role="host"),
        "admin": await _make_user(db_session, name="Admin", email="admin@test.com", role="admin"),
        "user": await _make_user(db_session, name="Guest", email="guest@test.com", role="user"),
    }
    await db_session.commit()
    return users
