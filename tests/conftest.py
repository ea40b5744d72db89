import os

# must be set before stayhub.core.config builds its settings
os.environ.setdefault("INTERNAL_ADMIN_KEY", "test-internal")
os.environ.setdefault("API_KEY_PEPPER", "test-pepper")
os.environ.setdefault("DISCOUNT_POLICY", "owned")

import pytest
import httpx

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Import Base + all models so metadata is complete
from stayhub.models import Base

from stayhub.main import app
from stayhub.core.db import get_db
from stayhub.services.discount_policy import current_discount_policy, get_discount_policy
from stayhub.services.media import UploadedMedia, get_media_uploader

from fixtures_seed import seed_users  # noqa: F401


def _test_db_url() -> str:
    # in-memory SQLite unless a real Postgres is provided
    return os.getenv("DATABASE_URL_TEST", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
async def async_engine():
    url = _test_db_url()
    if url.startswith("sqlite"):
        engine = create_async_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    else:
        engine = create_async_engine(url, future=True, pool_pre_ping=True)
    try:
        # fresh schema per test
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(async_engine):
    session_factory = async_sessionmaker(bind=async_engine, expire_on_commit=False, class_=AsyncSession)
    async with session_factory() as session:
        yield session


class FakeUploader:
    def __init__(self):
        self.uploaded = []

    async def upload(self, image):
        self.uploaded.append(image)
        n = len(self.uploaded)
        return UploadedMedia(public_id=f"listings/fake-{n}", secure_url=f"https://cdn.test/listings/fake-{n}.jpg")


@pytest.fixture
def fake_uploader():
    return FakeUploader()


@pytest.fixture
def discount_policy_name():
    return "owned"


@pytest.fixture
async def client(db_session: AsyncSession, fake_uploader, discount_policy_name):
    """
    HTTP client that uses the test DB session via dependency override.
    """
    async def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_media_uploader] = lambda: fake_uploader
    app.dependency_overrides[current_discount_policy] = lambda: get_discount_policy(discount_policy_name)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
