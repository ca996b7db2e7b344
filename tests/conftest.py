"""공통 테스트 fixture"""
import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SECRET_KEY", "quizdesk-test-secret-key-0123456789abcdef")

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from quizdesk.core.cache import get_cache
from quizdesk.main import app
from quizdesk.models import Base, UserRole, get_db
from tests.factories import FakeCache, make_user


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest_asyncio.fixture
async def session_factory():
    """테스트용 인메모리 SQLite"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, fake_cache):
    """API 테스트 클라이언트 (DB/캐시 의존성 교체)"""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: fake_cache

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def teacher(test_db_session):
    return await make_user(test_db_session, "김교사", "teacher@example.com", UserRole.TEACHER)


@pytest_asyncio.fixture
async def student(test_db_session):
    return await make_user(test_db_session, "이학생", "student@example.com", UserRole.STUDENT)
