import logging
from datetime import datetime
from typing import AsyncGenerator

from sqlalchemy import DateTime, func
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from quizdesk.core.config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )


_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_engine(database_url: str | None = None) -> AsyncEngine:
    """엔진과 세션 팩토리 생성 (앱 시작 시 1회)"""
    global _engine, _session_factory
    if _engine is None:
        _engine = create_async_engine(
            database_url or settings.database_url,
            echo=False,
            pool_pre_ping=True,
        )
        _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
        logger.info("데이터베이스 엔진 초기화 완료")
    return _engine


async def dispose_engine() -> None:
    """엔진 종료 (앱 종료 시)"""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        logger.info("데이터베이스 엔진 종료")
    _engine = None
    _session_factory = None


def get_engine() -> AsyncEngine:
    if _engine is None:
        return init_engine()
    return _engine


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 단위 DB 세션 의존성"""
    get_engine()
    async with _session_factory() as session:
        yield session
