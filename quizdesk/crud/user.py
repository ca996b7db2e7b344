from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quizdesk.models.user import User, UserRole


async def get_user_by_id(session: AsyncSession, user_id: int) -> User | None:
    """ID로 사용자 조회"""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    """이메일로 사용자 조회"""
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_student_with_batches(session: AsyncSession, student_id: int) -> User | None:
    """학생 조회 (가입 배치 eager load)"""
    stmt = (
        select(User)
        .where(User.id == student_id, User.role == UserRole.STUDENT)
        .options(selectinload(User.batches))
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    name: str,
    email: str,
    password_hash: str,
    role: UserRole,
) -> User:
    """사용자 생성"""
    user = User(name=name, email=email, password_hash=password_hash, role=role)
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user
