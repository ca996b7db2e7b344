from typing import Sequence

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quizdesk.models.batch import Batch, batch_members


async def get_batch_by_id(session: AsyncSession, batch_id: int) -> Batch | None:
    """ID로 배치 조회"""
    result = await session.execute(select(Batch).where(Batch.id == batch_id))
    return result.scalar_one_or_none()


async def get_batch_by_name(session: AsyncSession, name: str) -> Batch | None:
    """이름으로 배치 조회"""
    result = await session.execute(select(Batch).where(Batch.name == name))
    return result.scalar_one_or_none()


async def create_batch(session: AsyncSession, name: str, teacher_id: int) -> Batch:
    """배치 생성"""
    batch = Batch(name=name, teacher_id=teacher_id)
    session.add(batch)
    await session.commit()
    await session.refresh(batch)
    return batch


async def get_all_batches_with_teacher(session: AsyncSession) -> Sequence[Batch]:
    """전체 배치 조회 (교사 정보 포함, 최신순)"""
    stmt = select(Batch).options(selectinload(Batch.teacher)).order_by(Batch.created_at.desc(), Batch.id.desc())
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_batches_by_teacher(
    session: AsyncSession,
    teacher_id: int,
    load_students: bool = False,
) -> Sequence[Batch]:
    """교사의 배치 목록 조회"""
    stmt = select(Batch).where(Batch.teacher_id == teacher_id).order_by(Batch.id)
    if load_students:
        stmt = stmt.options(selectinload(Batch.students))
    result = await session.execute(stmt)
    return result.scalars().all()


async def count_batches_by_teacher(session: AsyncSession, teacher_id: int) -> int:
    count = await session.scalar(select(func.count(Batch.id)).where(Batch.teacher_id == teacher_id))
    return count or 0


async def is_member(session: AsyncSession, batch_id: int, student_id: int) -> bool:
    """학생의 배치 가입 여부"""
    stmt = select(batch_members.c.batch_id).where(
        batch_members.c.batch_id == batch_id,
        batch_members.c.student_id == student_id,
    )
    result = await session.execute(stmt)
    return result.first() is not None


async def add_member(session: AsyncSession, batch_id: int, student_id: int) -> None:
    """멤버십 추가 (batch.students와 user.batches 동시 반영)"""
    await session.execute(insert(batch_members).values(batch_id=batch_id, student_id=student_id))
    await session.commit()


async def remove_member(session: AsyncSession, batch_id: int, student_id: int) -> int:
    """멤버십 제거, 삭제된 행 수 반환"""
    result = await session.execute(
        delete(batch_members).where(
            batch_members.c.batch_id == batch_id,
            batch_members.c.student_id == student_id,
        )
    )
    await session.commit()
    return result.rowcount


async def count_distinct_students(session: AsyncSession, batch_ids: list[int]) -> int:
    """여러 배치에 걸친 고유 학생 수"""
    if not batch_ids:
        return 0
    count = await session.scalar(
        select(func.count(func.distinct(batch_members.c.student_id))).where(
            batch_members.c.batch_id.in_(batch_ids)
        )
    )
    return count or 0


async def count_members_by_batch(session: AsyncSession, batch_ids: list[int]) -> dict[int, int]:
    """배치별 학생 수"""
    if not batch_ids:
        return {}
    stmt = (
        select(batch_members.c.batch_id, func.count(batch_members.c.student_id))
        .where(batch_members.c.batch_id.in_(batch_ids))
        .group_by(batch_members.c.batch_id)
    )
    result = await session.execute(stmt)
    return {batch_id: count for batch_id, count in result.all()}
