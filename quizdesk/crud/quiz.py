from datetime import datetime
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.models.batch import Batch
from quizdesk.models.quiz import Quiz, QuizSource


async def get_quiz_by_id(session: AsyncSession, quiz_id: int) -> Quiz | None:
    """ID로 퀴즈 조회"""
    result = await session.execute(select(Quiz).where(Quiz.id == quiz_id))
    return result.scalar_one_or_none()


async def create_quiz(
    session: AsyncSession,
    teacher_id: int,
    batch_id: int,
    title: str,
    questions: list[dict],
    source: QuizSource,
    deadline: datetime | None = None,
    duration: int = 30,
) -> Quiz:
    """퀴즈 생성 (questions는 정답 인덱스 형태)"""
    quiz = Quiz(
        teacher_id=teacher_id,
        batch_id=batch_id,
        title=title,
        questions=questions,
        source=source,
        deadline=deadline,
        duration=duration,
    )
    session.add(quiz)
    await session.commit()
    await session.refresh(quiz)
    return quiz


async def update_avg_score(session: AsyncSession, quiz: Quiz, avg_score: int) -> Quiz:
    """퀴즈 평균 점수 갱신"""
    quiz.avg_score = avg_score
    await session.commit()
    await session.refresh(quiz)
    return quiz


async def get_quizzes_by_batch(session: AsyncSession, batch_id: int) -> Sequence[Quiz]:
    """배치의 퀴즈 목록 (마감일 오름차순, 마감일 없는 퀴즈는 마지막)"""
    stmt = (
        select(Quiz)
        .where(Quiz.batch_id == batch_id)
        .order_by(Quiz.deadline.asc().nulls_last(), Quiz.id)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_upcoming_quizzes_by_batches(
    session: AsyncSession,
    batch_ids: list[int],
    now: datetime,
) -> Sequence[Quiz]:
    """여러 배치에서 마감 전 퀴즈 조회 (마감일 오름차순)"""
    if not batch_ids:
        return []
    stmt = (
        select(Quiz)
        .where(Quiz.batch_id.in_(batch_ids), Quiz.deadline >= now)
        .order_by(Quiz.deadline.asc(), Quiz.id)
    )
    result = await session.execute(stmt)
    return result.scalars().all()


async def get_quizzes_by_batches(session: AsyncSession, batch_ids: list[int]) -> Sequence[Quiz]:
    if not batch_ids:
        return []
    result = await session.execute(select(Quiz).where(Quiz.batch_id.in_(batch_ids)))
    return result.scalars().all()


async def get_quizzes_by_teacher_with_batch(
    session: AsyncSession,
    teacher_id: int,
) -> Sequence[tuple[Quiz, str | None]]:
    """교사의 퀴즈 목록과 배치 이름 (최신순)"""
    stmt = (
        select(Quiz, Batch.name)
        .outerjoin(Batch, Batch.id == Quiz.batch_id)
        .where(Quiz.teacher_id == teacher_id)
        .order_by(Quiz.created_at.desc(), Quiz.id.desc())
    )
    result = await session.execute(stmt)
    return result.all()


async def find_teacher_quizzes(
    session: AsyncSession,
    teacher_id: int,
    batch_id: int | None = None,
    quiz_id: int | None = None,
) -> Sequence[Quiz]:
    """리더보드 필터 조건으로 교사의 퀴즈 조회"""
    stmt = select(Quiz).where(Quiz.teacher_id == teacher_id)
    if batch_id is not None:
        stmt = stmt.where(Quiz.batch_id == batch_id)
    if quiz_id is not None:
        stmt = stmt.where(Quiz.id == quiz_id)
    result = await session.execute(stmt.order_by(Quiz.id))
    return result.scalars().all()
