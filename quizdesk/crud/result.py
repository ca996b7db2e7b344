from datetime import datetime, timezone
from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.models.quiz import Quiz
from quizdesk.models.result import Result
from quizdesk.models.user import User


async def get_result(session: AsyncSession, quiz_id: int, student_id: int) -> Result | None:
    """(퀴즈, 학생) 결과 조회"""
    stmt = select(Result).where(Result.quiz_id == quiz_id, Result.student_id == student_id)
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_result(
    session: AsyncSession,
    quiz_id: int,
    student_id: int,
    score: int,
    correct_answers: int,
    time_spent: str,
    answers: list[dict],
) -> Result:
    """결과 생성 (중복 시 IntegrityError 전파)"""
    record = Result(
        quiz_id=quiz_id,
        student_id=student_id,
        score=score,
        correct_answers=correct_answers,
        time_spent=time_spent,
        answers=answers,
        completed_at=datetime.now(timezone.utc),
    )
    session.add(record)
    await session.commit()
    await session.refresh(record)
    return record


async def get_scores_by_quiz(session: AsyncSession, quiz_id: int) -> list[int]:
    """퀴즈의 모든 점수"""
    result = await session.execute(select(Result.score).where(Result.quiz_id == quiz_id))
    return list(result.scalars().all())


async def get_scores_by_student(session: AsyncSession, student_id: int) -> list[int]:
    result = await session.execute(select(Result.score).where(Result.student_id == student_id))
    return list(result.scalars().all())


async def get_results_with_quiz_by_student(
    session: AsyncSession,
    student_id: int,
) -> Sequence[tuple[Result, str]]:
    """학생의 결과와 퀴즈 제목 (최신순, 삭제된 퀴즈는 제외)"""
    stmt = (
        select(Result, Quiz.title)
        .join(Quiz, Quiz.id == Result.quiz_id)
        .where(Result.student_id == student_id)
        .order_by(Result.completed_at.desc(), Result.id.desc())
    )
    result = await session.execute(stmt)
    return result.all()


async def get_results_by_student_for_quizzes(
    session: AsyncSession,
    student_id: int,
    quiz_ids: list[int],
) -> dict[int, Result]:
    """학생의 퀴즈별 결과 (quiz_id → Result)"""
    if not quiz_ids:
        return {}
    stmt = select(Result).where(Result.student_id == student_id, Result.quiz_id.in_(quiz_ids))
    result = await session.execute(stmt)
    return {r.quiz_id: r for r in result.scalars().all()}


async def get_completed_quiz_ids(session: AsyncSession, student_id: int) -> set[int]:
    result = await session.execute(select(Result.quiz_id).where(Result.student_id == student_id))
    return set(result.scalars().all())


async def get_leaderboard_rows(
    session: AsyncSession,
    quiz_ids: list[int],
) -> Sequence[tuple[Result, User]]:
    """리더보드용 결과 (점수 내림차순, 동점 시 먼저 제출한 순)"""
    if not quiz_ids:
        return []
    stmt = (
        select(Result, User)
        .join(User, User.id == Result.student_id)
        .where(Result.quiz_id.in_(quiz_ids))
        .order_by(Result.score.desc(), Result.completed_at.asc(), Result.id.asc())
    )
    result = await session.execute(stmt)
    return result.all()

