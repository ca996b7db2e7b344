import logging

from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.core import cache_keys
from quizdesk.core.cache import CacheBackend
from quizdesk.crud import batch as batch_crud, quiz as quiz_crud, result as result_crud, user as user_crud
from quizdesk.exceptions import (
    BatchNotFoundError,
    ForbiddenError,
    QuizNotFoundError,
    ResultNotFoundError,
    StudentNotFoundError,
)
from quizdesk.schemas import dashboard as dashboard_schema, result as result_schema
from quizdesk.utils.dates import as_utc, utcnow
from quizdesk.utils.scoring import average_score

logger = logging.getLogger(__name__)

UNANSWERED = -1


async def get_student_result(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
    quiz_id: int,
) -> result_schema.StudentResultResponse:
    """퀴즈 결과 상세 (문항별 선택/정답/정오)"""
    cache_key = cache_keys.student_result(student_id, quiz_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return result_schema.StudentResultResponse.model_validate(cached)

    result = await result_crud.get_result(session, quiz_id, student_id)
    if not result:
        raise ResultNotFoundError(quiz_id)

    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)

    # 문항별 첫 번째 답안 (채점 규칙과 동일)
    selected: dict[int, int | None] = {}
    for answer in result.answers:
        index = answer.get("question_index")
        if index is not None and index not in selected:
            selected[index] = answer.get("selected_option")

    breakdown = []
    for index, q in enumerate(quiz.questions):
        user_answer = selected.get(index)
        if user_answer is None:
            user_answer = UNANSWERED
        breakdown.append(
            result_schema.QuestionBreakdown(
                number=index + 1,
                question=q["question"],
                options=q["options"],
                correct_answer=q["correct_answer"],
                user_answer=user_answer,
                is_correct=user_answer == q["correct_answer"],
                explanation=q.get("explanation") or "",
            )
        )

    response = result_schema.StudentResultResponse(
        quiz_id=quiz.id,
        quiz_title=quiz.title,
        score=result.score,
        correct_answers=result.correct_answers,
        total_questions=len(quiz.questions),
        completed_at=result.completed_at,
        time_spent=result.time_spent,
        questions=breakdown,
    )
    await cache.set_with_ttl(cache_key, response.model_dump(mode="json"), cache_keys.STUDENT_RESULT_TTL)
    return response


async def get_all_results_for_student(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
) -> list[result_schema.StudentResultSummary]:
    """학생의 전체 결과 (최신순)"""
    cache_key = cache_keys.student_results(student_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return [result_schema.StudentResultSummary.model_validate(item) for item in cached]

    # 퀴즈가 삭제된 결과는 join에서 제외됨
    rows = await result_crud.get_results_with_quiz_by_student(session, student_id)
    summaries = [
        result_schema.StudentResultSummary(
            quiz_id=result.quiz_id,
            quiz_title=title,
            score=result.score,
            correct_answers=result.correct_answers,
            completed_at=result.completed_at,
            time_spent=result.time_spent,
        )
        for result, title in rows
    ]

    await cache.set_with_ttl(
        cache_key,
        [s.model_dump(mode="json") for s in summaries],
        cache_keys.STUDENT_RESULTS_TTL,
    )
    return summaries


async def get_student_stats(session: AsyncSession, student_id: int) -> result_schema.StudentStatsResponse:
    """학생 평균 점수"""
    scores = await result_crud.get_scores_by_student(session, student_id)
    return result_schema.StudentStatsResponse(average_score=average_score(scores))


async def get_quiz_counts(session: AsyncSession, student_id: int) -> result_schema.QuizCountsResponse:
    """가입 배치의 전체 퀴즈 수와 응시 가능한 퀴즈 수"""
    student = await user_crud.get_student_with_batches(session, student_id)
    if not student:
        raise StudentNotFoundError(student_id)

    quizzes = await quiz_crud.get_quizzes_by_batches(session, [b.id for b in student.batches])
    completed = await result_crud.get_completed_quiz_ids(session, student_id)

    now = utcnow()
    active = sum(
        1 for q in quizzes
        if q.id not in completed and q.deadline is not None and as_utc(q.deadline) > now
    )
    return result_schema.QuizCountsResponse(total_quizzes=len(quizzes), active_quizzes=active)


async def get_leaderboard(
    session: AsyncSession,
    cache: CacheBackend,
    teacher_id: int,
    batch_id: int | None = None,
    quiz_id: int | None = None,
) -> result_schema.LeaderboardResponse:
    """교사 퀴즈 리더보드 (점수 내림차순, 동점이면 먼저 제출한 순)"""
    cache_key = cache_keys.leaderboard(teacher_id, batch_id, quiz_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return result_schema.LeaderboardResponse.model_validate(cached)

    if batch_id is not None:
        batch = await batch_crud.get_batch_by_id(session, batch_id)
        if not batch:
            raise BatchNotFoundError(batch_id)
        if batch.teacher_id != teacher_id:
            raise ForbiddenError("해당 배치의 리더보드를 볼 권한이 없습니다")

    quizzes = await quiz_crud.find_teacher_quizzes(session, teacher_id, batch_id=batch_id, quiz_id=quiz_id)
    if not quizzes:
        response = result_schema.LeaderboardResponse(leaderboard=[], quiz_options=[], batch_options=[])
        await cache.set_with_ttl(cache_key, response.model_dump(mode="json"), cache_keys.LEADERBOARD_TTL)
        return response

    titles = {q.id: q.title for q in quizzes}
    rows = await result_crud.get_leaderboard_rows(session, list(titles))
    leaderboard = [
        result_schema.LeaderboardEntry(
            rank=rank,
            student_id=student.id,
            name=student.name,
            email=student.email,
            quiz_id=result.quiz_id,
            quiz_title=titles[result.quiz_id],
            score=result.score,
            submitted_at=result.completed_at,
        )
        for rank, (result, student) in enumerate(rows, start=1)
    ]

    batch_options = []
    if batch_id is None:
        batches = await batch_crud.get_batches_by_teacher(session, teacher_id)
        batch_options = [result_schema.BatchOption(id=b.id, name=b.name) for b in batches]

    response = result_schema.LeaderboardResponse(
        leaderboard=leaderboard,
        quiz_options=[result_schema.QuizOption(id=q.id, title=q.title) for q in quizzes],
        batch_options=batch_options,
    )
    await cache.set_with_ttl(cache_key, response.model_dump(mode="json"), cache_keys.LEADERBOARD_TTL)
    logger.debug(f"리더보드 생성: key={cache_key}, entries={len(leaderboard)}")
    return response


async def get_teacher_dashboard(
    session: AsyncSession,
    teacher_id: int,
) -> dashboard_schema.TeacherDashboardResponse:
    """교사 대시보드 지표와 최근 퀴즈 5개"""
    rows = await quiz_crud.get_quizzes_by_teacher_with_batch(session, teacher_id)
    quizzes = [quiz for quiz, _ in rows]

    batch_ids = sorted({q.batch_id for q in quizzes})
    member_counts = await batch_crud.count_members_by_batch(session, batch_ids)
    active_students = await batch_crud.count_distinct_students(session, batch_ids)
    total_batches = await batch_crud.count_batches_by_teacher(session, teacher_id)

    recent = [
        dashboard_schema.RecentQuiz(
            id=quiz.id,
            title=quiz.title,
            batch=batch_name or "N/A",
            students=member_counts.get(quiz.batch_id, 0),
            avg_score=quiz.avg_score or 0,
        )
        for quiz, batch_name in rows[:5]
    ]

    return dashboard_schema.TeacherDashboardResponse(
        metrics=dashboard_schema.TeacherDashboardMetrics(
            total_quizzes=len(quizzes),
            active_students=active_students,
            avg_score=average_score(q.avg_score or 0 for q in quizzes),
            total_batches=total_batches,
        ),
        quizzes=recent,
    )
