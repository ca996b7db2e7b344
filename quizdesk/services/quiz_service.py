import logging

from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.core import cache_keys
from quizdesk.core.cache import CacheBackend
from quizdesk.crud import batch as batch_crud, quiz as quiz_crud, result as result_crud, user as user_crud
from quizdesk.exceptions import (
    BatchNotFoundError,
    CorrectAnswerNotFoundError,
    ForbiddenError,
    QuizNotFoundError,
    StudentNotFoundError,
    ValidationError,
)
from quizdesk.models.quiz import Quiz
from quizdesk.schemas import quiz as quiz_schema
from quizdesk.utils.dates import as_utc, utcnow

logger = logging.getLogger(__name__)


def resolve_correct_answers(questions: list[quiz_schema.QuestionCreate]) -> list[dict]:
    """정답 선택지 값을 인덱스로 변환

    Raises:
        CorrectAnswerNotFoundError: 정답 값이 선택지에 없을 때 (몇 번 문제인지 포함)
    """
    formatted = []
    for number, q in enumerate(questions, start=1):
        try:
            correct_index = q.options.index(q.correct_answer)
        except ValueError:
            raise CorrectAnswerNotFoundError(number, q.question, q.correct_answer)
        formatted.append({
            "question": q.question,
            "options": q.options,
            "correct_answer": correct_index,
            "explanation": q.explanation or "",
        })
    return formatted


def validate_draft(draft: quiz_schema.QuizDraft) -> list[dict]:
    """발행할 초안 검증 후 저장 형태로 변환"""
    if not draft.title or not draft.title.strip():
        raise ValidationError("퀴즈 제목은 필수입니다")
    if not draft.questions:
        raise ValidationError("문항이 최소 1개 이상 필요합니다")

    formatted = []
    for number, q in enumerate(draft.questions, start=1):
        if q.correct >= len(q.options):
            raise ValidationError(
                f"{number}번 문제의 정답 인덱스({q.correct})가 선택지 범위를 벗어났습니다: {q.question}"
            )
        formatted.append({
            "question": q.question,
            "options": q.options,
            "correct_answer": q.correct,
            "explanation": q.explanation or "",
        })
    return formatted


async def _get_owned_batch(session: AsyncSession, teacher_id: int, batch_id: int):
    batch = await batch_crud.get_batch_by_id(session, batch_id)
    if not batch:
        raise BatchNotFoundError(batch_id)
    if batch.teacher_id != teacher_id:
        raise ForbiddenError("해당 배치에 퀴즈를 출제할 권한이 없습니다")
    return batch


async def invalidate_quiz_listings(cache: CacheBackend, teacher_id: int, batch_id: int) -> None:
    """퀴즈 생성 후 교사/학생 목록 캐시 무효화"""
    await cache.delete(cache_keys.teacher_quizzes(teacher_id))
    await cache.invalidate(cache_keys.batch_quizzes_pattern(batch_id))
    await cache.invalidate(cache_keys.leaderboard_pattern(teacher_id))


async def create_quiz(
    session: AsyncSession,
    cache: CacheBackend,
    teacher_id: int,
    request: quiz_schema.QuizCreateRequest,
) -> quiz_schema.QuizResponse:
    """퀴즈 직접 출제 (정답을 선택지 값으로 입력)"""
    # 정답 변환이 실패하면 아무 것도 저장하지 않음
    questions = resolve_correct_answers(request.questions)
    await _get_owned_batch(session, teacher_id, request.batch_id)

    quiz = await quiz_crud.create_quiz(
        session,
        teacher_id=teacher_id,
        batch_id=request.batch_id,
        title=request.title,
        questions=questions,
        source=request.source,
        deadline=request.deadline,
        duration=request.duration,
    )
    await invalidate_quiz_listings(cache, teacher_id, request.batch_id)

    logger.info(f"퀴즈 생성: quiz_id={quiz.id}, batch_id={quiz.batch_id}, questions={len(questions)}")
    return quiz_schema.QuizResponse.model_validate(quiz)


async def publish_quiz(
    session: AsyncSession,
    cache: CacheBackend,
    teacher_id: int,
    request: quiz_schema.QuizPublishRequest,
) -> quiz_schema.QuizResponse:
    """AI/수동 초안 발행 (정답을 인덱스로 입력)"""
    questions = validate_draft(request.quiz)
    await _get_owned_batch(session, teacher_id, request.batch_id)

    draft = request.quiz
    quiz = await quiz_crud.create_quiz(
        session,
        teacher_id=teacher_id,
        batch_id=request.batch_id,
        title=draft.title.strip(),
        questions=questions,
        source=draft.source,
        deadline=draft.deadline,
        duration=draft.duration,
    )
    await invalidate_quiz_listings(cache, teacher_id, request.batch_id)

    logger.info(f"퀴즈 발행: quiz_id={quiz.id}, batch_id={quiz.batch_id}, source={quiz.source.value}")
    return quiz_schema.QuizResponse.model_validate(quiz)


async def get_teacher_quizzes(
    session: AsyncSession,
    cache: CacheBackend,
    teacher_id: int,
) -> quiz_schema.TeacherQuizListResponse:
    """교사의 퀴즈 목록"""
    cache_key = cache_keys.teacher_quizzes(teacher_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return quiz_schema.TeacherQuizListResponse.model_validate(cached)

    rows = await quiz_crud.get_quizzes_by_teacher_with_batch(session, teacher_id)
    quizzes = []
    for quiz, batch_name in rows:
        item = quiz_schema.TeacherQuizResponse.model_validate(quiz)
        item.batch_name = batch_name
        quizzes.append(item)

    response = quiz_schema.TeacherQuizListResponse(quizzes=quizzes, total=len(quizzes))
    await cache.set_with_ttl(cache_key, response.model_dump(mode="json"), cache_keys.TEACHER_QUIZZES_TTL)
    return response


async def get_student_quiz(
    session: AsyncSession,
    student_id: int,
    quiz_id: int,
) -> quiz_schema.StudentQuizResponse:
    """응시용 퀴즈 조회 (정답 제외, 배치 멤버만)"""
    quiz = await quiz_crud.get_quiz_by_id(session, quiz_id)
    if not quiz:
        raise QuizNotFoundError(quiz_id)
    if not await batch_crud.is_member(session, quiz.batch_id, student_id):
        raise ForbiddenError("해당 배치의 멤버가 아닙니다")

    return quiz_schema.StudentQuizResponse(
        id=quiz.id,
        title=quiz.title,
        duration=quiz.duration or 30,
        deadline=quiz.deadline,
        questions=[
            quiz_schema.StudentQuestion(question=q["question"], options=q["options"])
            for q in quiz.questions
        ],
    )


def quiz_status(quiz: Quiz, completed: bool, now=None) -> quiz_schema.QuizStatus:
    """응시 상태: 결과 있음 → completed, 마감 지남 → overdue, 그 외 available"""
    if completed:
        return "completed"
    now = now or utcnow()
    if quiz.deadline is not None and as_utc(quiz.deadline) < now:
        return "overdue"
    return "available"


async def get_quizzes_by_batch(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
    batch_id: int,
) -> list[quiz_schema.BatchQuizItem]:
    """배치 퀴즈 목록과 학생별 응시 상태"""
    if not await batch_crud.is_member(session, batch_id, student_id):
        raise ForbiddenError("해당 배치의 멤버가 아닙니다")

    cache_key = cache_keys.student_batch_quizzes(student_id, batch_id)
    cached = await cache.get(cache_key)
    if cached is not None:
        return [quiz_schema.BatchQuizItem.model_validate(item) for item in cached]

    # 마감일 정렬은 쿼리에서 수행, 이후 재정렬하지 않음
    quizzes = await quiz_crud.get_quizzes_by_batch(session, batch_id)
    results = await result_crud.get_results_by_student_for_quizzes(
        session, student_id, [q.id for q in quizzes]
    )

    now = utcnow()
    items = []
    for quiz in quizzes:
        result = results.get(quiz.id)
        items.append(
            quiz_schema.BatchQuizItem(
                id=quiz.id,
                title=quiz.title,
                duration=quiz.duration,
                deadline=quiz.deadline,
                question_count=len(quiz.questions),
                status=quiz_status(quiz, result is not None, now),
                score=result.score if result else None,
            )
        )

    await cache.set_with_ttl(
        cache_key,
        [item.model_dump(mode="json") for item in items],
        cache_keys.STUDENT_BATCH_QUIZZES_TTL,
    )
    return items


async def get_active_quizzes(
    session: AsyncSession,
    student_id: int,
) -> list[quiz_schema.ActiveQuizItem]:
    """가입한 모든 배치에서 마감 전이고 아직 제출하지 않은 퀴즈"""
    student = await user_crud.get_student_with_batches(session, student_id)
    if not student:
        raise StudentNotFoundError(student_id)

    batch_ids = [b.id for b in student.batches]
    quizzes = await quiz_crud.get_upcoming_quizzes_by_batches(session, batch_ids, utcnow())
    completed = await result_crud.get_completed_quiz_ids(session, student_id)

    return [
        quiz_schema.ActiveQuizItem(
            id=q.id,
            title=q.title,
            batch_id=q.batch_id,
            duration=q.duration,
            deadline=q.deadline,
            question_count=len(q.questions),
        )
        for q in quizzes
        if q.id not in completed
    ]
