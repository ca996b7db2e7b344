import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.core import cache_keys
from quizdesk.core.cache import CacheBackend
from quizdesk.crud import quiz as quiz_crud, result as result_crud
from quizdesk.exceptions import DuplicateSubmissionError, QuizNotFoundError
from quizdesk.schemas import result as result_schema
from quizdesk.utils.scoring import average_score, percent_score

logger = logging.getLogger(__name__)


def grade_answers(questions: list[dict], answers: list[result_schema.AnswerItem]) -> int:
    """정답 개수 계산

    question_index가 없거나 범위를 벗어난 답안은 무시하고,
    같은 문항에 대한 답안이 여러 개면 첫 번째 답안만 채점한다.
    """
    correct = 0
    graded: set[int] = set()
    for answer in answers:
        index = answer.question_index
        if index is None or not 0 <= index < len(questions) or index in graded:
            continue
        graded.add(index)
        if answer.selected_option is not None and questions[index]["correct_answer"] == answer.selected_option:
            correct += 1
    return correct


async def submit_quiz(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
    request: result_schema.QuizSubmitRequest,
) -> result_schema.ResultResponse:
    """퀴즈 제출 및 채점 (학생당 1회, 재제출 불가)"""
    existing = await result_crud.get_result(session, request.quiz_id, student_id)
    if existing:
        raise DuplicateSubmissionError(request.quiz_id)

    quiz = await quiz_crud.get_quiz_by_id(session, request.quiz_id)
    if not quiz or quiz.questions is None:
        raise QuizNotFoundError(request.quiz_id)

    correct = grade_answers(quiz.questions, request.answers)
    score = percent_score(correct, len(quiz.questions))

    try:
        result = await result_crud.create_result(
            session,
            quiz_id=quiz.id,
            student_id=student_id,
            score=score,
            correct_answers=correct,
            time_spent=request.time_spent,
            answers=[a.model_dump() for a in request.answers],
        )
    except IntegrityError:
        # 동시 제출: (quiz_id, student_id) unique 제약 위반
        await session.rollback()
        logger.warning(f"중복 제출 차단: quiz_id={request.quiz_id}, student_id={student_id}")
        raise DuplicateSubmissionError(request.quiz_id)

    scores = await result_crud.get_scores_by_quiz(session, quiz.id)
    await quiz_crud.update_avg_score(session, quiz, average_score(scores))

    await cache.delete(
        cache_keys.student_results(student_id),
        cache_keys.student_batch_quizzes(student_id, quiz.batch_id),
        cache_keys.teacher_quizzes(quiz.teacher_id),
    )
    await cache.invalidate(cache_keys.leaderboard_pattern(quiz.teacher_id))

    logger.info(
        f"퀴즈 제출: quiz_id={quiz.id}, student_id={student_id}, "
        f"score={score}, correct={correct}/{len(quiz.questions)}"
    )
    return result_schema.ResultResponse.model_validate(result)
