"""Submission Service 테스트"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.crud import quiz as quiz_crud, result as result_crud
from quizdesk.exceptions import DuplicateSubmissionError, QuizNotFoundError
from quizdesk.schemas import result as result_schema
from quizdesk.services import submission_service
from tests.factories import FakeCache


QUESTIONS = [
    {"question": "Q1", "options": ["a", "b", "c"], "correct_answer": 0, "explanation": ""},
    {"question": "Q2", "options": ["a", "b", "c"], "correct_answer": 1, "explanation": ""},
    {"question": "Q3", "options": ["a", "b", "c"], "correct_answer": 2, "explanation": ""},
]


def answers(*pairs):
    return [result_schema.AnswerItem(question_index=q, selected_option=o) for q, o in pairs]


@pytest.fixture
def mock_db_session():
    """모킹된 DB 세션"""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def mock_quiz():
    """모킹된 퀴즈 (문항 3개)"""
    quiz = MagicMock()
    quiz.id = 10
    quiz.teacher_id = 1
    quiz.batch_id = 5
    quiz.questions = QUESTIONS
    return quiz


def mock_result(score: int, correct: int):
    result = MagicMock()
    result.id = 100
    result.quiz_id = 10
    result.student_id = 7
    result.score = score
    result.correct_answers = correct
    result.time_spent = "3분"
    result.completed_at = "2026-01-01T00:00:00+00:00"
    result.answers = []
    return result


def test_grade_answers_counts_correct():
    """정답 개수 계산"""
    assert submission_service.grade_answers(QUESTIONS, answers((0, 0), (1, 1), (2, 0))) == 2


def test_grade_answers_first_answer_wins():
    """같은 문항에 답안이 여러 개면 첫 번째만 채점"""
    assert submission_service.grade_answers(QUESTIONS, answers((0, 1), (0, 0))) == 0
    assert submission_service.grade_answers(QUESTIONS, answers((0, 0), (0, 0), (0, 0))) == 1


def test_grade_answers_ignores_invalid_index():
    """범위를 벗어나거나 없는 question_index는 무시"""
    items = answers((None, 0), (-1, 0), (3, 0), (1, 1))
    assert submission_service.grade_answers(QUESTIONS, items) == 1


def test_grade_answers_unanswered_is_wrong():
    """selected_option 없음은 오답"""
    assert submission_service.grade_answers(QUESTIONS, answers((0, None))) == 0


@pytest.mark.asyncio
async def test_submit_quiz_scores_and_updates_average(mock_db_session, mock_quiz):
    """제출 시 점수 계산, 평균 갱신, 캐시 무효화"""
    cache = FakeCache()
    cache.store["studentResults:7"] = []
    cache.store["student:7:batch:5:quizzes"] = []
    cache.store["teacherQuizzes:1"] = {}
    cache.store["leaderboard:1:all:all"] = {}
    cache.store["leaderboard:1:5:10"] = {}
    cache.store["leaderboard:2:all:all"] = {}

    request = result_schema.QuizSubmitRequest(quiz_id=10, answers=answers((0, 0), (1, 1)), time_spent="3분")

    with patch.object(result_crud, "get_result", new_callable=AsyncMock, return_value=None), \
         patch.object(quiz_crud, "get_quiz_by_id", new_callable=AsyncMock, return_value=mock_quiz), \
         patch.object(result_crud, "create_result", new_callable=AsyncMock, return_value=mock_result(67, 2)) as mock_create, \
         patch.object(result_crud, "get_scores_by_quiz", new_callable=AsyncMock, return_value=[67, 100]), \
         patch.object(quiz_crud, "update_avg_score", new_callable=AsyncMock) as mock_avg:
        response = await submission_service.submit_quiz(mock_db_session, cache, 7, request)

    assert response.score == 67
    assert mock_create.call_args.kwargs["score"] == 67
    assert mock_create.call_args.kwargs["correct_answers"] == 2
    mock_avg.assert_awaited_once_with(mock_db_session, mock_quiz, 84)

    assert "studentResults:7" not in cache.store
    assert "student:7:batch:5:quizzes" not in cache.store
    assert "teacherQuizzes:1" not in cache.store
    assert "leaderboard:1:all:all" not in cache.store
    assert "leaderboard:1:5:10" not in cache.store
    # 다른 교사의 리더보드는 유지
    assert "leaderboard:2:all:all" in cache.store


@pytest.mark.asyncio
async def test_submit_quiz_zero_questions_scores_zero(mock_db_session, mock_quiz):
    """문항이 없는 퀴즈는 0점"""
    mock_quiz.questions = []
    request = result_schema.QuizSubmitRequest(quiz_id=10, answers=[])

    with patch.object(result_crud, "get_result", new_callable=AsyncMock, return_value=None), \
         patch.object(quiz_crud, "get_quiz_by_id", new_callable=AsyncMock, return_value=mock_quiz), \
         patch.object(result_crud, "create_result", new_callable=AsyncMock, return_value=mock_result(0, 0)) as mock_create, \
         patch.object(result_crud, "get_scores_by_quiz", new_callable=AsyncMock, return_value=[0]), \
         patch.object(quiz_crud, "update_avg_score", new_callable=AsyncMock):
        await submission_service.submit_quiz(mock_db_session, FakeCache(), 7, request)

    assert mock_create.call_args.kwargs["score"] == 0


@pytest.mark.asyncio
async def test_submit_quiz_duplicate_precheck(mock_db_session):
    """이미 제출한 퀴즈는 ConflictError"""
    request = result_schema.QuizSubmitRequest(quiz_id=10, answers=[])

    with patch.object(result_crud, "get_result", new_callable=AsyncMock, return_value=mock_result(50, 1)), \
         patch.object(result_crud, "create_result", new_callable=AsyncMock) as mock_create:
        with pytest.raises(DuplicateSubmissionError):
            await submission_service.submit_quiz(mock_db_session, FakeCache(), 7, request)

    mock_create.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_quiz_duplicate_race(mock_db_session, mock_quiz):
    """동시 제출로 unique 제약 위반 시 ConflictError"""
    request = result_schema.QuizSubmitRequest(quiz_id=10, answers=answers((0, 0)))
    error = IntegrityError("INSERT", {}, Exception("uq_results_quiz_student"))

    with patch.object(result_crud, "get_result", new_callable=AsyncMock, return_value=None), \
         patch.object(quiz_crud, "get_quiz_by_id", new_callable=AsyncMock, return_value=mock_quiz), \
         patch.object(result_crud, "create_result", new_callable=AsyncMock, side_effect=error), \
         patch.object(quiz_crud, "update_avg_score", new_callable=AsyncMock) as mock_avg:
        with pytest.raises(DuplicateSubmissionError):
            await submission_service.submit_quiz(mock_db_session, FakeCache(), 7, request)

    mock_db_session.rollback.assert_awaited_once()
    mock_avg.assert_not_awaited()


@pytest.mark.asyncio
async def test_submit_quiz_not_found(mock_db_session):
    """퀴즈가 없으면 NotFoundError"""
    request = result_schema.QuizSubmitRequest(quiz_id=999, answers=[])

    with patch.object(result_crud, "get_result", new_callable=AsyncMock, return_value=None), \
         patch.object(quiz_crud, "get_quiz_by_id", new_callable=AsyncMock, return_value=None):
        with pytest.raises(QuizNotFoundError):
            await submission_service.submit_quiz(mock_db_session, FakeCache(), 7, request)


def test_submit_request_accepts_camel_case():
    """프론트엔드 camelCase 요청 허용, 숫자 timeSpent는 문자열로 저장"""
    request = result_schema.QuizSubmitRequest.model_validate({
        "quizId": 3,
        "answers": [{"questionIndex": 0, "selectedOption": 2}],
        "timeSpent": 125,
    })
    assert request.quiz_id == 3
    assert request.answers[0].selected_option == 2
    assert request.time_spent == "125"
