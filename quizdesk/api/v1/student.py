from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.api.deps import CurrentUser, require_student
from quizdesk.core.cache import CacheBackend, get_cache
from quizdesk.models.base import get_db
from quizdesk.schemas import auth as auth_schema, batch as batch_schema, quiz as quiz_schema, result as result_schema
from quizdesk.services import batch_service, quiz_service, result_service, submission_service

router = APIRouter(prefix="/student", tags=["student"])


@router.get("/profile", response_model=batch_schema.StudentProfileResponse)
async def get_profile(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """학생 프로필 조회 API"""
    return await batch_service.get_student_profile(db, user.user_id)


@router.get("/batches", response_model=list[batch_schema.BatchWithTeacherResponse])
async def get_batches(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """가입 가능한 배치 목록 API"""
    return await batch_service.list_all_batches(db, cache)


@router.post("/join-batch", response_model=batch_schema.JoinBatchResponse)
async def join_batch(
    request: batch_schema.JoinBatchRequest,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """배치 가입 API"""
    return await batch_service.join_batch(db, cache, user.user_id, request.batch_id)


@router.delete("/leave-batch/{batch_id}", response_model=auth_schema.MessageResponse)
async def leave_batch(
    batch_id: int,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """배치 탈퇴 API"""
    await batch_service.leave_batch(db, cache, user.user_id, batch_id)
    return auth_schema.MessageResponse(message="배치에서 탈퇴했습니다")


@router.get("/batch/{batch_id}/quizzes", response_model=list[quiz_schema.BatchQuizItem])
async def get_batch_quizzes(
    batch_id: int,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """배치 퀴즈 목록 API (응시 상태 포함)"""
    return await quiz_service.get_quizzes_by_batch(db, cache, user.user_id, batch_id)


@router.get("/active-quizzes", response_model=list[quiz_schema.ActiveQuizItem])
async def get_active_quizzes(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """응시 가능한 퀴즈 목록 API"""
    return await quiz_service.get_active_quizzes(db, user.user_id)


@router.get("/quiz/{quiz_id}", response_model=quiz_schema.StudentQuizResponse)
async def get_quiz(
    quiz_id: int,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """응시용 퀴즈 조회 API (정답 제외)"""
    return await quiz_service.get_student_quiz(db, user.user_id, quiz_id)


@router.post("/submit", response_model=result_schema.SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_quiz(
    request: result_schema.QuizSubmitRequest,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """퀴즈 제출 및 채점 API"""
    result = await submission_service.submit_quiz(db, cache, user.user_id, request)
    return result_schema.SubmitResponse(message="퀴즈가 제출되었습니다", result=result)


@router.get("/result/{quiz_id}", response_model=result_schema.StudentResultResponse)
async def get_result(
    quiz_id: int,
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """퀴즈 결과 상세 API"""
    return await result_service.get_student_result(db, cache, user.user_id, quiz_id)


@router.get("/my-results", response_model=list[result_schema.StudentResultSummary])
async def get_my_results(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """전체 결과 목록 API"""
    return await result_service.get_all_results_for_student(db, cache, user.user_id)


@router.get("/stats", response_model=result_schema.StudentStatsResponse)
async def get_stats(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """평균 점수 API"""
    return await result_service.get_student_stats(db, user.user_id)


@router.get("/quiz-counts", response_model=result_schema.QuizCountsResponse)
async def get_quiz_counts(
    user: CurrentUser = Depends(require_student),
    db: AsyncSession = Depends(get_db),
):
    """전체/응시 가능 퀴즈 수 API"""
    return await result_service.get_quiz_counts(db, user.user_id)
