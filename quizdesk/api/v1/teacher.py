import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.api.deps import CurrentUser, require_teacher
from quizdesk.core.cache import CacheBackend, get_cache
from quizdesk.core.config import settings
from quizdesk.exceptions import ValidationError
from quizdesk.models.base import get_db
from quizdesk.schemas import (
    ai as ai_schema,
    auth as auth_schema,
    batch as batch_schema,
    dashboard as dashboard_schema,
    quiz as quiz_schema,
    result as result_schema,
)
from quizdesk.services import (
    ai_service,
    auth_service,
    batch_service,
    pdf_service,
    quiz_service,
    result_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teacher", tags=["teacher"])

PDF_CONTENT_TYPES = {"application/pdf", "application/x-pdf"}


@router.get("/profile", response_model=auth_schema.UserResponse)
async def get_profile(
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
):
    """교사 프로필 조회 API"""
    return await auth_service.get_profile(db, user.user_id)


@router.get("/dashboard", response_model=dashboard_schema.TeacherDashboardResponse)
async def get_dashboard(
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
):
    """교사 대시보드 API"""
    return await result_service.get_teacher_dashboard(db, user.user_id)


@router.post("/create-batch", response_model=batch_schema.BatchCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_batch(
    request: batch_schema.BatchCreateRequest,
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """배치 생성 API"""
    batch = await batch_service.create_batch(db, cache, user.user_id, request)
    return batch_schema.BatchCreateResponse(message="배치가 생성되었습니다", batch=batch)


@router.get("/batches", response_model=list[batch_schema.TeacherBatchResponse])
async def get_batches(
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
):
    """교사 배치 목록 API (학생 포함)"""
    return await batch_service.list_teacher_batches(db, user.user_id)


@router.get("/quizzes", response_model=quiz_schema.TeacherQuizListResponse)
async def get_quizzes(
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """교사 퀴즈 목록 API"""
    return await quiz_service.get_teacher_quizzes(db, cache, user.user_id)


@router.post("/create-quiz", response_model=quiz_schema.QuizResponse, status_code=status.HTTP_201_CREATED)
async def create_quiz(
    request: quiz_schema.QuizCreateRequest,
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """퀴즈 직접 출제 API"""
    return await quiz_service.create_quiz(db, cache, user.user_id, request)


@router.post("/publish-quiz", response_model=quiz_schema.QuizResponse, status_code=status.HTTP_201_CREATED)
async def publish_quiz(
    request: quiz_schema.QuizPublishRequest,
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """퀴즈 초안 발행 API"""
    return await quiz_service.publish_quiz(db, cache, user.user_id, request)


@router.get("/leaderboard", response_model=result_schema.LeaderboardResponse)
async def get_leaderboard(
    batch_id: int | None = None,
    quiz_id: int | None = None,
    user: CurrentUser = Depends(require_teacher),
    db: AsyncSession = Depends(get_db),
    cache: CacheBackend = Depends(get_cache),
):
    """리더보드 API (batch_id, quiz_id 필터)"""
    return await result_service.get_leaderboard(db, cache, user.user_id, batch_id=batch_id, quiz_id=quiz_id)


@router.post("/upload-and-generate", response_model=ai_schema.GenerateQuizResponse)
async def upload_and_generate(
    file: UploadFile = File(...),
    batch_id: int = Form(..., alias="batchId"),
    user: CurrentUser = Depends(require_teacher),
):
    """PDF 업로드 후 AI 퀴즈 초안 생성 API (저장하지 않음)"""
    if file.content_type not in PDF_CONTENT_TYPES:
        raise ValidationError("PDF 파일만 업로드할 수 있습니다")

    content = await file.read()
    if not content:
        raise ValidationError("빈 파일입니다")
    if len(content) > settings.max_upload_size_bytes:
        raise ValidationError(f"파일 크기는 {settings.max_upload_size_mb}MB 이하여야 합니다")

    text = pdf_service.extract_text(content)
    logger.info(f"AI 퀴즈 생성 요청: teacher_id={user.user_id}, batch_id={batch_id}, chars={len(text)}")
    draft = await ai_service.generate_quiz_draft(text)
    return ai_schema.GenerateQuizResponse(batch_id=batch_id, quiz=draft)
