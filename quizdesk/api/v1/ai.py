from fastapi import APIRouter, Depends

from quizdesk.api.deps import CurrentUser, get_current_user
from quizdesk.core.cache import CacheBackend, get_cache
from quizdesk.schemas import ai as ai_schema
from quizdesk.services import ai_service

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/ask-question", response_model=ai_schema.AskQuestionResponse)
async def ask_question(
    request: ai_schema.AskQuestionRequest,
    user: CurrentUser = Depends(get_current_user),
    cache: CacheBackend = Depends(get_cache),
):
    """AI 학습 질문 API"""
    return await ai_service.ask_question(cache, request.question)
