from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.api.deps import CurrentUser, get_current_user
from quizdesk.core.config import settings
from quizdesk.models.base import get_db
from quizdesk.schemas import auth as auth_schema
from quizdesk.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])

COOKIE_MAX_AGE = 24 * 60 * 60


def _set_token_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=COOKIE_MAX_AGE,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )


@router.post("/register", response_model=auth_schema.RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: auth_schema.RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    """회원가입 API"""
    user = await auth_service.register(db, request)
    return auth_schema.RegisterResponse(message="회원가입이 완료되었습니다", user=user)


@router.post("/login", response_model=auth_schema.LoginResponse)
async def login(
    request: auth_schema.LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """로그인 API (토큰을 httponly 쿠키로 설정)"""
    user, token = await auth_service.login(db, request)
    _set_token_cookie(response, token)
    return auth_schema.LoginResponse(message="로그인되었습니다", user=user, token=token)


@router.post("/logout", response_model=auth_schema.MessageResponse)
async def logout(response: Response):
    """로그아웃 API"""
    response.delete_cookie(
        key=settings.cookie_name,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
    )
    return auth_schema.MessageResponse(message="로그아웃되었습니다")


@router.get("/check", response_model=auth_schema.TokenCheckResponse)
async def check(user: CurrentUser = Depends(get_current_user)):
    """토큰 유효성 확인 API"""
    return auth_schema.TokenCheckResponse(valid=True, user_id=user.user_id, role=user.role)
