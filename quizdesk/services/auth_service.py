import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.core import security
from quizdesk.crud import user as user_crud
from quizdesk.exceptions import EmailAlreadyRegisteredError, InvalidCredentialsError, UserNotFoundError
from quizdesk.schemas import auth as auth_schema

logger = logging.getLogger(__name__)


async def register(
    session: AsyncSession,
    request: auth_schema.RegisterRequest,
) -> auth_schema.UserResponse:
    """회원가입"""
    existing = await user_crud.get_user_by_email(session, request.email)
    if existing:
        raise EmailAlreadyRegisteredError(request.email)

    try:
        user = await user_crud.create_user(
            session,
            name=request.name,
            email=request.email,
            password_hash=security.hash_password(request.password),
            role=request.role,
        )
    except IntegrityError:
        # 동시 가입으로 unique 제약 위반
        await session.rollback()
        raise EmailAlreadyRegisteredError(request.email)

    logger.info(f"회원가입 완료: user_id={user.id}, role={user.role.value}")
    return auth_schema.UserResponse.model_validate(user)


async def login(
    session: AsyncSession,
    request: auth_schema.LoginRequest,
) -> tuple[auth_schema.UserResponse, str]:
    """로그인 (사용자 정보와 토큰 반환)"""
    user = await user_crud.get_user_by_email(session, request.email)
    if not user or not security.verify_password(request.password, user.password_hash):
        logger.info(f"로그인 실패: email={request.email}")
        raise InvalidCredentialsError()

    token = security.create_access_token(user.id, user.role.value)
    logger.info(f"로그인 성공: user_id={user.id}")
    return auth_schema.UserResponse.model_validate(user), token


async def get_profile(session: AsyncSession, user_id: int) -> auth_schema.UserResponse:
    """사용자 프로필"""
    user = await user_crud.get_user_by_id(session, user_id)
    if not user:
        raise UserNotFoundError(user_id)
    return auth_schema.UserResponse.model_validate(user)
