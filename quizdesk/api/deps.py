from dataclasses import dataclass

from fastapi import Depends, Request

from quizdesk.core.config import settings
from quizdesk.core.security import decode_access_token
from quizdesk.exceptions import ForbiddenError, UnauthenticatedError
from quizdesk.models.user import UserRole


@dataclass(frozen=True)
class CurrentUser:
    """토큰에서 복원한 요청 사용자"""
    user_id: int
    role: UserRole


def _extract_token(request: Request) -> str | None:
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token
    # 쿠키가 없으면 Authorization: Bearer 헤더 사용
    authorization = request.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


async def get_current_user(request: Request) -> CurrentUser:
    token = _extract_token(request)
    if not token:
        raise UnauthenticatedError("로그인이 필요합니다")

    payload = decode_access_token(token)
    try:
        role = UserRole(payload["role"])
        user_id = int(payload["user_id"])
    except (TypeError, ValueError):
        raise UnauthenticatedError("유효하지 않은 토큰입니다")
    return CurrentUser(user_id=user_id, role=role)


def require_role(role: UserRole):
    """지정한 역할의 사용자만 허용하는 의존성"""

    async def checker(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role != role:
            raise ForbiddenError(f"{role.value} 권한이 필요합니다")
        return user

    return checker


require_student = require_role(UserRole.STUDENT)
require_teacher = require_role(UserRole.TEACHER)
