from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from quizdesk.core.config import settings
from quizdesk.exceptions import UnauthenticatedError


def _password_bytes(password: str) -> bytes:
    # bcrypt는 앞 72바이트만 사용
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    """비밀번호 bcrypt 해시 생성"""
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """비밀번호와 해시 비교"""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        # 손상된 해시
        return False


def create_access_token(user_id: int, role: str) -> str:
    """로그인 토큰 발급 (user_id, role, 만료 1일)"""
    expire = datetime.now(timezone.utc) + timedelta(days=settings.access_token_expire_days)
    payload = {"user_id": user_id, "role": role, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> dict:
    """토큰 검증 및 payload 반환"""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except jwt.ExpiredSignatureError:
        raise UnauthenticatedError("토큰이 만료되었습니다")
    except jwt.InvalidTokenError:
        raise UnauthenticatedError("유효하지 않은 토큰입니다")

    if "user_id" not in payload or "role" not in payload:
        raise UnauthenticatedError("유효하지 않은 토큰입니다")
    return payload
