from pydantic import BaseModel, Field, field_validator

from quizdesk.models.user import UserRole
from quizdesk.schemas.base import RequestModel


class RegisterRequest(RequestModel):
    """회원가입 요청 스키마"""
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = UserRole.STUDENT

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class LoginRequest(RequestModel):
    """로그인 요청 스키마"""
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(BaseModel):
    """사용자 응답 스키마"""
    id: int
    name: str
    email: str
    role: UserRole

    model_config = {"from_attributes": True}


class RegisterResponse(BaseModel):
    message: str
    user: UserResponse


class LoginResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class MessageResponse(BaseModel):
    message: str


class TokenCheckResponse(BaseModel):
    valid: bool
    user_id: int
    role: UserRole
