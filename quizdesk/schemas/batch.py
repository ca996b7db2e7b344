from datetime import datetime

from pydantic import BaseModel, Field

from quizdesk.models.user import UserRole
from quizdesk.schemas.base import RequestModel


class BatchCreateRequest(RequestModel):
    """배치 생성 요청 스키마"""
    name: str = Field(..., min_length=1, max_length=100)


class JoinBatchRequest(RequestModel):
    """배치 가입 요청 스키마"""
    batch_id: int


class BatchBrief(BaseModel):
    id: int
    name: str

    model_config = {"from_attributes": True}


class StudentBrief(BaseModel):
    id: int
    name: str
    email: str

    model_config = {"from_attributes": True}


class BatchResponse(BaseModel):
    """배치 응답 스키마"""
    id: int
    name: str
    teacher_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class BatchWithTeacherResponse(BatchResponse):
    """학생용 배치 목록 응답 (교사 정보 포함)"""
    teacher_name: str
    teacher_email: str


class TeacherBatchResponse(BatchResponse):
    """교사용 배치 응답 (학생 목록 포함)"""
    students: list[StudentBrief]


class BatchCreateResponse(BaseModel):
    message: str
    batch: BatchResponse


class JoinBatchResponse(BaseModel):
    message: str
    batch: str


class StudentProfileResponse(BaseModel):
    """학생 프로필 응답 스키마"""
    id: int
    name: str
    email: str
    role: UserRole
    batches: list[BatchBrief]

    model_config = {"from_attributes": True}
