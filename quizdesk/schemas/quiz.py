from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from quizdesk.models.quiz import QuizSource
from quizdesk.schemas.base import RequestModel, normalize_deadline


class QuestionCreate(RequestModel):
    """직접 출제 문항 (정답을 선택지 값으로 전달)"""
    question: str = Field(..., min_length=1)
    options: list[str]
    correct_answer: str = Field(..., description="정답 선택지 텍스트")
    explanation: str | None = None


class QuizCreateRequest(RequestModel):
    """퀴즈 직접 출제 요청 스키마"""
    title: str = Field(..., min_length=1, max_length=200)
    batch_id: int
    questions: list[QuestionCreate]
    deadline: datetime | None = None
    duration: int = Field(30, ge=1, description="제한 시간 (분)")
    source: QuizSource = QuizSource.MANUAL

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        return normalize_deadline(v)


class DraftQuestion(RequestModel):
    """AI 초안 문항 (정답을 인덱스로 전달)"""
    question: str = Field(..., min_length=1)
    options: list[str]
    correct: int = Field(..., ge=0, description="정답 인덱스")
    explanation: str | None = None


class QuizDraft(RequestModel):
    """발행할 퀴즈 초안 (title/questions 검증은 서비스에서 수행)"""
    title: str = ""
    questions: list[DraftQuestion] = Field(default_factory=list)
    deadline: datetime | None = None
    duration: int = Field(30, ge=1)
    source: QuizSource = QuizSource.AI

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        return normalize_deadline(v)


class QuizPublishRequest(RequestModel):
    """퀴즈 초안 발행 요청 스키마"""
    batch_id: int
    quiz: QuizDraft


class QuestionResponse(BaseModel):
    question: str
    options: list[str]
    correct_answer: int
    explanation: str | None = None


class QuizResponse(BaseModel):
    """퀴즈 응답 스키마 (교사용, 정답 포함)"""
    id: int
    title: str
    teacher_id: int
    batch_id: int
    source: QuizSource
    deadline: datetime | None
    duration: int
    avg_score: int
    questions: list[QuestionResponse]
    created_at: datetime

    model_config = {"from_attributes": True}


class TeacherQuizResponse(QuizResponse):
    batch_name: str | None = None


class TeacherQuizListResponse(BaseModel):
    quizzes: list[TeacherQuizResponse]
    total: int


class StudentQuestion(BaseModel):
    """학생용 문항 (정답 숨김)"""
    question: str
    options: list[str]


class StudentQuizResponse(BaseModel):
    """응시용 퀴즈 응답 스키마"""
    id: int
    title: str
    duration: int
    deadline: datetime | None
    questions: list[StudentQuestion]


QuizStatus = Literal["available", "overdue", "completed"]


class BatchQuizItem(BaseModel):
    """배치 퀴즈 목록 항목 (응시 상태 포함)"""
    id: int
    title: str
    duration: int
    deadline: datetime | None
    question_count: int
    status: QuizStatus
    score: int | None = None


class ActiveQuizItem(BaseModel):
    id: int
    title: str
    batch_id: int
    duration: int
    deadline: datetime
    question_count: int
