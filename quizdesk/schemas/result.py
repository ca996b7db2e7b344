from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from quizdesk.schemas.base import RequestModel


class AnswerItem(RequestModel):
    """제출 답안 (selected_option 없음 = 미응답)"""
    question_index: int | None = None
    selected_option: int | None = None


class QuizSubmitRequest(RequestModel):
    """퀴즈 제출 요청 스키마"""
    quiz_id: int
    answers: list[AnswerItem]
    time_spent: str = Field("Unknown", max_length=50)

    @field_validator("time_spent", mode="before")
    @classmethod
    def stringify_time_spent(cls, v):
        if isinstance(v, (int, float)):
            return str(v)
        return v


class AnswerRecord(BaseModel):
    question_index: int | None = None
    selected_option: int | None = None


class ResultResponse(BaseModel):
    """제출 결과 응답 스키마"""
    id: int
    quiz_id: int
    student_id: int
    score: int
    correct_answers: int
    time_spent: str
    completed_at: datetime
    answers: list[AnswerRecord]

    model_config = {"from_attributes": True}


class SubmitResponse(BaseModel):
    message: str
    result: ResultResponse


class QuestionBreakdown(BaseModel):
    """문항별 채점 내역"""
    number: int
    question: str
    options: list[str]
    correct_answer: int
    user_answer: int = Field(..., description="선택한 인덱스 (미응답 -1)")
    is_correct: bool
    explanation: str = ""


class StudentResultResponse(BaseModel):
    """퀴즈 결과 상세 응답 스키마"""
    quiz_id: int
    quiz_title: str
    score: int
    correct_answers: int
    total_questions: int
    completed_at: datetime
    time_spent: str
    questions: list[QuestionBreakdown]


class StudentResultSummary(BaseModel):
    """내 결과 목록 항목"""
    quiz_id: int
    quiz_title: str
    score: int
    correct_answers: int
    completed_at: datetime
    time_spent: str


class StudentStatsResponse(BaseModel):
    average_score: int


class QuizCountsResponse(BaseModel):
    total_quizzes: int
    active_quizzes: int


class LeaderboardEntry(BaseModel):
    rank: int
    student_id: int
    name: str
    email: str
    quiz_id: int
    quiz_title: str
    score: int
    submitted_at: datetime


class QuizOption(BaseModel):
    id: int
    title: str


class BatchOption(BaseModel):
    id: int
    name: str


class LeaderboardResponse(BaseModel):
    """리더보드 응답 스키마"""
    leaderboard: list[LeaderboardEntry]
    quiz_options: list[QuizOption]
    batch_options: list[BatchOption]
