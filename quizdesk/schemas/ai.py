from pydantic import BaseModel, Field


class AIQuizDraftQuestion(BaseModel):
    """AI 생성 문항 (정답은 인덱스)"""
    question: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct: int = Field(..., ge=0)
    explanation: str = ""


class AIQuizDraft(BaseModel):
    """AI 생성 퀴즈 초안 (Structured Output)"""
    title: str = ""
    questions: list[AIQuizDraftQuestion] = Field(default_factory=list)
    message: str | None = Field(None, description="생성 실패 시 안내 메시지")


class GenerateQuizResponse(BaseModel):
    batch_id: int
    quiz: AIQuizDraft


class AskQuestionRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=2000)


class AskQuestionResponse(BaseModel):
    answer: str
    cached: bool
