from quizdesk.schemas.ai import (
    AIQuizDraft,
    AIQuizDraftQuestion,
    AskQuestionRequest,
    AskQuestionResponse,
    GenerateQuizResponse,
)
from quizdesk.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RegisterRequest,
    RegisterResponse,
    TokenCheckResponse,
    UserResponse,
)
from quizdesk.schemas.batch import (
    BatchCreateRequest,
    BatchCreateResponse,
    BatchResponse,
    BatchWithTeacherResponse,
    JoinBatchRequest,
    JoinBatchResponse,
    StudentProfileResponse,
    TeacherBatchResponse,
)
from quizdesk.schemas.dashboard import TeacherDashboardResponse
from quizdesk.schemas.quiz import (
    ActiveQuizItem,
    BatchQuizItem,
    QuizCreateRequest,
    QuizPublishRequest,
    QuizResponse,
    StudentQuizResponse,
    TeacherQuizListResponse,
)
from quizdesk.schemas.result import (
    LeaderboardResponse,
    QuizCountsResponse,
    QuizSubmitRequest,
    StudentResultResponse,
    StudentResultSummary,
    StudentStatsResponse,
    SubmitResponse,
)

__all__ = [
    "AIQuizDraft",
    "AIQuizDraftQuestion",
    "AskQuestionRequest",
    "AskQuestionResponse",
    "GenerateQuizResponse",
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "MessageResponse",
    "TokenCheckResponse",
    "UserResponse",
    "BatchCreateRequest",
    "BatchCreateResponse",
    "BatchResponse",
    "BatchWithTeacherResponse",
    "TeacherBatchResponse",
    "JoinBatchRequest",
    "JoinBatchResponse",
    "StudentProfileResponse",
    "TeacherDashboardResponse",
    "QuizCreateRequest",
    "QuizPublishRequest",
    "QuizResponse",
    "TeacherQuizListResponse",
    "StudentQuizResponse",
    "BatchQuizItem",
    "ActiveQuizItem",
    "QuizSubmitRequest",
    "SubmitResponse",
    "StudentResultResponse",
    "StudentResultSummary",
    "StudentStatsResponse",
    "QuizCountsResponse",
    "LeaderboardResponse",
]
