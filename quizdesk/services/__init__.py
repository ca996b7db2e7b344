from quizdesk.services import (
    ai_service,
    auth_service,
    batch_service,
    pdf_service,
    quiz_service,
    result_service,
    submission_service,
)

__all__ = [
    "ai_service",
    "auth_service",
    "batch_service",
    "pdf_service",
    "quiz_service",
    "result_service",
    "submission_service",
]
