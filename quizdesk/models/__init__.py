from quizdesk.models.base import Base, get_db
from quizdesk.models.batch import Batch, batch_members
from quizdesk.models.quiz import Quiz, QuizSource
from quizdesk.models.result import Result
from quizdesk.models.user import User, UserRole

__all__ = ["Base", "User", "UserRole", "Batch", "batch_members", "Quiz", "QuizSource", "Result", "get_db"]
