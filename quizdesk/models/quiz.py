import enum
from datetime import datetime

from sqlalchemy import JSON, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from quizdesk.models.base import Base, TimestampMixin


class QuizSource(str, enum.Enum):
    AI = "ai"
    MANUAL = "manual"


class Quiz(Base, TimestampMixin):
    __tablename__ = "quizzes"
    __table_args__ = (
        Index("ix_quizzes_teacher_created", "teacher_id", "created_at"),
        Index("ix_quizzes_batch_deadline", "batch_id", "deadline"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    batch_id: Mapped[int] = mapped_column(ForeignKey("batches.id"), nullable=False)
    source: Mapped[QuizSource] = mapped_column(
        Enum(QuizSource, name="quiz_source", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)  # 분 단위
    avg_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # [{"question": str, "options": [str], "correct_answer": int, "explanation": str}]
    questions: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
