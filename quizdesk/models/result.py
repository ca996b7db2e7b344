from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from quizdesk.models.base import Base


class Result(Base):
    __tablename__ = "results"
    __table_args__ = (
        # 학생당 퀴즈 1회 제출
        UniqueConstraint("quiz_id", "student_id", name="uq_results_quiz_student"),
        Index("ix_results_student_completed", "student_id", "completed_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    time_spent: Mapped[str] = mapped_column(String(50), nullable=False)
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    # [{"question_index": int, "selected_option": int | None}]
    answers: Mapped[list[dict]] = mapped_column(JSON, nullable=False, default=list)
