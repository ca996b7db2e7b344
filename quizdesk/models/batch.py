from sqlalchemy import Column, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizdesk.models.base import Base, TimestampMixin

# 배치 멤버십: 한 행이 batch.students / user.batches 양쪽을 동시에 표현
batch_members = Table(
    "batch_members",
    Base.metadata,
    Column("batch_id", ForeignKey("batches.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True),
)


class Batch(Base, TimestampMixin):
    __tablename__ = "batches"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    teacher_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    teacher: Mapped["User"] = relationship("User", back_populates="owned_batches")
    students: Mapped[list["User"]] = relationship(
        "User",
        secondary=batch_members,
        back_populates="batches",
    )
