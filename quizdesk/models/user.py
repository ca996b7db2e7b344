import enum

from sqlalchemy import Enum, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quizdesk.models.base import Base, TimestampMixin
from quizdesk.models.batch import batch_members


class UserRole(str, enum.Enum):
    STUDENT = "student"
    TEACHER = "teacher"


class User(Base, TimestampMixin):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.STUDENT,
    )

    # 학생이 가입한 배치 (batch_members 테이블 하나로 양방향 관리)
    batches: Mapped[list["Batch"]] = relationship(
        "Batch",
        secondary=batch_members,
        back_populates="students",
    )
    owned_batches: Mapped[list["Batch"]] = relationship("Batch", back_populates="teacher")
