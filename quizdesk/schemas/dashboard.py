from pydantic import BaseModel


class TeacherDashboardMetrics(BaseModel):
    total_quizzes: int
    active_students: int
    avg_score: int
    total_batches: int


class RecentQuiz(BaseModel):
    id: int
    title: str
    batch: str
    students: int
    avg_score: int


class TeacherDashboardResponse(BaseModel):
    """교사 대시보드 응답 스키마"""
    metrics: TeacherDashboardMetrics
    quizzes: list[RecentQuiz]
