"""캐시 키 규칙과 TTL (초)"""

STUDENT_RESULTS_TTL = 600
STUDENT_RESULT_TTL = 3600
STUDENT_BATCH_QUIZZES_TTL = 300
TEACHER_QUIZZES_TTL = 600
LEADERBOARD_TTL = 300
ALL_BATCHES_TTL = 3600
AI_ANSWER_TTL = 600

ALL_BATCHES = "allBatches"


def student_results(student_id: int) -> str:
    return f"studentResults:{student_id}"


def student_result(student_id: int, quiz_id: int) -> str:
    return f"studentResult:{student_id}:{quiz_id}"


def student_batch_quizzes(student_id: int, batch_id: int) -> str:
    return f"student:{student_id}:batch:{batch_id}:quizzes"


def batch_quizzes_pattern(batch_id: int) -> str:
    """배치의 모든 학생 퀴즈 목록 키"""
    return f"student:*:batch:{batch_id}:quizzes"


def teacher_quizzes(teacher_id: int) -> str:
    return f"teacherQuizzes:{teacher_id}"


def leaderboard(teacher_id: int, batch_id: int | None = None, quiz_id: int | None = None) -> str:
    return f"leaderboard:{teacher_id}:{batch_id or 'all'}:{quiz_id or 'all'}"


def leaderboard_pattern(teacher_id: int) -> str:
    """교사의 모든 리더보드 필터 조합"""
    return f"leaderboard:{teacher_id}:*"


def ai_answer(question: str) -> str:
    return f"ai:{question.strip().lower()}"
