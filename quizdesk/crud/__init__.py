from quizdesk.crud.batch import (
    add_member,
    create_batch,
    get_all_batches_with_teacher,
    get_batch_by_id,
    get_batch_by_name,
    get_batches_by_teacher,
    is_member,
    remove_member,
)
from quizdesk.crud.quiz import (
    create_quiz,
    find_teacher_quizzes,
    get_quiz_by_id,
    get_quizzes_by_batch,
    update_avg_score,
)
from quizdesk.crud.result import (
    create_result,
    get_leaderboard_rows,
    get_result,
    get_results_with_quiz_by_student,
    get_scores_by_quiz,
)
from quizdesk.crud.user import (
    create_user,
    get_student_with_batches,
    get_user_by_email,
    get_user_by_id,
)

__all__ = [
    "get_user_by_id",
    "get_user_by_email",
    "get_student_with_batches",
    "create_user",
    "get_batch_by_id",
    "get_batch_by_name",
    "create_batch",
    "get_all_batches_with_teacher",
    "get_batches_by_teacher",
    "is_member",
    "add_member",
    "remove_member",
    "get_quiz_by_id",
    "create_quiz",
    "update_avg_score",
    "get_quizzes_by_batch",
    "find_teacher_quizzes",
    "get_result",
    "create_result",
    "get_scores_by_quiz",
    "get_results_with_quiz_by_student",
    "get_leaderboard_rows",
]
