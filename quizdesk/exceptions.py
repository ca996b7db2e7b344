"""커스텀 예외 클래스 정의"""


class BaseAppError(Exception):
    """애플리케이션 기본 예외 클래스"""

    kind = "internal"

    def __init__(self, message: str, status_code: int = 500):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(BaseAppError):
    """잘못된 입력 (400)"""

    kind = "validation"

    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class UnauthenticatedError(BaseAppError):
    """인증 정보가 없거나 유효하지 않음 (401)"""

    kind = "unauthenticated"

    def __init__(self, message: str = "인증이 필요합니다"):
        super().__init__(message, status_code=401)


class ForbiddenError(BaseAppError):
    """인증되었지만 대상 리소스 권한 없음 (403)"""

    kind = "forbidden"

    def __init__(self, message: str = "접근 권한이 없습니다"):
        super().__init__(message, status_code=403)


class NotFoundError(BaseAppError):
    """참조한 ID를 찾을 수 없음 (404)"""

    kind = "not_found"

    def __init__(self, message: str):
        super().__init__(message, status_code=404)


class ConflictError(BaseAppError):
    """유일성/상태 위반 (409)"""

    kind = "conflict"

    def __init__(self, message: str):
        super().__init__(message, status_code=409)


class AIServiceUnavailableError(BaseAppError):
    """AI 생성 서비스 호출 실패 (503)"""

    kind = "ai_unavailable"

    def __init__(self, message: str = "AI 서비스를 일시적으로 사용할 수 없습니다. 잠시 후 다시 시도해주세요."):
        super().__init__(message, status_code=503)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: int):
        super().__init__(f"사용자를 찾을 수 없습니다: {user_id}")


class StudentNotFoundError(NotFoundError):
    def __init__(self, student_id: int):
        super().__init__(f"학생을 찾을 수 없습니다: {student_id}")


class BatchNotFoundError(NotFoundError):
    def __init__(self, batch_id: int):
        super().__init__(f"배치를 찾을 수 없습니다: {batch_id}")


class QuizNotFoundError(NotFoundError):
    def __init__(self, quiz_id: int):
        super().__init__(f"퀴즈를 찾을 수 없습니다: {quiz_id}")


class ResultNotFoundError(NotFoundError):
    def __init__(self, quiz_id: int):
        super().__init__(f"퀴즈 결과를 찾을 수 없습니다: {quiz_id}")


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self, email: str):
        super().__init__(f"이미 가입된 이메일입니다: {email}")


class BatchNameTakenError(ConflictError):
    def __init__(self, name: str):
        super().__init__(f"이미 존재하는 배치 이름입니다: {name}")


class AlreadyJoinedError(ConflictError):
    def __init__(self, batch_id: int):
        super().__init__(f"이미 가입한 배치입니다: {batch_id}")


class DuplicateSubmissionError(ConflictError):
    def __init__(self, quiz_id: int):
        super().__init__(f"이미 제출한 퀴즈입니다: {quiz_id}")


class CorrectAnswerNotFoundError(ValidationError):
    """정답 값이 선택지에 없음"""

    def __init__(self, question_number: int, question: str, correct_answer: str):
        self.question_number = question_number
        super().__init__(
            f"{question_number}번 문제의 정답 '{correct_answer}'이(가) 선택지에 없습니다: {question}"
        )


class InvalidCredentialsError(UnauthenticatedError):
    def __init__(self):
        super().__init__("이메일 또는 비밀번호가 올바르지 않습니다")
