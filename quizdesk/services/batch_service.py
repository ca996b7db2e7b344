import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quizdesk.core import cache_keys
from quizdesk.core.cache import CacheBackend
from quizdesk.crud import batch as batch_crud, user as user_crud
from quizdesk.exceptions import (
    AlreadyJoinedError,
    BatchNameTakenError,
    BatchNotFoundError,
    StudentNotFoundError,
)
from quizdesk.schemas import batch as batch_schema

logger = logging.getLogger(__name__)


async def create_batch(
    session: AsyncSession,
    cache: CacheBackend,
    teacher_id: int,
    request: batch_schema.BatchCreateRequest,
) -> batch_schema.BatchResponse:
    """배치 생성 (이름 중복 불가)"""
    name = request.name.strip()
    if await batch_crud.get_batch_by_name(session, name):
        raise BatchNameTakenError(name)

    try:
        batch = await batch_crud.create_batch(session, name=name, teacher_id=teacher_id)
    except IntegrityError:
        await session.rollback()
        raise BatchNameTakenError(name)

    await cache.delete(cache_keys.ALL_BATCHES)
    # 필터 없는 리더보드의 batch_options 갱신
    await cache.invalidate(cache_keys.leaderboard_pattern(teacher_id))
    logger.info(f"배치 생성: batch_id={batch.id}, teacher_id={teacher_id}")
    return batch_schema.BatchResponse.model_validate(batch)


async def list_all_batches(
    session: AsyncSession,
    cache: CacheBackend,
) -> list[batch_schema.BatchWithTeacherResponse]:
    """가입 가능한 전체 배치 목록"""
    cached = await cache.get(cache_keys.ALL_BATCHES)
    if cached is not None:
        return [batch_schema.BatchWithTeacherResponse.model_validate(b) for b in cached]

    batches = await batch_crud.get_all_batches_with_teacher(session)
    responses = [
        batch_schema.BatchWithTeacherResponse(
            id=b.id,
            name=b.name,
            teacher_id=b.teacher_id,
            created_at=b.created_at,
            teacher_name=b.teacher.name,
            teacher_email=b.teacher.email,
        )
        for b in batches
    ]
    await cache.set_with_ttl(
        cache_keys.ALL_BATCHES,
        [r.model_dump(mode="json") for r in responses],
        cache_keys.ALL_BATCHES_TTL,
    )
    return responses


async def list_teacher_batches(
    session: AsyncSession,
    teacher_id: int,
) -> list[batch_schema.TeacherBatchResponse]:
    """교사의 배치 목록 (학생 포함)"""
    batches = await batch_crud.get_batches_by_teacher(session, teacher_id, load_students=True)
    return [batch_schema.TeacherBatchResponse.model_validate(b) for b in batches]


async def join_batch(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
    batch_id: int,
) -> batch_schema.JoinBatchResponse:
    """배치 가입 (이미 가입한 경우 ConflictError)"""
    batch = await batch_crud.get_batch_by_id(session, batch_id)
    if not batch:
        raise BatchNotFoundError(batch_id)

    student = await user_crud.get_student_with_batches(session, student_id)
    if not student:
        raise StudentNotFoundError(student_id)

    if await batch_crud.is_member(session, batch_id, student_id):
        raise AlreadyJoinedError(batch_id)

    try:
        await batch_crud.add_member(session, batch_id, student_id)
    except IntegrityError:
        # 동시 가입 요청: 멤버십 PK 위반
        await session.rollback()
        raise AlreadyJoinedError(batch_id)

    await cache.delete(cache_keys.student_batch_quizzes(student_id, batch_id))
    logger.info(f"배치 가입: student_id={student_id}, batch_id={batch_id}")
    return batch_schema.JoinBatchResponse(message="배치에 가입했습니다", batch=batch.name)


async def leave_batch(
    session: AsyncSession,
    cache: CacheBackend,
    student_id: int,
    batch_id: int,
) -> None:
    """배치 탈퇴 (가입하지 않은 배치면 아무 것도 하지 않음)"""
    batch = await batch_crud.get_batch_by_id(session, batch_id)
    if not batch:
        raise BatchNotFoundError(batch_id)

    student = await user_crud.get_student_with_batches(session, student_id)
    if not student:
        raise StudentNotFoundError(student_id)

    removed = await batch_crud.remove_member(session, batch_id, student_id)
    await cache.delete(cache_keys.student_batch_quizzes(student_id, batch_id))
    logger.info(f"배치 탈퇴: student_id={student_id}, batch_id={batch_id}, removed={removed}")


async def get_student_profile(
    session: AsyncSession,
    student_id: int,
) -> batch_schema.StudentProfileResponse:
    """학생 프로필 (가입 배치 이름 포함)"""
    student = await user_crud.get_student_with_batches(session, student_id)
    if not student:
        raise StudentNotFoundError(student_id)
    return batch_schema.StudentProfileResponse.model_validate(student)
