"""Student API 통합 테스트 (배치 가입/탈퇴, 응시, 결과)"""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from quizdesk.models.result import Result
from quizdesk.models.user import UserRole
from tests.factories import auth_headers, make_batch, make_quiz, make_user


@pytest.mark.asyncio
async def test_join_and_leave_batch_keeps_both_sides_in_sync(client, test_db_session, teacher, student):
    """가입/탈퇴가 학생 프로필과 교사 배치 목록에 동시에 반영"""
    batch = await make_batch(test_db_session, "알고리즘반", teacher)
    student_headers = auth_headers(student)
    teacher_headers = auth_headers(teacher)

    response = await client.post("/api/student/join-batch", json={"batchId": batch.id}, headers=student_headers)
    assert response.status_code == 200
    assert response.json()["batch"] == "알고리즘반"

    profile = (await client.get("/api/student/profile", headers=student_headers)).json()
    assert [b["id"] for b in profile["batches"]] == [batch.id]
    batches = (await client.get("/api/teacher/batches", headers=teacher_headers)).json()
    assert [s["id"] for s in batches[0]["students"]] == [student.id]

    response = await client.post("/api/student/join-batch", json={"batch_id": batch.id}, headers=student_headers)
    assert response.status_code == 409

    response = await client.delete(f"/api/student/leave-batch/{batch.id}", headers=student_headers)
    assert response.status_code == 200

    profile = (await client.get("/api/student/profile", headers=student_headers)).json()
    assert profile["batches"] == []
    batches = (await client.get("/api/teacher/batches", headers=teacher_headers)).json()
    assert batches[0]["students"] == []

    # 가입하지 않은 배치 탈퇴는 아무 것도 하지 않음
    response = await client.delete(f"/api/student/leave-batch/{batch.id}", headers=student_headers)
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_join_missing_batch(client, student):
    response = await client.post("/api/student/join-batch", json={"batchId": 999}, headers=auth_headers(student))
    assert response.status_code == 404
    assert response.json()["kind"] == "not_found"


@pytest.mark.asyncio
async def test_all_batches_listing(client, test_db_session, teacher, student):
    await make_batch(test_db_session, "A반", teacher)
    await make_batch(test_db_session, "B반", teacher)

    response = await client.get("/api/student/batches", headers=auth_headers(student))
    assert response.status_code == 200
    data = response.json()
    assert {b["name"] for b in data} == {"A반", "B반"}
    assert all(b["teacher_name"] == "김교사" for b in data)


@pytest.mark.asyncio
async def test_submit_flow_refreshes_reads(client, test_db_session, teacher, student):
    """제출 후 배치 목록, 결과, 통계, 리더보드가 즉시 갱신"""
    batch = await make_batch(test_db_session, "수학반", teacher, students=[student])
    quiz = await make_quiz(test_db_session, teacher, batch, deadline=datetime.now(timezone.utc) + timedelta(days=1))
    headers = auth_headers(student)

    teacher_listing = (await client.get("/api/teacher/quizzes", headers=auth_headers(teacher))).json()
    assert teacher_listing["quizzes"][0]["avg_score"] == 0

    listing = (await client.get(f"/api/student/batch/{batch.id}/quizzes", headers=headers)).json()
    assert listing[0]["status"] == "available"
    assert listing[0]["question_count"] == 2

    counts = (await client.get("/api/student/quiz-counts", headers=headers)).json()
    assert counts == {"total_quizzes": 1, "active_quizzes": 1}
    active = (await client.get("/api/student/active-quizzes", headers=headers)).json()
    assert [q["id"] for q in active] == [quiz.id]

    taking = (await client.get(f"/api/student/quiz/{quiz.id}", headers=headers)).json()
    assert "correct_answer" not in taking["questions"][0]

    response = await client.post(
        "/api/student/submit",
        json={
            "quizId": quiz.id,
            "answers": [{"questionIndex": 0, "selectedOption": 1}, {"questionIndex": 1, "selectedOption": 1}],
            "timeSpent": "1분 20초",
        },
        headers=headers,
    )
    assert response.status_code == 201
    assert response.json()["result"]["score"] == 50

    listing = (await client.get(f"/api/student/batch/{batch.id}/quizzes", headers=headers)).json()
    assert listing[0]["status"] == "completed"
    assert listing[0]["score"] == 50

    response = await client.post("/api/student/submit", json={"quizId": quiz.id, "answers": []}, headers=headers)
    assert response.status_code == 409
    stored = await test_db_session.scalar(
        select(func.count()).select_from(Result).where(Result.quiz_id == quiz.id, Result.student_id == student.id)
    )
    assert stored == 1

    teacher_listing = (await client.get("/api/teacher/quizzes", headers=auth_headers(teacher))).json()
    assert teacher_listing["quizzes"][0]["avg_score"] == 50

    detail = (await client.get(f"/api/student/result/{quiz.id}", headers=headers)).json()
    assert detail["total_questions"] == 2
    assert [q["is_correct"] for q in detail["questions"]] == [True, False]
    assert detail["questions"][0]["number"] == 1

    results = (await client.get("/api/student/my-results", headers=headers)).json()
    assert [r["quiz_id"] for r in results] == [quiz.id]
    stats = (await client.get("/api/student/stats", headers=headers)).json()
    assert stats["average_score"] == 50
    counts = (await client.get("/api/student/quiz-counts", headers=headers)).json()
    assert counts == {"total_quizzes": 1, "active_quizzes": 0}

    board = (await client.get("/api/teacher/leaderboard", headers=auth_headers(teacher))).json()
    assert [(e["rank"], e["student_id"], e["score"]) for e in board["leaderboard"]] == [(1, student.id, 50)]


@pytest.mark.asyncio
async def test_leaderboard_invalidated_by_new_submission(client, test_db_session, teacher, student):
    """리더보드 캐시 후 다른 학생이 제출하면 새 결과 반영"""
    other = await make_user(test_db_session, "최학생", "choi@example.com", UserRole.STUDENT)
    batch = await make_batch(test_db_session, "과학반", teacher, students=[student, other])
    quiz = await make_quiz(test_db_session, teacher, batch)
    teacher_headers = auth_headers(teacher)

    await client.post(
        "/api/student/submit",
        json={"quizId": quiz.id, "answers": [{"questionIndex": 0, "selectedOption": 1}]},
        headers=auth_headers(student),
    )
    board = (await client.get(f"/api/teacher/leaderboard?batch_id={batch.id}", headers=teacher_headers)).json()
    assert len(board["leaderboard"]) == 1
    assert board["batch_options"] == []

    await client.post(
        "/api/student/submit",
        json={
            "quizId": quiz.id,
            "answers": [{"questionIndex": 0, "selectedOption": 1}, {"questionIndex": 1, "selectedOption": 0}],
        },
        headers=auth_headers(other),
    )
    board = (await client.get(f"/api/teacher/leaderboard?batch_id={batch.id}", headers=teacher_headers)).json()
    assert [e["student_id"] for e in board["leaderboard"]] == [other.id, student.id]
    assert [e["rank"] for e in board["leaderboard"]] == [1, 2]


@pytest.mark.asyncio
async def test_non_member_cannot_read_batch_quizzes(client, test_db_session, teacher, student):
    batch = await make_batch(test_db_session, "비공개반", teacher)
    quiz = await make_quiz(test_db_session, teacher, batch)
    headers = auth_headers(student)

    response = await client.get(f"/api/student/batch/{batch.id}/quizzes", headers=headers)
    assert response.status_code == 403
    response = await client.get(f"/api/student/quiz/{quiz.id}", headers=headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_overdue_quiz_status(client, test_db_session, teacher, student):
    batch = await make_batch(test_db_session, "지난반", teacher, students=[student])
    await make_quiz(test_db_session, teacher, batch, deadline=datetime.now(timezone.utc) - timedelta(hours=1))

    listing = (await client.get(f"/api/student/batch/{batch.id}/quizzes", headers=auth_headers(student))).json()
    assert listing[0]["status"] == "overdue"
    active = (await client.get("/api/student/active-quizzes", headers=auth_headers(student))).json()
    assert active == []


@pytest.mark.asyncio
async def test_result_not_found(client, student):
    response = await client.get("/api/student/result/12345", headers=auth_headers(student))
    assert response.status_code == 404
